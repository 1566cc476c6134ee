"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable, Dict, List

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from bingo.core.config import Settings
from bingo.db.session import init_db
from bingo.main import create_app
from bingo.security.tokens import create_access_token, create_player_token

SEED_PATH = Path(__file__).resolve().parent.parent / "bingo" / "db" / "seed_data.yaml"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings isolés : base SQLite temporaire, pas de clé IA, pas de seed auto."""
    return Settings(
        ENV="test",
        LOG_LEVEL="WARNING",
        DATABASE_URL=f"sqlite:///{tmp_path / 'test_bingo.db'}",
        JWT_SECRET_KEY="test_jwt_secret",
        OPENAI_API_KEY=None,
        SEED_PATH=str(SEED_PATH),
        SEED_ON_STARTUP=False,
    )


@pytest.fixture
def app(test_settings: Settings):
    return create_app(test_settings)


@pytest.fixture
def client(app) -> TestClient:
    """Client de test ; le context manager déclenche le lifespan (création des tables)."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def session(app):
    """Session directe sur l'engine de l'app, pour les tests de service."""
    init_db(app.state.engine)
    with Session(app.state.engine) as session:
        yield session


# -----------------------------
# Tokens
# -----------------------------
@pytest.fixture
def auth_headers(test_settings: Settings) -> Callable[[str], Dict[str, str]]:
    """auth_headers("alice") -> header Authorization pour l'identité alice."""
    def _headers(identity: str) -> Dict[str, str]:
        token = create_access_token(identity=identity, settings=test_settings.jwt)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def player_headers(test_settings: Settings) -> Callable[[str], Dict[str, str]]:
    """player_headers("him") -> header X-Player-Token pour le slot him."""
    def _headers(player: str) -> Dict[str, str]:
        return {"X-Player-Token": create_player_token(player=player, settings=test_settings.jwt)}
    return _headers


# -----------------------------
# Données
# -----------------------------
def make_squares(grid_size: int = 3) -> List[Dict[str, str]]:
    return [{"text": f"Dare {i}", "description": f"Do dare number {i}"} for i in range(grid_size * grid_size)]


def make_game_payload(grid_size: int = 3, **overrides) -> Dict:
    payload = {
        "title": "Friday Date Night",
        "theme": "Flirty dinner out",
        "grid_size": grid_size,
        "squares": make_squares(grid_size),
        "bet_description": "Loser plans the next date",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_game(client: TestClient, auth_headers) -> Callable[..., Dict]:
    """create_game(owner="alice", grid_size=3, **overrides) -> JSON de la partie créée."""
    def _create(owner: str = "alice", grid_size: int = 3, **overrides) -> Dict:
        response = client.post(
            "/api/v1/games",
            json=make_game_payload(grid_size, **overrides),
            headers=auth_headers(owner),
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _create
