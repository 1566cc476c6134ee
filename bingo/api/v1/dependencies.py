"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_game_service() : crée un GameService à partir d’une session DB.

get_current_identity() : identité (owner / partner) lue dans le bearer.

get_player_slot() : slot "him" / "her" prouvé par le header X-Player-Token.

🔹 Avantages :

Routes plus propres (pas de code dupliqué).

Facile à injecter dans plusieurs endpoints (Depends()).
"""

from typing import Any, Optional

from fastapi import Depends, Header, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlmodel import Session

from bingo.core.config import Settings
from bingo.db.session import get_session

from bingo.db.repositories.games import GameRepository
from bingo.db.repositories.progress import ProgressRepository
from bingo.db.repositories.secrets import SecretSquareRepository
from bingo.db.repositories.credentials import PlayerCredentialRepository

from bingo.features.games.services import GameService
from bingo.features.progress.services import ProgressService
from bingo.features.secrets.services import SecretSquareService
from bingo.features.sharing.services import SharingService
from bingo.features.boards.services import BoardService
from bingo.features.suggestions.services import SuggestionService

from bingo.security.tokens import JWTSettings, read_subject


# -----------------------------
# Settings (fixés par create_app)
# -----------------------------
def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_jwt_settings(settings: Settings = Depends(get_app_settings)) -> JWTSettings:
    return settings.jwt


# -----------------------------
# Repositories
# -----------------------------
def get_game_repository(session: Session = Depends(get_session)) -> GameRepository:
    return GameRepository(session)

def get_progress_repository(session: Session = Depends(get_session)) -> ProgressRepository:
    return ProgressRepository(session)

def get_secret_repository(session: Session = Depends(get_session)) -> SecretSquareRepository:
    return SecretSquareRepository(session)

def get_credential_repository(session: Session = Depends(get_session)) -> PlayerCredentialRepository:
    return PlayerCredentialRepository(session)


# -----------------------------
# Services
# -----------------------------
def get_game_service(
    game_repo: GameRepository = Depends(get_game_repository),
    progress_repo: ProgressRepository = Depends(get_progress_repository),
    secret_repo: SecretSquareRepository = Depends(get_secret_repository),
) -> GameService:
    return GameService(game_repo=game_repo, progress_repo=progress_repo, secret_repo=secret_repo)


def get_progress_service(
    game_repo: GameRepository = Depends(get_game_repository),
    progress_repo: ProgressRepository = Depends(get_progress_repository),
) -> ProgressService:
    return ProgressService(game_repo=game_repo, progress_repo=progress_repo)


def get_secret_service(
    game_repo: GameRepository = Depends(get_game_repository),
    secret_repo: SecretSquareRepository = Depends(get_secret_repository),
) -> SecretSquareService:
    return SecretSquareService(game_repo=game_repo, secret_repo=secret_repo)


def get_sharing_service(
    credential_repo: PlayerCredentialRepository = Depends(get_credential_repository),
    jwt_settings: JWTSettings = Depends(get_jwt_settings),
) -> SharingService:
    return SharingService(credential_repo=credential_repo, jwt_settings=jwt_settings)


def get_board_service(
    game_repo: GameRepository = Depends(get_game_repository),
    progress_repo: ProgressRepository = Depends(get_progress_repository),
) -> BoardService:
    return BoardService(game_repo=game_repo, progress_repo=progress_repo)


def get_ai_client(request: Request) -> Any:
    return getattr(request.app.state, "ai_client", None)


def get_suggestion_service(
    client: Any = Depends(get_ai_client),
    settings: Settings = Depends(get_app_settings),
) -> SuggestionService:
    return SuggestionService(client=client, model=settings.AI_MODEL)


# -----------------------------
# Identité (bearer) et slot (X-Player-Token)
# -----------------------------
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    jwt_settings: JWTSettings = Depends(get_jwt_settings),
) -> str:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        return read_subject(credentials.credentials, expected_typ="access", settings=jwt_settings)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")


def get_player_slot(
    x_player_token: Optional[str] = Header(default=None, alias="X-Player-Token"),
    jwt_settings: JWTSettings = Depends(get_jwt_settings),
) -> Optional[str]:
    """
    Slot prouvé par le header, ou None si absent.
    Un token présent mais invalide est refusé (401) plutôt qu'ignoré.
    """
    if not x_player_token:
        return None
    try:
        return read_subject(x_player_token, expected_typ="player", settings=jwt_settings)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired player token")


def require_slot(caller: Optional[str], player: str) -> None:
    """Écriture sur les données d'un slot : il faut le token de ce slot."""
    if caller is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Player token required")
    if caller != player:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
