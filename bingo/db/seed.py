"""
➡️ But : Charger les templates de soirée (et leurs cases secrètes) depuis un YAML.

Idempotent : un template déjà présent (même titre) n'est pas recréé,
un secret déjà présent (même slot + même texte) non plus.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from sqlmodel import Session

from bingo.db.repositories.games import GameRepository
from bingo.db.repositories.progress import ProgressRepository
from bingo.db.repositories.secrets import SecretSquareRepository
from bingo.features.games.schemas import GameCreateIn
from bingo.features.games.services import GameService

logger = logging.getLogger(__name__)

DEFAULT_OWNER = "system"


# -----------------------------
# YAML loader
# -----------------------------
def load_seed_yaml(seed_path: str | Path) -> Dict[str, Any]:
    path = Path(seed_path)
    if not path.exists():
        raise FileNotFoundError(f"Seed YAML introuvable: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Le YAML de seed doit contenir un objet racine (mapping).")
    return data


# -----------------------------
# Seed
# -----------------------------
def seed_templates(session: Session, data: Dict[str, Any]) -> List[int]:
    """Crée les templates manquants et complète leurs secrets. Retourne les ids créés."""
    game_repo = GameRepository(session)
    secret_repo = SecretSquareRepository(session)
    svc = GameService(
        game_repo=game_repo,
        progress_repo=ProgressRepository(session),
        secret_repo=secret_repo,
    )
    owner_id = data.get("owner_id") or DEFAULT_OWNER

    created: List[int] = []
    for item in data.get("templates", []):
        template = game_repo.get_template_by_title(item["title"])
        if template is None:
            fields = {k: v for k, v in item.items() if k != "secrets"}
            template = svc.create_game(GameCreateIn(**fields), owner_id=owner_id, is_template=True)
            created.append(template.id)

        existing = {(s.player, s.text) for s in secret_repo.list_by_game(template.id)}
        for secret in item.get("secrets", []):
            if (secret["player"], secret["text"]) in existing:
                continue
            secret_repo.create(
                player=secret["player"],
                game_id=template.id,
                text=secret["text"],
                description=secret.get("description", ""),
                checked=False,
                commit=False,
            )
        secret_repo.commit()

    logger.info("Seed done: %s template(s) created", len(created))
    return created


def seed_all(session: Session, seed_path: str | Path) -> List[int]:
    return seed_templates(session, load_seed_yaml(seed_path))
