"""
➡️ But : Configurer la base et gérer les sessions de base de données.

build_engine() : connexion à la base (sqlite:///bingo.db par défaut, Postgres via DATABASE_URL).

init_db() : crée les tables à partir des modèles SQLModel.

get_session() : dépendance FastAPI qui ouvre une session, la fournit aux routes, puis la ferme proprement.

L'engine n'est plus une variable globale du module : create_app() le construit,
le range dans app.state.engine, et get_session() le relit depuis la requête.

🔹 Avantages :

Un seul endroit pour gérer les connexions DB.

Réutilisable par injection (Depends(get_session)).

Les tests fournissent leur propre engine (SQLite en mémoire).
"""

from typing import Any, Dict, Iterator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

# Import all models for creating all tables
from bingo.db.models.games import Game  # noqa: F401
from bingo.db.models.progress import ProgressEntry  # noqa: F401
from bingo.db.models.secrets import SecretSquare  # noqa: F401
from bingo.db.models.credentials import PlayerCredential  # noqa: F401


def build_engine(url: str, *, echo: bool = False) -> Engine:
    assert url, "DATABASE_URL must be set"

    is_sqlite = url.startswith("sqlite:")
    in_memory = is_sqlite and (url in ("sqlite://", "sqlite:///:memory:"))

    kwargs: Dict[str, Any] = {}
    connect_args: Dict[str, Any] = {}
    if is_sqlite:
        # Requis pour SQLite quand utilisé dans un app serveur (multi-threads)
        connect_args["check_same_thread"] = False
    if in_memory:
        # une seule connexion partagée, sinon chaque session voit une base vide
        kwargs["poolclass"] = StaticPool

    engine = create_engine(
        url,
        echo=echo,
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,  # ping utile pour Postgres/MySQL ; inutile pour SQLite
        **kwargs,
    )
    return engine


def init_db(engine: Engine) -> None:
    """
    Crée les tables si elles n'existent pas (usage dev/demo).
    En prod avec Alembic, préfère des migrations.
    """
    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Iterator[Session]:
    """
    Dépendance FastAPI : fournit une session par requête.
    Utilisation :
        def route(..., session: Session = Depends(get_session)):
            ...
    """
    with Session(request.app.state.engine) as session:
        yield session
