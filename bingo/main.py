"""
➡️ But : assembler toutes les pièces du puzzle.

create_app(settings) crée l’instance FastAPI et configure :

les logs (configure_logging)

l'engine DB (rangé dans app.state.engine, relu par get_session)

le client IA (app.state.ai_client, None sans clé)

CORS, titre, version, tags, schéma OpenAPI personnalisé

les routers (ex : /api/v1/games).

Au démarrage (lifespan) : création des tables, puis seed des templates si SEED_ON_STARTUP.

🔹 Avantages :

Centralise la configuration du serveur HTTP.

Les tests construisent leur propre app (SQLite en mémoire, faux client IA).

Point unique d’exécution : uvicorn bingo.main:app --reload.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

from bingo.core.config import Settings, get_settings
from bingo.core.logging_config import configure_logging
from bingo.core.openapi import custom_openapi
from bingo.db.seed import seed_all
from bingo.db.session import build_engine, init_db
from bingo.features.suggestions.client import build_ai_client

from bingo.api.v1.routers import games, progress, secrets, sharing, suggestions

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(app.state.engine)
        if settings.SEED_ON_STARTUP:
            with Session(app.state.engine) as session:
                seed_all(session, settings.SEED_PATH)
        logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)
        yield
        app.state.engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "games", "description": "Parties, templates, écran de jeu et stats"},
            {"name": "progress", "description": "Cases cochées par slot"},
            {"name": "secrets", "description": "Cases secrètes par slot"},
            {"name": "sharing", "description": "PIN des slots et partage de la progression"},
            {"name": "ai", "description": "Suggestions de cases et de paris"},
        ],
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.DATABASE_URL, echo=False)
    app.state.ai_client = build_ai_client(settings)

    # CORS (ajustez selon vos besoins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    # Routers
    app.include_router(games.router, prefix="/api/v1")
    app.include_router(progress.router, prefix="/api/v1")
    app.include_router(secrets.router, prefix="/api/v1")
    app.include_router(sharing.router, prefix="/api/v1")
    app.include_router(suggestions.router, prefix="/api/v1")

    # Génération du schéma OpenAPI custom
    app.openapi = lambda: custom_openapi(app)
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("bingo.main:app", host="127.0.0.1", port=8080, reload=(get_settings().ENV == "dev")) # http://localhost:8080
