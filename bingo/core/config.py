"""
➡️ But : Centraliser tous les paramètres configurables (nom d’app, chemin DB, secrets, IA, etc.)

Utilise pydantic-settings pour charger automatiquement les variables d’environnement (.env, variables système…).

get_settings() fournit une instance unique (cache), que tu importes ailleurs :

from bingo.core.config import get_settings
print(get_settings().APP_NAME)

Les tests construisent leur propre Settings(...) et le passent à create_app().

🔹 Avantages :

Plus propre que des constantes éparpillées dans le code.

Facilite le passage entre environnements (dev / prod / test).
"""

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings

from bingo.security.tokens import JWTSettings


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "Dare-Bingo"
    ENV: str = "dev"  # dev | prod | test
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "bingo.db"  # fichier SQLite
    # Si tu veux forcer une URL différente (ex: Postgres), définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None

    # -----------------------------
    # Seed (templates + secrets par défaut)
    # -----------------------------
    SEED_PATH: str = str(Path(__file__).resolve().parent.parent / "db" / "seed_data.yaml")
    SEED_ON_STARTUP: bool = False

    # -----------------------------
    # JWT / Auth
    # -----------------------------
    JWT_SECRET_KEY: str = "CHANGE_ME"     # ⚠️ change en prod
    JWT_ISSUER: str = "dare-bingo"
    JWT_ALGORITHM: str = "HS256"

    ACCESS_TTL_MINUTES: int = 60          # token d'identité (fourni par l'OIDC en amont)
    PLAYER_TOKEN_TTL_HOURS: int = 72      # token de slot après login PIN

    # -----------------------------
    # IA (endpoint compatible OpenAI)
    # -----------------------------
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    AI_MODEL: str = "gpt-4o-mini"
    AI_TIMEOUT_SECONDS: float = 20.0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context):  # appelée automatiquement
        # DATABASE_URL par défaut depuis SQLITE_PATH si non fourni
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")

    # -----------------------------
    # Objets dérivés
    # -----------------------------
    @property
    def jwt(self) -> JWTSettings:
        """Objet JWT prêt à l'emploi pour les services."""
        return JWTSettings(
            secret=self.JWT_SECRET_KEY,
            issuer=self.JWT_ISSUER,
            algorithm=self.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=self.ACCESS_TTL_MINUTES),
            player_ttl=timedelta(hours=self.PLAYER_TOKEN_TTL_HOURS),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
