"""
➡️ But : Configurer les logs de l'application en un seul endroit.

Chaque module déclare son logger :

logger = logging.getLogger(__name__)

et configure_logging() (appelée par create_app) installe un handler console.
"""

import logging
import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    level = level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "bingo": {"handlers": ["console"], "level": level, "propagate": False},
                # uvicorn garde ses propres handlers
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
