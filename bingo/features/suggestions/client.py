"""
➡️ But : Construire le client IA (SDK openai, endpoint compatible OpenAI).

Pas de clé configurée -> pas de client : le SuggestionService renvoie alors des listes vides.
"""

import logging
from typing import Optional

from openai import OpenAI

from bingo.core.config import Settings

logger = logging.getLogger(__name__)


def build_ai_client(settings: Settings) -> Optional[OpenAI]:
    if not settings.OPENAI_API_KEY:
        logger.info("OPENAI_API_KEY not set, AI suggestions disabled")
        return None
    return OpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        timeout=settings.AI_TIMEOUT_SECONDS,
        max_retries=0,
    )
