import json
import logging
from typing import Any, Iterable, List, Optional, Type, TypeVar

from openai import OpenAIError
from pydantic import BaseModel, ValidationError as PydanticValidationError

from bingo.core.errors import UpstreamError
from bingo.features.suggestions.schemas import (
    GeneratedBets,
    GeneratedSquares,
    MAX_BET_SUGGESTIONS,
    MAX_SQUARE_SUGGESTIONS,
)
from bingo.features.games.schemas import SquareOut

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

RATING_TONES = {
    "pg": "Keep everything sweet and wholesome, suitable for anyone.",
    "pg13": "Flirty and playful, light teasing, nothing explicit.",
    "r": "Spicy and bold but still safe to do in public.",
    "nc17": "No limits on spice between consenting adults, still respectful.",
}

MOOD_TONES = {
    "couples": "The players are a couple on a romantic date.",
    "friends-trip": "The players are friends on a trip together, group adventure mode.",
    "party": "The players are at a social gathering or party.",
    "custom": "Adapt to whatever the theme suggests.",
}

_SQUARES_FORMAT = '{"squares": [{"text": "short dare", "description": "one sentence"}]}'
_BETS_FORMAT = '{"bets": ["what the loser owes the winner"]}'


def _tone(rating: str, mood: str) -> str:
    return " ".join(filter(None, (MOOD_TONES.get(mood), RATING_TONES.get(rating))))


def _clean(text: Optional[str]) -> str:
    return (text or "").strip()


class SuggestionService:
    """
    Suggestions IA pour le builder : cases de dare et idées de pari.

    Le modèle doit répondre en JSON strict ; tout écart (réseau, JSON invalide,
    mauvais schéma) donne une liste vide et un warning, jamais une 5xx.
    """

    def __init__(self, *, client: Any, model: str):
        self.client = client
        self.model = model

    # --------------- Appel modèle ---------------

    def _complete(self, system: str, user: str, schema: Type[SchemaT]) -> SchemaT:
        """Lève UpstreamError pour toute réponse inutilisable."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content
        except OpenAIError as exc:
            raise UpstreamError(f"AI request failed: {exc}") from exc
        except (AttributeError, IndexError, TypeError) as exc:
            raise UpstreamError("AI response has no message content") from exc

        if not content:
            raise UpstreamError("AI response is empty")
        try:
            return schema.model_validate_json(content)
        except PydanticValidationError as exc:
            raise UpstreamError(f"AI response does not match {schema.__name__}") from exc

    # --------------- Cases ---------------

    def generate_squares(
        self,
        theme: str,
        count: int,
        existing_texts: Iterable[str] = (),
        rating: str = "r",
        mood: str = "couples",
    ) -> List[SquareOut]:
        count = max(1, min(count, MAX_SQUARE_SUGGESTIONS))
        if self.client is None:
            return []

        existing = [_clean(t) for t in existing_texts if _clean(t)]
        system = (
            "You write squares for a two-player dare bingo card. "
            f"{_tone(rating, mood)} "
            f"Answer only with JSON shaped like {_SQUARES_FORMAT}."
        )
        user = f"Theme: {_clean(theme) or 'fun activities'}. Give {count} new squares."
        if existing:
            user += " Do not repeat any of these: " + json.dumps(existing)

        try:
            parsed = self._complete(system, user, GeneratedSquares)
        except UpstreamError as exc:
            logger.warning("Square suggestions unavailable: %s", exc)
            return []

        seen = {t.lower() for t in existing}
        squares: List[SquareOut] = []
        for item in parsed.squares:
            text = _clean(item.text)
            if not text or text.lower() in seen:
                continue
            seen.add(text.lower())
            squares.append(SquareOut(text=text[:200], description=_clean(item.description)[:500]))
            if len(squares) == count:
                break
        return squares

    # --------------- Paris ---------------

    def generate_bet_ideas(self, theme: str, rating: str = "r", mood: str = "couples", count: int = 5) -> List[str]:
        count = max(1, min(count, MAX_BET_SUGGESTIONS))
        if self.client is None:
            return []

        system = (
            "You suggest the stake for a two-player bingo bet: what the loser owes the winner. "
            f"{_tone(rating, mood)} "
            f"Answer only with JSON shaped like {_BETS_FORMAT}."
        )
        user = f"Give {count} different bet ideas."
        if _clean(theme):
            user = f"Theme: {_clean(theme)}. " + user

        try:
            parsed = self._complete(system, user, GeneratedBets)
        except UpstreamError as exc:
            logger.warning("Bet suggestions unavailable: %s", exc)
            return []

        seen = set()
        bets: List[str] = []
        for bet in parsed.bets:
            bet = _clean(bet)
            if not bet or bet.lower() in seen:
                continue
            seen.add(bet.lower())
            bets.append(bet)
        return bets[:count]
