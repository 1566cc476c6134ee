from typing import List

from pydantic import BaseModel, Field

from bingo.features.games.schemas import Mood, Rating, SquareOut

MAX_SQUARE_SUGGESTIONS = 25
MAX_BET_SUGGESTIONS = 10


# -----------------------------
# Entrées HTTP
# -----------------------------

class SquareSuggestionIn(BaseModel):
    model_config = {"str_strip_whitespace": True}

    theme: str = Field(default="fun activities", max_length=200)
    count: int = Field(default=9, ge=1, le=MAX_SQUARE_SUGGESTIONS)
    existing: List[str] = Field(default_factory=list, max_length=MAX_SQUARE_SUGGESTIONS)
    rating: Rating = "r"
    mood: Mood = "couples"


class BetSuggestionIn(BaseModel):
    model_config = {"str_strip_whitespace": True}

    theme: str = Field(default="", max_length=200)
    count: int = Field(default=5, ge=1, le=MAX_BET_SUGGESTIONS)
    rating: Rating = "r"
    mood: Mood = "couples"


# -----------------------------
# Sorties HTTP
# -----------------------------

class SquareSuggestionsOut(BaseModel):
    squares: List[SquareOut]


class BetSuggestionsOut(BaseModel):
    bets: List[str]


# -----------------------------
# Réponses du modèle (format strict)
# -----------------------------

class GeneratedSquare(BaseModel):
    text: str
    description: str = ""


class GeneratedSquares(BaseModel):
    squares: List[GeneratedSquare]


class GeneratedBets(BaseModel):
    bets: List[str]
