from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

PlayerSlot = Literal["him", "her"]
Winner = Literal["him", "her", "tie"]
Rating = Literal["pg", "pg13", "r", "nc17"]
Mood = Literal["couples", "friends-trip", "party", "custom"]
GameStatus = Literal["active", "completed"]


# -----------------------------
# Cases
# -----------------------------

class SquareIn(BaseModel):
    model_config = {"str_strip_whitespace": True}

    text: str = Field(min_length=1, max_length=200, examples=["Slow dance a little too close"])
    description: str = Field(default="", max_length=500)


class SquareOut(BaseModel):
    text: str
    description: str = ""


# -----------------------------
# Création / mise à jour
# -----------------------------

class GameCreateIn(BaseModel):
    model_config = {"str_strip_whitespace": True}

    title: str = Field(min_length=1, max_length=120, examples=["Friday Date Night"])
    theme: str = Field(default="", max_length=200, examples=["Flirty dinner out"])
    grid_size: Literal[3, 4, 5] = 3
    squares: List[SquareIn]
    bet_description: str = Field(default="", max_length=1000)
    rating: Rating = "r"
    mood: Mood = "couples"
    player1_label: str = Field(default="Him", min_length=1, max_length=20)
    player2_label: str = Field(default="Her", min_length=1, max_length=20)


class GameUpdateIn(BaseModel):
    """
    Mise à jour partielle (co-édition owner / partner).
    Pas de fusion : la dernière écriture remplace tout le champ.
    """
    model_config = {"str_strip_whitespace": True}

    title: Optional[str] = Field(default=None, min_length=1, max_length=120)
    theme: Optional[str] = Field(default=None, max_length=200)
    grid_size: Optional[Literal[3, 4, 5]] = None
    squares: Optional[List[SquareIn]] = None
    bet_description: Optional[str] = Field(default=None, max_length=1000)
    rating: Optional[Rating] = None
    mood: Optional[Mood] = None
    player1_label: Optional[str] = Field(default=None, min_length=1, max_length=20)
    player2_label: Optional[str] = Field(default=None, min_length=1, max_length=20)


class WinnerIn(BaseModel):
    winner: Winner


# -----------------------------
# Sorties
# -----------------------------

class GameOut(BaseModel):
    id: int
    title: str
    theme: str
    grid_size: int
    squares: List[SquareOut]
    bet_description: str
    rating: str
    mood: str
    player1_label: str
    player2_label: str
    status: GameStatus
    winner: Optional[Winner] = None
    is_template: bool
    owner_id: str
    partner_id: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StatsOut(BaseModel):
    """Victoires par rôle sur les parties terminées de l'identité (égalités à part)."""
    him: int = 0
    her: int = 0
    tie: int = 0
    played: int = 0
