from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import Column, JSON
from sqlmodel import Field

from bingo.db.models.base import BaseModelDB

# Valeurs autorisées (stockées en texte)
PLAYERS = ("him", "her")
WINNERS = ("him", "her", "tie")
GRID_SIZES = (3, 4, 5)
RATINGS = ("pg", "pg13", "r", "nc17")
MOODS = ("couples", "friends-trip", "party", "custom")

STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"


class Game(BaseModelDB, table=True):
    """Une partie de bingo (ou un template non jouable, à dupliquer)."""

    title: str = Field(nullable=False)
    theme: str = Field(default="", nullable=False)

    grid_size: int = Field(default=3, nullable=False)
    # [{"text": ..., "description": ...}] : exactement grid_size² cases
    squares: List[Dict[str, str]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    bet_description: str = Field(default="", nullable=False)
    rating: str = Field(default="r", nullable=False)          # indicatif, ne filtre rien
    mood: str = Field(default="couples", nullable=False)      # n'affecte que les libellés
    player1_label: str = Field(default="Him", max_length=20, nullable=False)
    player2_label: str = Field(default="Her", max_length=20, nullable=False)

    # Cycle de vie : active -> completed (terminal)
    status: str = Field(default=STATUS_ACTIVE, index=True, nullable=False)
    winner: Optional[str] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)

    is_template: bool = Field(default=False, index=True, nullable=False)

    # Identités externes (OIDC), pas des slots
    owner_id: str = Field(index=True, nullable=False)
    partner_id: Optional[str] = Field(default=None, index=True)
