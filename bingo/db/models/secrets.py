from sqlmodel import Field

from bingo.db.models.base import BaseModelDB


class SecretSquare(BaseModelDB, table=True):
    """Objectif bonus privé d'un slot, hors grille (ne compte pas dans les lignes)."""

    __tablename__ = "secret_square"

    player: str = Field(nullable=False, index=True)
    game_id: int = Field(foreign_key="game.id", index=True)

    text: str = Field(nullable=False)
    description: str = Field(default="", nullable=False)
    checked: bool = Field(default=False, nullable=False)
