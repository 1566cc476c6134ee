from sqlmodel import Field
from sqlalchemy import UniqueConstraint

from bingo.db.models.base import BaseModelDB


class ProgressEntry(BaseModelDB, table=True):
    __tablename__ = "progress_entry"
    __table_args__ = (
        UniqueConstraint("player", "game_id", "square_index", name="uq_progress_player_game_square"),
    )

    # slot relatif à la partie ("him" / "her"), pas une identité
    player: str = Field(nullable=False, index=True)
    game_id: int = Field(foreign_key="game.id", index=True)

    square_index: int = Field(nullable=False)
    checked: bool = Field(default=False, nullable=False)
