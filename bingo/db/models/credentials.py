from sqlmodel import Field

from bingo.db.models.base import BaseModelDB


class PlayerCredential(BaseModelDB, table=True):
    """PIN d'un slot + drapeau de partage (le partenaire peut-il voir ma carte ?)."""

    __tablename__ = "player_credential"

    player: str = Field(index=True, unique=True, nullable=False)
    pin: str = Field(nullable=False)
    shared: bool = Field(default=False, nullable=False)
