from typing import Optional

from sqlmodel import select

from bingo.db.repositories.base import BaseRepository
from bingo.db.models.credentials import PlayerCredential


class PlayerCredentialRepository(BaseRepository[PlayerCredential]):
    """
    Repository pour la table PlayerCredential.
    Toujours relu depuis la base : le drapeau `shared` peut changer à tout moment.
    """
    model = PlayerCredential

    def get_by_player(self, player: str) -> Optional[PlayerCredential]:
        return self.session.exec(
            select(self.model).where(self.model.player == player)
        ).first()
