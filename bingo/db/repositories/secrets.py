from typing import Sequence

from sqlalchemy import delete
from sqlmodel import select

from bingo.db.repositories.base import BaseRepository
from bingo.db.models.secrets import SecretSquare


class SecretSquareRepository(BaseRepository[SecretSquare]):
    model = SecretSquare

    def list_by_player_and_game(self, player: str, game_id: int) -> Sequence[SecretSquare]:
        stmt = (
            select(SecretSquare)
            .where(SecretSquare.player == player, SecretSquare.game_id == game_id)
            .order_by(SecretSquare.id.asc())
        )
        return self.session.exec(stmt).all()

    def list_by_player(self, player: str) -> Sequence[SecretSquare]:
        """Tous les secrets d'un slot, toutes parties confondues (seed / migration)."""
        stmt = select(SecretSquare).where(SecretSquare.player == player).order_by(SecretSquare.id.asc())
        return self.session.exec(stmt).all()

    def delete_for_game(self, game_id: int) -> int:
        result = self.session.exec(delete(SecretSquare).where(SecretSquare.game_id == game_id))
        return result.rowcount

    def list_by_game(self, game_id: int) -> Sequence[SecretSquare]:
        stmt = select(SecretSquare).where(SecretSquare.game_id == game_id).order_by(SecretSquare.id.asc())
        return self.session.exec(stmt).all()
