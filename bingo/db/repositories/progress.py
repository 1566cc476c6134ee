import logging
from typing import Dict, Optional, Sequence

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from bingo.db.repositories.base import BaseRepository
from bingo.db.models.base import utcnow
from bingo.db.models.progress import ProgressEntry

logger = logging.getLogger(__name__)


class ProgressRepository(BaseRepository[ProgressEntry]):
    model = ProgressEntry

    def list_by_player_and_game(self, player: str, game_id: int) -> Sequence[ProgressEntry]:
        stmt = (
            select(ProgressEntry)
            .where(ProgressEntry.player == player, ProgressEntry.game_id == game_id)
            .order_by(ProgressEntry.square_index.asc())
        )
        return self.session.exec(stmt).all()

    def get_by_key(self, player: str, game_id: int, square_index: int) -> Optional[ProgressEntry]:
        stmt = select(ProgressEntry).where(
            ProgressEntry.player == player,
            ProgressEntry.game_id == game_id,
            ProgressEntry.square_index == square_index,
        )
        return self.session.exec(stmt).first()

    def upsert(self, *, player: str, game_id: int, square_index: int, checked: bool) -> ProgressEntry:
        """
        Une seule ligne par (player, game_id, square_index) : UPDATE si elle existe, sinon INSERT.
        Si un INSERT concurrent passe avant nous, la contrainte unique lève IntegrityError :
        on repasse en UPDATE (le dernier écrit gagne).
        """
        existing = self.get_by_key(player, game_id, square_index)
        if existing:
            return self.update(existing, checked=checked, updated_at=utcnow())

        try:
            return self.create(player=player, game_id=game_id, square_index=square_index, checked=checked)
        except IntegrityError:
            self.rollback()
            logger.debug("Concurrent insert on %s/%s/%s, retrying as update", player, game_id, square_index)
            existing = self.get_by_key(player, game_id, square_index)
            if existing is None:
                raise
            return self.update(existing, checked=checked, updated_at=utcnow())

    def checked_indices(self, player: str, game_id: int) -> set:
        stmt = select(ProgressEntry.square_index).where(
            ProgressEntry.player == player,
            ProgressEntry.game_id == game_id,
            ProgressEntry.checked.is_(True),
        )
        return set(self.session.exec(stmt).all())

    def count_checked_by_player(self, game_id: int) -> Dict[str, int]:
        stmt = (
            select(ProgressEntry.player, func.count(ProgressEntry.id))
            .where(ProgressEntry.game_id == game_id, ProgressEntry.checked.is_(True))
            .group_by(ProgressEntry.player)
        )
        return {player: int(count) for player, count in self.session.exec(stmt).all()}

    # ---------- Nettoyage (commit orchestré par le service) ----------

    def delete_for_game(self, game_id: int) -> int:
        result = self.session.exec(delete(ProgressEntry).where(ProgressEntry.game_id == game_id))
        return result.rowcount

    def delete_out_of_range(self, game_id: int, total_squares: int) -> int:
        """Supprime les cases qui n'existent plus après réduction de la grille."""
        result = self.session.exec(
            delete(ProgressEntry).where(
                ProgressEntry.game_id == game_id,
                ProgressEntry.square_index >= total_squares,
            )
        )
        return result.rowcount
