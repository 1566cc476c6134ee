from datetime import datetime
from typing import Dict, Optional, Sequence

from sqlalchemy import func, or_, update
from sqlmodel import select

from bingo.db.repositories.base import BaseRepository
from bingo.db.models.games import Game, STATUS_ACTIVE, STATUS_COMPLETED


class GameRepository(BaseRepository[Game]):
    model = Game

    def list_for_identity(
        self,
        identity: str,
        *,
        status: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Sequence[Game]:
        """
        Parties jouables où l'identité est owner OU partner.
        Terminées : triées par date de fin ; sinon par date de création.
        """
        stmt = select(Game).where(
            Game.is_template.is_(False),
            or_(Game.owner_id == identity, Game.partner_id == identity),
        )
        if status is not None:
            stmt = stmt.where(Game.status == status)
        if status == STATUS_COMPLETED:
            stmt = stmt.order_by(Game.completed_at.desc())
        else:
            stmt = stmt.order_by(Game.created_at.desc(), Game.id.desc())
        return self.session.exec(stmt.offset(offset).limit(limit)).all()

    def list_templates(self) -> Sequence[Game]:
        stmt = select(Game).where(Game.is_template.is_(True)).order_by(Game.title.asc())
        return self.session.exec(stmt).all()

    def get_template_by_title(self, title: str) -> Optional[Game]:
        stmt = select(Game).where(Game.is_template.is_(True), Game.title == title)
        return self.session.exec(stmt).first()

    # ---------- UPDATE conditionnels (atomiques) ----------

    def mark_completed(self, game_id: int, *, winner: str, completed_at: datetime) -> bool:
        """
        UPDATE unique : status + winner + completed_at ensemble, seulement si la partie est active.
        Retourne False si rien n'a été modifié (absente, déjà terminée ou template).
        """
        stmt = (
            update(Game)
            .where(
                Game.id == game_id,
                Game.status == STATUS_ACTIVE,
                Game.is_template.is_(False),
            )
            .values(
                status=STATUS_COMPLETED,
                winner=winner,
                completed_at=completed_at,
                updated_at=completed_at,
            )
        )
        result = self.session.exec(stmt)
        self.session.commit()
        return result.rowcount == 1

    def set_partner_if_free(self, game_id: int, partner_id: str, *, now: datetime) -> bool:
        """Pose partner_id seulement s'il est encore NULL (une seule fois)."""
        stmt = (
            update(Game)
            .where(Game.id == game_id, Game.partner_id.is_(None))
            .values(partner_id=partner_id, updated_at=now)
        )
        result = self.session.exec(stmt)
        self.session.commit()
        return result.rowcount == 1

    # ---------- Stats ----------

    def count_winners_for_identity(self, identity: str) -> Dict[str, int]:
        """
        GROUP BY winner sur les parties terminées (hors templates) de l'identité.
        Retourne {"him": n, "her": n, "tie": n} (clés absentes = 0).
        """
        stmt = (
            select(Game.winner, func.count(Game.id))
            .where(
                Game.status == STATUS_COMPLETED,
                Game.is_template.is_(False),
                or_(Game.owner_id == identity, Game.partner_id == identity),
            )
            .group_by(Game.winner)
        )
        return {winner: int(count) for winner, count in self.session.exec(stmt).all() if winner}
