import logging
from typing import Sequence

from bingo.core.errors import NotFoundError, ValidationError
from bingo.db.models.games import Game, PLAYERS
from bingo.db.models.progress import ProgressEntry
from bingo.db.repositories.games import GameRepository
from bingo.db.repositories.progress import ProgressRepository
from bingo.features.games.services import GameService

logger = logging.getLogger(__name__)


class ProgressService:
    """
    Carnet de progression par (slot, partie) : index de case -> coché / pas coché.

    Pas de contrôle de visibilité ici : c'est la route qui consulte le SharingService
    avant d'exposer la progression d'un autre slot.
    """

    def __init__(self, *, game_repo: GameRepository, progress_repo: ProgressRepository):
        self.games = game_repo
        self.progress = progress_repo

    def _get_game_or_404(self, game_id: int) -> Game:
        game = self.games.get(game_id)
        if not game:
            raise NotFoundError("GAME_NOT_FOUND")
        return game

    @staticmethod
    def _check_player(player: str) -> None:
        if player not in PLAYERS:
            raise ValidationError(f"player must be one of {PLAYERS}")

    def get(self, player: str, game_id: int) -> Sequence[ProgressEntry]:
        self._check_player(player)
        self._get_game_or_404(game_id)
        return self.progress.list_by_player_and_game(player, game_id)

    def upsert(self, player: str, game_id: int, square_index: int, checked: bool) -> ProgressEntry:
        self._check_player(player)
        game = self._get_game_or_404(game_id)

        total = game.grid_size * game.grid_size
        if not 0 <= square_index < total:
            raise ValidationError(f"square_index must be in [0, {total}) for a {game.grid_size}x{game.grid_size} grid")

        # partie terminée ou template : lecture seule
        GameService.ensure_playable(game)

        entry = self.progress.upsert(player=player, game_id=game_id, square_index=square_index, checked=checked)
        logger.debug("Progress %s/%s/%s -> %s", player, game_id, square_index, checked)
        return entry
