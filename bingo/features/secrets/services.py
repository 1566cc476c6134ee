import logging
from typing import Sequence

from bingo.core.errors import ForbiddenError, NotFoundError, ValidationError
from bingo.db.models.base import utcnow
from bingo.db.models.games import Game, PLAYERS
from bingo.db.models.secrets import SecretSquare
from bingo.db.repositories.games import GameRepository
from bingo.db.repositories.secrets import SecretSquareRepository
from bingo.features.games.services import GameService

logger = logging.getLogger(__name__)


class SecretSquareService:
    """
    Cases secrètes : objectifs bonus d'un slot, hors grille.
    - le slot propriétaire est fixé à la création ;
    - seul ce slot peut cocher / décocher ;
    - la visibilité pour l'autre slot est décidée par la route (SharingService).
    """

    def __init__(self, *, game_repo: GameRepository, secret_repo: SecretSquareRepository):
        self.games = game_repo
        self.secrets = secret_repo

    def _get_game_or_404(self, game_id: int) -> Game:
        game = self.games.get(game_id)
        if not game:
            raise NotFoundError("GAME_NOT_FOUND")
        return game

    def get(self, secret_id: int) -> SecretSquare:
        secret = self.secrets.get(secret_id)
        if not secret:
            raise NotFoundError("SECRET_NOT_FOUND")
        return secret

    # --------------- Queries ---------------

    def list_by_player_and_game(self, player: str, game_id: int) -> Sequence[SecretSquare]:
        self._get_game_or_404(game_id)
        return self.secrets.list_by_player_and_game(player, game_id)

    def list_by_player(self, player: str) -> Sequence[SecretSquare]:
        return self.secrets.list_by_player(player)

    # --------------- Commands ---------------

    def create(self, *, player: str, game_id: int, text: str, description: str = "") -> SecretSquare:
        if player not in PLAYERS:
            raise ValidationError(f"player must be one of {PLAYERS}")
        text = (text or "").strip()
        if not text:
            raise ValidationError("Secret square text must not be empty")

        game = self._get_game_or_404(game_id)
        GameService.ensure_playable(game)

        secret = self.secrets.create(
            player=player,
            game_id=game_id,
            text=text,
            description=(description or "").strip(),
            checked=False,
        )
        logger.info("Secret square %s created for %s in game %s", secret.id, player, game_id)
        return secret

    def toggle_checked(self, secret_id: int, checked: bool, *, player: str) -> SecretSquare:
        """`player` = slot qui fait la requête ; doit être le propriétaire du secret."""
        secret = self.get(secret_id)
        if secret.player != player:
            raise ForbiddenError("NOT_SECRET_OWNER")

        game = self._get_game_or_404(secret.game_id)
        GameService.ensure_playable(game)

        return self.secrets.update(secret, checked=checked, updated_at=utcnow())
