import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from bingo.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from bingo.db.models.games import Game, GRID_SIZES, STATUS_ACTIVE, STATUS_COMPLETED, WINNERS
from bingo.db.repositories.games import GameRepository
from bingo.db.repositories.progress import ProgressRepository
from bingo.db.repositories.secrets import SecretSquareRepository
from bingo.features.games.schemas import GameCreateIn, GameUpdateIn, StatsOut

logger = logging.getLogger(__name__)

# Champs d'affichage recopiés par duplicate_game
_COPIED_FIELDS = (
    "title",
    "theme",
    "grid_size",
    "squares",
    "bet_description",
    "rating",
    "mood",
    "player1_label",
    "player2_label",
)


def validate_squares(grid_size: int, squares: Sequence[Any]) -> List[Dict[str, str]]:
    """
    Vérifie une grille complète et la normalise en [{"text", "description"}].
    - grid_size dans {3, 4, 5}
    - exactement grid_size² cases
    - texte non vide
    """
    if grid_size not in GRID_SIZES:
        raise ValidationError(f"grid_size must be one of {GRID_SIZES}")

    expected = grid_size * grid_size
    if len(squares) != expected:
        raise ValidationError(f"A {grid_size}x{grid_size} grid needs exactly {expected} squares, got {len(squares)}")

    normalized: List[Dict[str, str]] = []
    for index, square in enumerate(squares):
        data = square.model_dump() if hasattr(square, "model_dump") else dict(square)
        text = (data.get("text") or "").strip()
        if not text:
            raise ValidationError(f"Square {index} text must not be empty")
        normalized.append({"text": text, "description": (data.get("description") or "").strip()})
    return normalized


class GameService:
    """
    Service métier Game : cycle de vie, propriété, duplication, stats.

    - owner_id / partner_id sont des identités externes (OIDC) ;
    - progress et secrets sont rangés par slot ("him"/"her") : les deux espaces
      ne se rejoignent que dans stats_for().
    """

    def __init__(
        self,
        *,
        game_repo: GameRepository,
        progress_repo: ProgressRepository,
        secret_repo: SecretSquareRepository,
        now_fn: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.games = game_repo
        self.progress = progress_repo
        self.secrets = secret_repo
        self.now_fn = now_fn

    # -----------------------------------
    # Helpers
    # -----------------------------------
    def get_game(self, game_id: int) -> Game:
        game = self.games.get(game_id)
        if not game:
            raise NotFoundError("GAME_NOT_FOUND")
        return game

    @staticmethod
    def ensure_playable(game: Game) -> None:
        """Template ou partie terminée : lecture seule."""
        if game.is_template:
            raise ConflictError("GAME_IS_TEMPLATE")
        if game.status == STATUS_COMPLETED:
            raise ConflictError("GAME_COMPLETED")

    @staticmethod
    def _ensure_owner(game: Game, identity: str) -> None:
        if game.owner_id != identity:
            raise ForbiddenError("FORBIDDEN")

    # ---------------------------------------------------------------------
    # Lecture
    # ---------------------------------------------------------------------

    def list_games(self, identity: str, *, status: Optional[str] = None) -> Sequence[Game]:
        return self.games.list_for_identity(identity, status=status)

    def list_templates(self) -> Sequence[Game]:
        return self.games.list_templates()

    # ---------------------------------------------------------------------
    # Création
    # ---------------------------------------------------------------------

    def create_game(self, payload: GameCreateIn, *, owner_id: str, is_template: bool = False) -> Game:
        squares = validate_squares(payload.grid_size, payload.squares)
        now = self.now_fn()
        game = self.games.create(
            title=payload.title,
            theme=payload.theme,
            grid_size=payload.grid_size,
            squares=squares,
            bet_description=payload.bet_description,
            rating=payload.rating,
            mood=payload.mood,
            player1_label=payload.player1_label,
            player2_label=payload.player2_label,
            status=STATUS_ACTIVE,
            winner=None,
            is_template=is_template,
            owner_id=owner_id,
            partner_id=None,
            created_at=now,
            updated_at=now,
        )
        logger.info("Game %s created by %s (template=%s)", game.id, owner_id, is_template)
        return game

    def duplicate_game(self, game_id: int, *, identity: str) -> Game:
        """
        Nouvelle partie jouable à partir d'une autre (template ou non).
        On ne recopie que l'affichage : ni owner/partner, ni statut, ni gagnant.
        Les secrets par défaut d'un template suivent, décochés.
        """
        source = self.get_game(game_id)
        now = self.now_fn()
        fields = {name: getattr(source, name) for name in _COPIED_FIELDS}
        fields["squares"] = [dict(sq) for sq in source.squares]

        game = self.games.create(
            **fields,
            status=STATUS_ACTIVE,
            winner=None,
            completed_at=None,
            is_template=False,
            owner_id=identity,
            partner_id=None,
            created_at=now,
            updated_at=now,
            commit=False,
        )
        if source.is_template:
            for secret in self.secrets.list_by_game(source.id):
                self.secrets.create(
                    player=secret.player,
                    game_id=game.id,
                    text=secret.text,
                    description=secret.description,
                    checked=False,
                    commit=False,
                )
        self.games.commit()
        game = self.games.refresh(game)
        logger.info("Game %s duplicated from %s by %s", game.id, source.id, identity)
        return game

    # ---------------------------------------------------------------------
    # Mise à jour (co-édition, last-write-wins)
    # ---------------------------------------------------------------------

    def update_game(self, game_id: int, payload: GameUpdateIn, *, identity: str) -> Game:
        game = self.get_game(game_id)
        self.ensure_playable(game)

        changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
        if not changes:
            return game

        previous_size = game.grid_size
        if "grid_size" in changes or "squares" in changes:
            grid_size = changes.get("grid_size", game.grid_size)
            squares = changes.get("squares", game.squares)
            changes["squares"] = validate_squares(grid_size, squares)
            changes["grid_size"] = grid_size

        changes["updated_at"] = self.now_fn()
        updated = self.games.update(game, commit=False, **changes)

        # grille réduite : plus de progression sur des cases qui n'existent plus
        if updated.grid_size < previous_size:
            removed = self.progress.delete_out_of_range(game.id, updated.grid_size * updated.grid_size)
            logger.info("Game %s shrunk to %sx%s, %s progress rows pruned", game.id, updated.grid_size, updated.grid_size, removed)

        self.games.commit()
        logger.debug("Game %s updated by %s: %s", game.id, identity, sorted(changes))
        return self.games.refresh(updated)

    # ---------------------------------------------------------------------
    # Suppression (owner uniquement, cascade progress + secrets)
    # ---------------------------------------------------------------------

    def delete_game(self, game_id: int, *, identity: str) -> None:
        game = self.get_game(game_id)
        self._ensure_owner(game, identity)

        # Transaction globale : enfants puis partie
        self.progress.delete_for_game(game.id)
        self.secrets.delete_for_game(game.id)
        self.games.delete(game, commit=False)
        self.games.commit()
        logger.info("Game %s deleted by %s", game_id, identity)

    # ---------------------------------------------------------------------
    # Partenaire
    # ---------------------------------------------------------------------

    def join_game(self, game_id: int, *, identity: str) -> Game:
        game = self.get_game(game_id)

        if game.is_template:
            raise ConflictError("GAME_IS_TEMPLATE")
        if game.owner_id == identity:
            raise ConflictError("ALREADY_OWNER")
        if game.partner_id == identity:
            return game
        if game.partner_id is not None:
            raise ConflictError("GAME_HAS_PARTNER")

        if not self.games.set_partner_if_free(game.id, identity, now=self.now_fn()):
            # quelqu'un d'autre a rejoint entre la lecture et l'UPDATE
            game = self.games.refresh(game)
            if game.partner_id != identity:
                raise ConflictError("GAME_HAS_PARTNER")
            return game

        logger.info("Identity %s joined game %s as partner", identity, game.id)
        return self.games.refresh(game)

    # ---------------------------------------------------------------------
    # Fin de partie
    # ---------------------------------------------------------------------

    def declare_winner(self, game_id: int, winner: str) -> Game:
        if winner not in WINNERS:
            raise ValidationError(f"winner must be one of {WINNERS}")

        game = self.get_game(game_id)
        self.ensure_playable(game)

        if not self.games.mark_completed(game.id, winner=winner, completed_at=self.now_fn()):
            # une autre requête a terminé la partie entre-temps
            raise ConflictError("GAME_COMPLETED")

        logger.info("Game %s completed, winner=%s", game.id, winner)
        return self.games.refresh(game)

    # ---------------------------------------------------------------------
    # Stats (projection pure des parties terminées)
    # ---------------------------------------------------------------------

    def stats_for(self, identity: str) -> StatsOut:
        counts = self.games.count_winners_for_identity(identity)
        return StatsOut(
            him=counts.get("him", 0),
            her=counts.get("her", 0),
            tie=counts.get("tie", 0),
            played=sum(counts.values()),
        )
