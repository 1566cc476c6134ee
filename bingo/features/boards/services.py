from bingo.core.errors import NotFoundError, ValidationError
from bingo.db.models.games import Game, PLAYERS
from bingo.db.repositories.games import GameRepository
from bingo.db.repositories.progress import ProgressRepository
from bingo.features.boards.geometry import compute_highlights, completed_lines, is_blackout
from bingo.features.boards.schemas import BoardCellOut, BoardOut, ScoreboardOut, SlotScoreOut


def _percent(count: int, total: int) -> int:
    return round(count * 100 / total) if total else 0


class BoardService:
    """
    Vue « écran de jeu » : la grille d'un slot avec cases cochées et surbrillance,
    plus un tableau des scores pour les deux slots.

    Lecture seule ; la porte de partage est appliquée par la route avant board().
    """

    def __init__(self, *, game_repo: GameRepository, progress_repo: ProgressRepository):
        self.games = game_repo
        self.progress = progress_repo

    def _get_game_or_404(self, game_id: int) -> Game:
        game = self.games.get(game_id)
        if not game:
            raise NotFoundError("GAME_NOT_FOUND")
        return game

    def board(self, game_id: int, player: str) -> BoardOut:
        if player not in PLAYERS:
            raise ValidationError(f"player must be one of {PLAYERS}")
        game = self._get_game_or_404(game_id)

        total = game.grid_size * game.grid_size
        # lignes orphelines possibles si la grille a été réduite entre deux écritures
        checked = {i for i in self.progress.checked_indices(player, game_id) if i < total}
        highlights = compute_highlights(game.grid_size, checked)

        cells = [
            BoardCellOut(
                index=index,
                text=square.get("text", ""),
                description=square.get("description", ""),
                checked=index in checked,
                highlight=highlights[index],
            )
            for index, square in enumerate(game.squares)
        ]
        return BoardOut(
            game_id=game.id,
            player=player,
            grid_size=game.grid_size,
            cells=cells,
            checked_count=len(checked),
            percent=_percent(len(checked), total),
            completed_lines=[list(line) for line in completed_lines(game.grid_size, checked)],
            blackout=is_blackout(game.grid_size, checked),
        )

    def scoreboard(self, game_id: int) -> ScoreboardOut:
        game = self._get_game_or_404(game_id)
        total = game.grid_size * game.grid_size
        counts = self.progress.count_checked_by_player(game_id)

        him = counts.get("him", 0)
        her = counts.get("her", 0)
        leader = None
        if him > her:
            leader = "him"
        elif her > him:
            leader = "her"

        return ScoreboardOut(
            game_id=game.id,
            total_squares=total,
            him=SlotScoreOut(label=game.player1_label, checked_count=him, percent=_percent(him, total)),
            her=SlotScoreOut(label=game.player2_label, checked_count=her, percent=_percent(her, total)),
            leader=leader,
        )
