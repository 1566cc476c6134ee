"""
Lignes gagnantes d'une grille N×N et surbrillance des cases.

Fonctions pures : rien n'est persisté, on recalcule à chaque changement de cases cochées.

Indexation ligne par ligne : pour N=3

    0 1 2
    3 4 5
    6 7 8
"""

from enum import Enum
from functools import lru_cache
from typing import Iterable, List, Tuple

from bingo.core.errors import ValidationError
from bingo.db.models.games import GRID_SIZES

Line = Tuple[int, ...]


class Highlight(str, Enum):
    NONE = "none"
    HOT = "hot"            # il manque exactement une case sur une ligne
    COMPLETE = "complete"  # ligne entièrement cochée


def _check_grid_size(grid_size: int) -> None:
    if grid_size not in GRID_SIZES:
        raise ValidationError(f"grid_size must be one of {GRID_SIZES}, got {grid_size}")


@lru_cache(maxsize=None)
def compute_lines(grid_size: int) -> Tuple[Line, ...]:
    """
    Lignes, puis colonnes, puis les deux diagonales : 2·N + 2 lignes de N cases.
    """
    _check_grid_size(grid_size)
    n = grid_size
    rows = [tuple(r * n + c for c in range(n)) for r in range(n)]
    cols = [tuple(r * n + c for r in range(n)) for c in range(n)]
    diagonals = [
        tuple(i * n + i for i in range(n)),
        tuple(i * n + (n - 1 - i) for i in range(n)),
    ]
    return tuple(rows + cols + diagonals)


def _normalize_checked(grid_size: int, checked: Iterable[int]) -> frozenset:
    total = grid_size * grid_size
    checked_set = frozenset(checked)
    out_of_range = [i for i in checked_set if not 0 <= i < total]
    if out_of_range:
        raise ValidationError(f"square_index out of range [0, {total}): {sorted(out_of_range)}")
    return checked_set


def compute_highlights(grid_size: int, checked: Iterable[int]) -> List[Highlight]:
    """
    Un état par case :
    - COMPLETE si la case appartient à au moins une ligne entièrement cochée ;
    - sinon HOT si elle appartient à une ligne où il ne manque qu'une case ;
    - sinon NONE.
    COMPLETE l'emporte toujours sur HOT.
    """
    lines = compute_lines(grid_size)
    checked_set = _normalize_checked(grid_size, checked)

    highlights = [Highlight.NONE] * (grid_size * grid_size)
    for line in lines:
        hits = sum(1 for i in line if i in checked_set)
        if hits == len(line):
            for i in line:
                highlights[i] = Highlight.COMPLETE
        elif hits == len(line) - 1:
            for i in line:
                if highlights[i] is not Highlight.COMPLETE:
                    highlights[i] = Highlight.HOT
    return highlights


def completed_lines(grid_size: int, checked: Iterable[int]) -> List[Line]:
    """Les lignes entièrement cochées (chaque ligne = un « bingo »)."""
    checked_set = _normalize_checked(grid_size, checked)
    return [line for line in compute_lines(grid_size) if all(i in checked_set for i in line)]


def is_blackout(grid_size: int, checked: Iterable[int]) -> bool:
    """Toutes les cases cochées."""
    return len(_normalize_checked(grid_size, checked)) == grid_size * grid_size
