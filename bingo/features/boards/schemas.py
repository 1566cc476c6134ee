from typing import List, Optional

from pydantic import BaseModel

from bingo.features.boards.geometry import Highlight
from bingo.features.games.schemas import PlayerSlot


class BoardCellOut(BaseModel):
    index: int
    text: str
    description: str = ""
    checked: bool
    highlight: Highlight


class BoardOut(BaseModel):
    game_id: int
    player: PlayerSlot
    grid_size: int
    cells: List[BoardCellOut]
    checked_count: int
    percent: int
    completed_lines: List[List[int]]
    blackout: bool


class SlotScoreOut(BaseModel):
    label: str
    checked_count: int
    percent: int


class ScoreboardOut(BaseModel):
    """Compteurs seulement (pas de détail par case) : visible par les deux slots."""
    game_id: int
    total_squares: int
    him: SlotScoreOut
    her: SlotScoreOut
    leader: Optional[PlayerSlot] = None
