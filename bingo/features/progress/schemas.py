from datetime import datetime

from pydantic import BaseModel, Field

from bingo.features.games.schemas import PlayerSlot


class ProgressUpsertIn(BaseModel):
    """
    Cocher / décocher une case.
    Idempotent : renvoyer la même requête ne crée pas de doublon.
    """
    player: PlayerSlot
    game_id: int = Field(ge=1)
    square_index: int = Field(ge=0, examples=[4])
    checked: bool = True


class ProgressOut(BaseModel):
    id: int
    player: PlayerSlot
    game_id: int
    square_index: int
    checked: bool
    updated_at: datetime

    model_config = {"from_attributes": True}
