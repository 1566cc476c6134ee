from pydantic import BaseModel, Field

from bingo.features.games.schemas import PlayerSlot


class SecretCreateIn(BaseModel):
    model_config = {"str_strip_whitespace": True}

    player: PlayerSlot
    game_id: int = Field(ge=1)
    text: str = Field(min_length=1, max_length=200, examples=["Steal his hoodie"])
    description: str = Field(default="", max_length=500)


class SecretToggleIn(BaseModel):
    checked: bool


class SecretOut(BaseModel):
    id: int
    player: PlayerSlot
    game_id: int
    text: str
    description: str
    checked: bool

    model_config = {"from_attributes": True}
