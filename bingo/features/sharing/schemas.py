from pydantic import BaseModel, Field

from bingo.features.games.schemas import PlayerSlot


class PinSetupIn(BaseModel):
    player: PlayerSlot
    pin: str = Field(min_length=4, max_length=8, examples=["1234"])


class PinLoginIn(BaseModel):
    player: PlayerSlot
    pin: str = Field(max_length=64)


class ShareIn(BaseModel):
    shared: bool


class SharingStatusOut(BaseModel):
    has_credential: bool
    shared: bool


class PlayerOut(BaseModel):
    player: PlayerSlot
    shared: bool

    model_config = {"from_attributes": True}


class PlayerSessionOut(PlayerOut):
    """Réponse de setup / login : le token est à renvoyer dans `X-Player-Token`."""
    player_token: str
    token_type: str = "player"
    expires_in: int
