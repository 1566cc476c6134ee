from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from bingo.api.v1.dependencies import get_player_slot, get_sharing_service, require_slot
from bingo.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from bingo.features.games.schemas import PlayerSlot
from bingo.features.sharing.schemas import (
    PinLoginIn,
    PinSetupIn,
    PlayerOut,
    PlayerSessionOut,
    ShareIn,
    SharingStatusOut,
)
from bingo.features.sharing.services import SharingService


router = APIRouter(
    prefix="/auth",
    tags=["sharing"],
)


@router.get(
    "/status/{player}",
    summary="PIN défini ? partage activé ?",
    response_model=SharingStatusOut,
)
def sharing_status(
    player: PlayerSlot,
    svc: SharingService = Depends(get_sharing_service),
):
    return svc.status(player)


@router.post(
    "/setup",
    summary="Définir le PIN d'un slot (une seule fois)",
    status_code=status.HTTP_201_CREATED,
    response_model=PlayerSessionOut,
    responses={409: {"description": "PIN already set"}},
)
def setup_pin(
    payload: PinSetupIn,
    svc: SharingService = Depends(get_sharing_service),
):
    try:
        return svc.set_credential(payload.player, payload.pin)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
    "/login",
    summary="Se connecter sur un slot avec son PIN",
    response_model=PlayerSessionOut,
    responses={401: {"description": "Invalid credentials"}},
)
def login(
    payload: PinLoginIn,
    svc: SharingService = Depends(get_sharing_service),
):
    try:
        return svc.authenticate(payload.player, payload.pin)
    except (NotFoundError, UnauthorizedError):
        # Ne pas révéler si le slot a déjà un PIN
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")


@router.patch(
    "/share/{player}",
    summary="Ouvrir / fermer sa progression et ses secrets à l'autre slot",
    response_model=PlayerOut,
    responses={403: {"description": "Forbidden"}},
)
def set_shared(
    player: PlayerSlot,
    payload: ShareIn,
    caller: Optional[str] = Depends(get_player_slot),
    svc: SharingService = Depends(get_sharing_service),
):
    require_slot(caller, player)
    try:
        return svc.set_shared(player, payload.shared)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
