from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status

from bingo.api.v1.dependencies import (
    get_player_slot,
    get_progress_service,
    get_sharing_service,
    require_slot,
)
from bingo.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from bingo.features.games.schemas import PlayerSlot
from bingo.features.progress.schemas import ProgressOut, ProgressUpsertIn
from bingo.features.progress.services import ProgressService
from bingo.features.sharing.services import SharingService


router = APIRouter(
    prefix="/progress",
    tags=["progress"],
    responses={404: {"description": "Not Found"}},
)


@router.get(
    "/{player}/{game_id}",
    summary="Cases cochées d'un slot pour une partie",
    response_model=List[ProgressOut],
    responses={403: {"description": "Slot not shared"}},
)
def get_progress(
    player: PlayerSlot,
    game_id: int = Path(..., ge=1),
    caller: Optional[str] = Depends(get_player_slot),
    sharing: SharingService = Depends(get_sharing_service),
    svc: ProgressService = Depends(get_progress_service),
):
    try:
        sharing.ensure_can_read(player, caller)
        return svc.get(player, game_id)
    except ForbiddenError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


@router.post(
    "",
    summary="Cocher / décocher une case (idempotent)",
    response_model=ProgressOut,
    responses={409: {"description": "Game completed or template"}},
)
def upsert_progress(
    payload: ProgressUpsertIn,
    caller: Optional[str] = Depends(get_player_slot),
    svc: ProgressService = Depends(get_progress_service),
):
    require_slot(caller, payload.player)
    try:
        return svc.upsert(payload.player, payload.game_id, payload.square_index, payload.checked)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
