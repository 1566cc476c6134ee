from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status

from bingo.api.v1.dependencies import (
    get_player_slot,
    get_secret_service,
    get_sharing_service,
    require_slot,
)
from bingo.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from bingo.features.games.schemas import PlayerSlot
from bingo.features.secrets.schemas import SecretCreateIn, SecretOut, SecretToggleIn
from bingo.features.secrets.services import SecretSquareService
from bingo.features.sharing.services import SharingService


router = APIRouter(
    prefix="/secrets",
    tags=["secrets"],
    responses={404: {"description": "Not Found"}},
)


@router.get(
    "/{player}/{game_id}",
    summary="Cases secrètes d'un slot (visibles par l'autre slot seulement si partagé)",
    response_model=List[SecretOut],
    responses={403: {"description": "Slot not shared"}},
)
def list_secrets(
    player: PlayerSlot,
    game_id: int = Path(..., ge=1),
    caller: Optional[str] = Depends(get_player_slot),
    sharing: SharingService = Depends(get_sharing_service),
    svc: SecretSquareService = Depends(get_secret_service),
):
    try:
        sharing.ensure_can_read(player, caller)
        return svc.list_by_player_and_game(player, game_id)
    except ForbiddenError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


@router.post(
    "",
    summary="Ajouter une case secrète",
    status_code=status.HTTP_201_CREATED,
    response_model=SecretOut,
)
def create_secret(
    payload: SecretCreateIn,
    caller: Optional[str] = Depends(get_player_slot),
    svc: SecretSquareService = Depends(get_secret_service),
):
    require_slot(caller, payload.player)
    try:
        return svc.create(
            player=payload.player,
            game_id=payload.game_id,
            text=payload.text,
            description=payload.description,
        )
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.patch(
    "/{secret_id}",
    summary="Cocher / décocher une case secrète (slot propriétaire uniquement)",
    response_model=SecretOut,
    responses={403: {"description": "Forbidden"}},
)
def toggle_secret(
    payload: SecretToggleIn,
    secret_id: int = Path(..., ge=1),
    caller: Optional[str] = Depends(get_player_slot),
    svc: SecretSquareService = Depends(get_secret_service),
):
    if caller is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Player token required")
    try:
        return svc.toggle_checked(secret_id, payload.checked, player=caller)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    except ForbiddenError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
