from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from bingo.api.v1.dependencies import (
    get_board_service,
    get_current_identity,
    get_game_service,
    get_player_slot,
    get_sharing_service,
)
from bingo.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from bingo.features.boards.schemas import BoardOut, ScoreboardOut
from bingo.features.boards.services import BoardService
from bingo.features.games.schemas import (
    GameCreateIn,
    GameOut,
    GameUpdateIn,
    PlayerSlot,
    StatsOut,
    WinnerIn,
)
from bingo.features.games.services import GameService
from bingo.features.sharing.services import SharingService


router = APIRouter(
    prefix="/games",
    tags=["games"],
    responses={404: {"description": "Not Found"}},
)

# -----------------------------
# Routes statiques (avant /{game_id})
# -----------------------------
@router.get(
    "/me",
    summary="Lister mes parties (owner ou partner)",
    response_model=List[GameOut],
)
def list_mine(
    status_: Optional[Literal["active", "completed"]] = Query(None, alias="status"),
    identity: str = Depends(get_current_identity),
    svc: GameService = Depends(get_game_service),
):
    return svc.list_games(identity, status=status_)


@router.get(
    "/templates",
    summary="Lister les templates (soirées prêtes à jouer)",
    response_model=List[GameOut],
)
def list_templates(svc: GameService = Depends(get_game_service)):
    return svc.list_templates()


@router.get(
    "/stats",
    summary="Victoires par rôle sur mes parties terminées",
    response_model=StatsOut,
)
def my_stats(
    identity: str = Depends(get_current_identity),
    svc: GameService = Depends(get_game_service),
):
    return svc.stats_for(identity)

# -----------------------------
# Create game (owner)
# -----------------------------
@router.post(
    "",
    summary="Créer une partie",
    status_code=status.HTTP_201_CREATED,
    response_model=GameOut,
)
def create_game(
    payload: GameCreateIn,
    identity: str = Depends(get_current_identity),
    svc: GameService = Depends(get_game_service),
):
    try:
        return svc.create_game(payload, owner_id=identity)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# -----------------------------
# Lecture (quiconque a le lien)
# -----------------------------
@router.get(
    "/{game_id}",
    summary="Récupérer une partie",
    response_model=GameOut,
)
def get_game(
    game_id: int = Path(..., ge=1),
    svc: GameService = Depends(get_game_service),
):
    try:
        return svc.get_game(game_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

# -----------------------------
# Update (co-édition, dernière écriture gagne)
# -----------------------------
@router.patch(
    "/{game_id}",
    summary="Modifier une partie active",
    response_model=GameOut,
    responses={409: {"description": "Template or completed game"}},
)
def update_game(
    payload: GameUpdateIn,
    game_id: int = Path(..., ge=1),
    identity: str = Depends(get_current_identity),
    svc: GameService = Depends(get_game_service),
):
    try:
        return svc.update_game(game_id, payload, identity=identity)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# -----------------------------
# Delete (owner uniquement)
# -----------------------------
@router.delete(
    "/{game_id}",
    summary="Supprimer une partie (progression et secrets inclus)",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"description": "Forbidden"}},
)
def delete_game(
    game_id: int = Path(..., ge=1),
    identity: str = Depends(get_current_identity),
    svc: GameService = Depends(get_game_service),
):
    try:
        svc.delete_game(game_id, identity=identity)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    except ForbiddenError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# -----------------------------
# Duplicate / Join
# -----------------------------
@router.post(
    "/{game_id}/duplicate",
    summary="Dupliquer une partie ou un template",
    status_code=status.HTTP_201_CREATED,
    response_model=GameOut,
)
def duplicate_game(
    game_id: int = Path(..., ge=1),
    identity: str = Depends(get_current_identity),
    svc: GameService = Depends(get_game_service),
):
    try:
        return svc.duplicate_game(game_id, identity=identity)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


@router.post(
    "/{game_id}/join",
    summary="Rejoindre une partie comme partenaire",
    response_model=GameOut,
    responses={409: {"description": "Owner, template or partner already set"}},
)
def join_game(
    game_id: int = Path(..., ge=1),
    identity: str = Depends(get_current_identity),
    svc: GameService = Depends(get_game_service),
):
    try:
        return svc.join_game(game_id, identity=identity)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

# -----------------------------
# Fin de partie
# -----------------------------
@router.patch(
    "/{game_id}/winner",
    summary="Déclarer le gagnant (termine la partie)",
    response_model=GameOut,
    responses={409: {"description": "Already completed or template"}},
)
def declare_winner(
    payload: WinnerIn,
    game_id: int = Path(..., ge=1),
    svc: GameService = Depends(get_game_service),
):
    try:
        return svc.declare_winner(game_id, payload.winner)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# -----------------------------
# Écran de jeu
# -----------------------------
@router.get(
    "/{game_id}/board/{player}",
    summary="Grille d'un slot avec cases cochées et surbrillance",
    response_model=BoardOut,
    responses={403: {"description": "Slot not shared"}},
)
def get_board(
    player: PlayerSlot,
    game_id: int = Path(..., ge=1),
    caller: Optional[str] = Depends(get_player_slot),
    sharing: SharingService = Depends(get_sharing_service),
    svc: BoardService = Depends(get_board_service),
):
    try:
        sharing.ensure_can_read(player, caller)
        return svc.board(game_id, player)
    except ForbiddenError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


@router.get(
    "/{game_id}/scoreboard",
    summary="Cases cochées par slot et leader actuel",
    response_model=ScoreboardOut,
)
def get_scoreboard(
    game_id: int = Path(..., ge=1),
    svc: BoardService = Depends(get_board_service),
):
    try:
        return svc.scoreboard(game_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
