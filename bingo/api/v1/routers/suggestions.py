from fastapi import APIRouter, Depends

from bingo.api.v1.dependencies import get_current_identity, get_suggestion_service
from bingo.features.suggestions.schemas import (
    BetSuggestionIn,
    BetSuggestionsOut,
    SquareSuggestionIn,
    SquareSuggestionsOut,
)
from bingo.features.suggestions.services import SuggestionService


router = APIRouter(
    prefix="/ai",
    tags=["ai"],
)


@router.post(
    "/suggestions",
    summary="Proposer des cases pour compléter une grille",
    response_model=SquareSuggestionsOut,
)
def suggest_squares(
    payload: SquareSuggestionIn,
    _identity: str = Depends(get_current_identity),
    svc: SuggestionService = Depends(get_suggestion_service),
):
    squares = svc.generate_squares(
        payload.theme,
        payload.count,
        existing_texts=payload.existing,
        rating=payload.rating,
        mood=payload.mood,
    )
    return SquareSuggestionsOut(squares=squares)


@router.post(
    "/bet-suggestion",
    summary="Proposer des idées de pari",
    response_model=BetSuggestionsOut,
)
def suggest_bets(
    payload: BetSuggestionIn,
    _identity: str = Depends(get_current_identity),
    svc: SuggestionService = Depends(get_suggestion_service),
):
    bets = svc.generate_bet_ideas(payload.theme, rating=payload.rating, mood=payload.mood, count=payload.count)
    return BetSuggestionsOut(bets=bets)
