"""Deck service endpoint."""

from fastapi import APIRouter

from api.schemas import CardResponse, DeckResponse
from core.cards import Deck

router = APIRouter()


@router.get("")
async def get_deck() -> DeckResponse:
    """
    Return a full 52-card set.

    The order is the standard unshuffled order; the game shuffles each deck
    once before dealing from it.
    """
    return DeckResponse(
        cards=[CardResponse(**card.to_descriptor()) for card in Deck.standard()]
    )
