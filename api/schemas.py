"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Any, Literal


CommandName = Literal[
    "increase-bet",
    "reset-bet",
    "confirm-bet",
    "hit",
    "stand",
    "deal-next-round",
    "retry-deck",
]


# Game schemas
class CommandRequest(BaseModel):
    """An inbound command for the table."""

    command: CommandName
    amount: int | None = Field(default=None, ge=1, description="Bet amount for bet commands")


class CardResponse(BaseModel):
    """Card representation."""

    rank: str
    suit: str
    symbol: str
    value: int


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int
    is_soft: bool
    is_busted: bool


class PlayerResponse(BaseModel):
    """Seated player."""

    id: str | None
    wallet: int
    hand: HandResponse


class GameStateResponse(BaseModel):
    """Current table state."""

    state: str
    player: PlayerResponse
    dealer_hand: HandResponse
    intended_bet: int
    actual_bet: int
    outcome: Literal["player-wins", "house-wins", "push"] | None
    round_over: bool
    cards_remaining: int
    can_bet: bool
    can_hit: bool
    can_stand: bool


class EventResponse(BaseModel):
    """A published notification."""

    event: str
    data: dict[str, Any]


class CommandResponse(BaseModel):
    """What a command did and where the table ended up."""

    command: str
    accepted: bool
    error: str | None = None
    events: list[EventResponse]
    state: GameStateResponse


class NewGameResponse(BaseModel):
    """A freshly seated player."""

    session_id: str
    player_id: str
    wallet: int


# Deck service schemas
class DeckResponse(BaseModel):
    """A full card set in draw order."""

    cards: list[CardResponse]


# Player service schemas
class WalletRequest(BaseModel):
    """Create or overwrite a wallet."""

    wallet: int = Field(..., ge=0)


class PlayerWalletResponse(BaseModel):
    """Stored player wallet."""

    id: str
    wallet: int
