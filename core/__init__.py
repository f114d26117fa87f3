"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Deck, Rank, Suit
from core.errors import (
    BlackjackError,
    EmptyDeckError,
    InsufficientFundsError,
    InvalidBetError,
    OutOfStateCommand,
    SupplierUnavailable,
)
from core.hand import Hand, Outcome, determine_outcome, is_bust, total_value
from core.player import Player

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Hand",
    "Outcome",
    "determine_outcome",
    "is_bust",
    "total_value",
    "Player",
    "BlackjackError",
    "EmptyDeckError",
    "InsufficientFundsError",
    "InvalidBetError",
    "OutOfStateCommand",
    "SupplierUnavailable",
]
