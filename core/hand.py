"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator

from core.cards import Card

BUST_THRESHOLD = 21


def total_value(cards: Iterable[Card]) -> int:
    """
    Calculate the best total for a set of cards.

    Every Ace starts at 11 and is demoted to 1, one at a time, while the
    total is over 21. Returns the highest total that doesn't bust, or the
    lowest bust total.
    """
    total = 0
    soft_aces = 0

    for card in cards:
        total += card.value
        if card.is_ace:
            soft_aces += 1

    while total > BUST_THRESHOLD and soft_aces > 0:
        total -= 10
        soft_aces -= 1

    return total


def is_bust(cards: Iterable[Card]) -> bool:
    """Check whether a set of cards totals more than 21."""
    return total_value(cards) > BUST_THRESHOLD


@dataclass
class Hand:
    """An ordered blackjack hand. Insertion order is deal order."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a dealt card to the hand."""
        self.cards.append(card)

    @property
    def value(self) -> int:
        return total_value(self.cards)

    @property
    def is_busted(self) -> bool:
        return is_bust(self.cards)

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (an Ace is still counted as 11).
        """
        if not any(card.is_ace for card in self.cards):
            return False
        hard_total = sum(1 if card.is_ace else card.value for card in self.cards)
        return hard_total + 10 <= BUST_THRESHOLD

    def to_dict(self) -> dict[str, Any]:
        """Serialize for event payloads."""
        return {
            "cards": [card.to_descriptor() for card in self.cards],
            "value": self.value,
            "is_soft": self.is_soft,
            "is_busted": self.is_busted,
        }

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        if self.is_busted:
            return f"{cards_str} (BUST)"
        if self.is_soft:
            return f"{cards_str} (soft {self.value})"
        return f"{cards_str} ({self.value})"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"


class Outcome(Enum):
    """Result of a resolved round."""

    PLAYER_WINS = "player-wins"
    HOUSE_WINS = "house-wins"
    PUSH = "push"

    def __str__(self) -> str:
        return {
            Outcome.PLAYER_WINS: "Player wins",
            Outcome.HOUSE_WINS: "House wins",
            Outcome.PUSH: "Push",
        }[self]


def determine_outcome(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Compare player and dealer hands.

    A player bust loses regardless of the dealer's cards; otherwise a dealer
    bust wins for the player; otherwise the higher total wins.
    """
    if player_hand.is_busted:
        return Outcome.HOUSE_WINS

    if dealer_hand.is_busted:
        return Outcome.PLAYER_WINS

    player_value = player_hand.value
    dealer_value = dealer_hand.value

    if player_value > dealer_value:
        return Outcome.PLAYER_WINS
    if dealer_value > player_value:
        return Outcome.HOUSE_WINS
    return Outcome.PUSH
