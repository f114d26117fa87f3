"""Card and Deck classes - immutable cards, mutable draw order."""

from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Any, Iterable, Iterator, Mapping

from core.errors import EmptyDeckError


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        return _SUIT_SYMBOLS[self]

    @property
    def letter(self) -> str:
        return self.name[0]


_SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}


class Rank(Enum):
    """Card ranks with blackjack worth."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return self.name[0]

    @property
    def worth(self) -> int:
        """Return the blackjack worth (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self is Rank.ACE:
            return 11
        return 10

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE


_RANK_ALIASES: dict[str, Rank] = {str(rank): rank for rank in Rank}
_RANK_ALIASES.update({rank.name: rank for rank in Rank})
_RANK_ALIASES.update({"T": Rank.TEN, "1": Rank.ACE})

_SUIT_ALIASES: dict[str, Suit] = {suit.letter: suit for suit in Suit}
_SUIT_ALIASES.update({str(suit): suit for suit in Suit})
_SUIT_ALIASES.update({suit.name: suit for suit in Suit})


def _parse_rank(raw: Any) -> Rank:
    if isinstance(raw, int) and not isinstance(raw, bool):
        if raw == 1:
            return Rank.ACE
        try:
            return Rank(raw)
        except ValueError:
            raise ValueError(f"Invalid rank: {raw}") from None
    key = str(raw).strip().upper()
    if key not in _RANK_ALIASES:
        raise ValueError(f"Invalid rank: {raw}")
    return _RANK_ALIASES[key]


def _parse_suit(raw: Any) -> Suit:
    if isinstance(raw, int) and not isinstance(raw, bool):
        try:
            return Suit(raw)
        except ValueError:
            raise ValueError(f"Invalid suit: {raw}") from None
    key = str(raw).strip().upper()
    if key not in _SUIT_ALIASES:
        raise ValueError(f"Invalid suit: {raw}")
    return _SUIT_ALIASES[key]


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack worth of this card."""
        return self.rank.worth

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', '10h'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")
        return cls(_parse_rank(s[:-1]), _parse_suit(s[-1]))

    @classmethod
    def from_descriptor(cls, descriptor: str | Mapping[str, Any]) -> "Card":
        """
        Create a card from a deck supplier descriptor.

        Accepts either a card string ('KH') or a mapping with ``rank`` and
        ``suit`` keys holding symbols, enum names or enum values.
        """
        if isinstance(descriptor, str):
            return cls.from_string(descriptor)
        try:
            return cls(_parse_rank(descriptor["rank"]), _parse_suit(descriptor["suit"]))
        except (KeyError, TypeError):
            raise ValueError(f"Invalid card descriptor: {descriptor!r}") from None

    def to_descriptor(self) -> dict[str, Any]:
        """Serialize to the JSON-safe form published in events."""
        return {
            "rank": str(self.rank),
            "suit": self.suit.letter,
            "symbol": str(self.suit),
            "value": self.value,
        }


class Deck:
    """
    Remaining draw order for one round.

    Cards are drawn from the front. The engine shuffles exactly once after the
    full set has been loaded and before the opening deal.
    """

    def __init__(self, cards: Iterable[Card] | None = None, rng: Random | None = None) -> None:
        self._rng = rng or Random()
        self._cards: list[Card] = list(cards) if cards is not None else []

    @classmethod
    def standard(cls, rng: Random | None = None) -> "Deck":
        """Build an unshuffled 52-card deck."""
        return cls([Card(rank, suit) for suit in Suit for rank in Rank], rng=rng)

    @classmethod
    def from_descriptors(
        cls,
        descriptors: Iterable[str | Mapping[str, Any]],
        rng: Random | None = None,
    ) -> "Deck":
        """Build a deck from deck supplier output, preserving order."""
        return cls([Card.from_descriptor(d) for d in descriptors], rng=rng)

    def shuffle(self) -> None:
        """Randomly permute the remaining cards."""
        self._rng.shuffle(self._cards)

    def draw(self) -> Card:
        """Remove and return the card at the front of the deck."""
        if not self._cards:
            raise EmptyDeckError("Cannot draw from empty deck")
        return self._cards.pop(0)

    def peek(self) -> Card | None:
        """Return the next card without drawing it."""
        return self._cards[0] if self._cards else None

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
