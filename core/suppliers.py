"""Contracts for the deck supplier and wallet store, with local implementations."""

from abc import ABC, abstractmethod
from random import Random
from typing import Any
from uuid import uuid4

from core.cards import Deck
from core.errors import SupplierUnavailable


class DeckSupplier(ABC):
    """Source of a fresh, ordered card set for each round."""

    @abstractmethod
    async def fetch(self) -> list[Any]:
        """
        Return card descriptors in draw order.

        Raises:
            SupplierUnavailable: the supplier could not produce a deck
        """
        ...


class ShuffledDeckSupplier(DeckSupplier):
    """Generate a standard 52-card deck in-process."""

    def __init__(self, rng: Random | None = None, shuffle: bool = True) -> None:
        self._rng = rng or Random()
        self._shuffle = shuffle

    async def fetch(self) -> list[Any]:
        deck = Deck.standard(rng=self._rng)
        if self._shuffle:
            deck.shuffle()
        return [card.to_descriptor() for card in deck]


class WalletStore(ABC):
    """Remote storage for player wallets."""

    @abstractmethod
    async def create(self, wallet: int) -> str:
        """Store a new player and return the assigned id."""
        ...

    @abstractmethod
    async def get(self, player_id: str) -> int | None:
        """Return the stored balance, or None for an unknown player."""
        ...

    @abstractmethod
    async def update(self, player_id: str, wallet: int) -> None:
        """
        Overwrite a player's balance.

        Raises:
            SupplierUnavailable: unknown player or store failure
        """
        ...


class InMemoryWalletStore(WalletStore):
    """In-memory wallet store for local development and tests."""

    def __init__(self) -> None:
        self._wallets: dict[str, int] = {}

    async def create(self, wallet: int) -> str:
        player_id = str(uuid4())
        self._wallets[player_id] = wallet
        return player_id

    async def get(self, player_id: str) -> int | None:
        return self._wallets.get(player_id)

    async def update(self, player_id: str, wallet: int) -> None:
        if player_id not in self._wallets:
            raise SupplierUnavailable(f"Unknown player {player_id}")
        self._wallets[player_id] = wallet

    def __len__(self) -> int:
        return len(self._wallets)
