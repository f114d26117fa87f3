"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from core.cards import Card, Deck
from core.game import BlackjackGame, GameSession
from core.hand import Hand
from core.player import Player
from core.suppliers import DeckSupplier, InMemoryWalletStore
from core.errors import SupplierUnavailable


class FixedOrderRandom(Random):
    """Random whose shuffle leaves the cards in the order given."""

    def shuffle(self, x) -> None:  # type: ignore[override]
        return None


class StackedDeckSupplier(DeckSupplier):
    """Hands out prepared decks in order; fails when told to."""

    def __init__(self, decks=None) -> None:
        self.decks = list(decks or [])
        self.fail_next = 0
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        if self.fail_next:
            self.fail_next -= 1
            raise SupplierUnavailable("deck service down")
        return self.decks.pop(0)


class FailingWalletStore(InMemoryWalletStore):
    """Wallet store whose updates can be switched off."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    async def update(self, player_id: str, wallet: int) -> None:
        if self.failing:
            raise SupplierUnavailable("wallet store down")
        await super().update(player_id, wallet)


def stacked(player: list[str], dealer: list[str], extra: list[str] | tuple = ()) -> list[str]:
    """Deck order for the opening deal: player, dealer, player, dealer, then extras."""
    return [player[0], dealer[0], player[1], dealer[1], *extra]


def make_hand(*codes: str) -> Hand:
    hand = Hand()
    for code in codes:
        hand.add_card(Card.from_string(code))
    return hand


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def fixed_rng():
    return FixedOrderRandom()


@pytest.fixture
def deck(rng):
    """A shuffled standard deck."""
    d = Deck.standard(rng=rng)
    d.shuffle()
    return d


@pytest.fixture
def hand_of():
    """Build a hand from card strings, e.g. hand_of("AS", "6H")."""
    return make_hand


@pytest.fixture
def empty_hand():
    return Hand()


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S", "10H", "5C")


@pytest.fixture
def player():
    return Player(wallet=100)


@pytest.fixture
def game(fixed_rng):
    """A new game whose decks are dealt in the order loaded."""
    return BlackjackGame(player=Player(wallet=100), rng=fixed_rng)


@pytest.fixture
def start_round():
    """
    Confirm a bet and make the opening deal from a stacked deck.

    Usage: start_round(game, 10, ["10S", "10H"], ["9C", "9D"], ["5S"])
    """

    def _start(game, bet, player_cards, dealer_cards, extra=()):
        confirm = game.confirm_bet(bet)
        assert confirm.accepted, confirm.error
        deal = game.load_deck(stacked(player_cards, dealer_cards, extra))
        assert deal.accepted, deal.error
        return deal

    return _start


@pytest.fixture
def supplier():
    return StackedDeckSupplier()


@pytest.fixture
def wallet_store():
    return FailingWalletStore()


@pytest.fixture
def session(supplier, wallet_store, fixed_rng):
    """A game session wired to a stacked supplier and an in-memory store."""
    return GameSession(
        deck_supplier=supplier,
        wallet_store=wallet_store,
        game=BlackjackGame(player=Player(wallet=100), rng=fixed_rng),
    )


@pytest.fixture
def stack():
    """Expose the stacked() helper to tests."""
    return stacked
