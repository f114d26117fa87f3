"""Blackjack round engine with state machine."""

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Any, Iterable, Mapping

from transitions import Machine

from config import GameConfig
from core.cards import Card, Deck
from core.errors import (
    BlackjackError,
    EmptyDeckError,
    InsufficientFundsError,
    InvalidBetError,
    OutOfStateCommand,
    SupplierUnavailable,
)
from core.game.events import CommandResult, CommandType, EventType
from core.game.state import GameState
from core.hand import Hand, Outcome, determine_outcome
from core.player import Player, validate_amount

logger = logging.getLogger(__name__)

LOAD_DECK = "load-deck"


@dataclass
class Round:
    """Everything that lives for exactly one round."""

    player: Player
    deck: Deck | None = None
    dealer_hand: Hand = field(default_factory=Hand)
    actual_bet: int = 0
    outcome: Outcome | None = None
    over: bool = False


class BlackjackGame:
    """
    Single-table blackjack engine using a state machine.

    Every command runs synchronously to completion and returns a
    CommandResult listing the events to publish. The engine never publishes
    anything itself and never raises for game-flow problems.
    """

    # State machine states
    STATES = [s.name.lower() for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "bet_confirmed", "source": "awaiting_bet", "dest": "awaiting_deck"},
        {"trigger": "deck_loaded", "source": "awaiting_deck", "dest": "opening_deal"},
        {"trigger": "cards_dealt", "source": "opening_deal", "dest": "player_turn"},
        {"trigger": "player_busted", "source": "player_turn", "dest": "resolved"},
        {"trigger": "player_stood", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "dealer_finished", "source": "dealer_turn", "dest": "resolved"},
        {"trigger": "deck_ran_out", "source": "dealer_turn", "dest": "awaiting_bet"},
        {"trigger": "next_round", "source": "resolved", "dest": "awaiting_bet"},
        {"trigger": "session_ended", "source": "resolved", "dest": "session_over"},
    ]

    def __init__(
        self,
        rules: GameConfig | None = None,
        player: Player | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new game.

        Args:
            rules: Table rules (uses defaults if not provided)
            player: The seated player; a fresh one with the starting wallet otherwise
            rng: Random number generator used to shuffle each round's deck
        """
        self.rules = rules or GameConfig()
        self.player = player or Player(wallet=self.rules.starting_wallet)
        self._rng = rng or Random()
        self.intended_bet = 0
        self.round = Round(player=self.player)

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="awaiting_bet",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> GameState:
        """Get current game state as enum."""
        return GameState[self._machine_state.upper()]  # type: ignore

    @property
    def dealer_hand(self) -> Hand:
        return self.round.dealer_hand

    @property
    def deck(self) -> Deck | None:
        return self.round.deck

    def handle(self, command: CommandType | str, payload: Mapping[str, Any] | None = None) -> CommandResult:
        """Dispatch a named inbound command."""
        command = CommandType(command)
        payload = payload or {}

        if command is CommandType.INCREASE_BET:
            return self.increase_bet(payload.get("amount", 0))
        if command is CommandType.RESET_BET:
            return self.reset_bet()
        if command is CommandType.CONFIRM_BET:
            return self.confirm_bet(payload.get("amount"))
        if command is CommandType.HIT:
            return self.hit()
        if command is CommandType.STAND:
            return self.stand()
        if command is CommandType.DEAL_NEXT_ROUND:
            return self.deal_next_round()
        return self.request_deck()

    # Betting

    def increase_bet(self, amount: int) -> CommandResult:
        """Add a chip to the intended bet, if the wallet covers the new total."""
        command = CommandType.INCREASE_BET.value
        if self.state != GameState.AWAITING_BET:
            return self._out_of_state(command)

        result = CommandResult(command=command)
        try:
            validate_amount(amount)
        except InvalidBetError as error:
            return self._reject(result, error)

        if amount not in self.rules.bet_increments:
            chips = ", ".join(str(c) for c in self.rules.bet_increments)
            return self._reject(result, InvalidBetError(f"Bet must go up by one of {chips}, got {amount}"))

        new_total = self.intended_bet + amount
        if not self.player.can_afford(new_total):
            error = InsufficientFundsError(required=new_total, available=self.player.wallet)
            self._not_enough_money(result, error)
            return self._reject(result, error)

        self.intended_bet = new_total
        result.add(EventType.BET_CHANGED, intended_bet=self.intended_bet)
        return result

    def reset_bet(self) -> CommandResult:
        command = CommandType.RESET_BET.value
        if self.state != GameState.AWAITING_BET:
            return self._out_of_state(command)

        self.intended_bet = 0
        result = CommandResult(command=command)
        result.add(EventType.BET_CHANGED, intended_bet=0)
        return result

    def confirm_bet(self, amount: int | None = None) -> CommandResult:
        """
        Fix the actual bet for this round and debit it from the wallet.

        Args:
            amount: Bet to confirm; defaults to the accumulated intended bet

        Returns:
            Result whose events end with deck-requested on success
        """
        command = CommandType.CONFIRM_BET.value
        if self.state != GameState.AWAITING_BET:
            return self._out_of_state(command)

        result = CommandResult(command=command)
        amount = self.intended_bet if amount is None else amount
        try:
            self.player.place_bet(amount)
        except InsufficientFundsError as error:
            self._not_enough_money(result, error)
            return self._reject(result, error)
        except InvalidBetError as error:
            return self._reject(result, error)

        self.round.actual_bet = amount
        self.intended_bet = 0
        result.add(EventType.BET_CHANGED, intended_bet=0)
        result.add(EventType.BET_PLACED, amount=amount)
        result.add(EventType.WALLET_UPDATED, wallet=self.player.wallet)

        self.bet_confirmed()
        result.add(EventType.DECK_REQUESTED)
        logger.info("Bet of %d confirmed, wallet now %d", amount, self.player.wallet)
        return result

    # Dealing

    def request_deck(self) -> CommandResult:
        """Ask again for a deck after a failed fetch."""
        command = CommandType.RETRY_DECK.value
        if self.state != GameState.AWAITING_DECK:
            return self._out_of_state(command)

        result = CommandResult(command=command)
        result.add(EventType.DECK_REQUESTED)
        return result

    def load_deck(self, descriptors: Iterable[Any]) -> CommandResult:
        """
        Accept a fresh deck from the supplier and make the opening deal.

        The deck is shuffled once, then player, dealer, player, dealer each
        get one card. A malformed or short deck is refused and the engine
        keeps waiting for another one.
        """
        if self.state != GameState.AWAITING_DECK:
            return self._out_of_state(LOAD_DECK)

        result = CommandResult(command=LOAD_DECK)
        try:
            deck = Deck.from_descriptors(descriptors, rng=self._rng)
        except ValueError as exc:
            return self._reject(result, SupplierUnavailable(f"Malformed deck: {exc}"))

        if len(deck) < self.rules.opening_deal_size:
            error = EmptyDeckError(
                f"Deck has {len(deck)} cards, need {self.rules.opening_deal_size} to deal"
            )
            result.add(EventType.DECK_EXHAUSTED, cards_remaining=len(deck))
            return self._reject(result, error)

        deck.shuffle()
        self.round.deck = deck
        self.deck_loaded()

        self.player.hand = Hand()
        self.round.dealer_hand = Hand()
        for hand in (self.player.hand, self.round.dealer_hand) * 2:
            hand.add_card(deck.draw())

        self.cards_dealt()
        result.add(
            EventType.HANDS_READY,
            dealer_hand=self.round.dealer_hand.to_dict(),
            player=self.player.to_dict(),
        )
        logger.info("Opening deal: player %s, dealer %s", self.player.hand, self.round.dealer_hand)
        return result

    # Player turn

    def hit(self) -> CommandResult:
        """Player takes another card. Busting ends the round for the house."""
        command = CommandType.HIT.value
        if self.state != GameState.PLAYER_TURN:
            return self._out_of_state(command)

        result = CommandResult(command=command)
        try:
            card = self._draw()
        except EmptyDeckError as error:
            result.add(EventType.DECK_EXHAUSTED, cards_remaining=0)
            return self._reject(result, error)

        hand = self.player.hand
        hand.add_card(card)
        result.add(EventType.PLAYER_HAND_UPDATED, hand=hand.to_dict())

        if hand.is_busted:
            result.add(EventType.PLAYER_BUST, hand_value=hand.value)
            self.player_busted()
            self._resolve_round(result)

        return result

    def stand(self) -> CommandResult:
        """Player keeps their hand; the dealer plays it out."""
        command = CommandType.STAND.value
        if self.state != GameState.PLAYER_TURN:
            return self._out_of_state(command)

        result = CommandResult(command=command)
        self.player_stood()
        self._play_dealer(result)
        return result

    # Dealer turn and resolution

    def dealer_should_hit(self) -> bool:
        """Fixed dealer policy: draw below 17, stand on any 17 or more."""
        return self.round.dealer_hand.value < self.rules.dealer_stands_on

    def _play_dealer(self, result: CommandResult) -> None:
        dealer_hand = self.round.dealer_hand

        while self.dealer_should_hit():
            try:
                card = self._draw()
            except EmptyDeckError as error:
                self._abort_round(result, error)
                return
            dealer_hand.add_card(card)
            result.add(
                EventType.DEALER_DEALT_CARD,
                card=card.to_descriptor(),
                hand=dealer_hand.to_dict(),
            )

        if dealer_hand.is_busted:
            result.add(EventType.DEALER_BUST, hand_value=dealer_hand.value)

        self.dealer_finished()
        self._resolve_round(result)

    def _resolve_round(self, result: CommandResult) -> None:
        """Pay out the confirmed bet and decide whether the session is over."""
        outcome = determine_outcome(self.player.hand, self.round.dealer_hand)
        bet = self.round.actual_bet

        if outcome is Outcome.PLAYER_WINS:
            self.player.win_money(2 * bet)
            result.add(EventType.WALLET_UPDATED, wallet=self.player.wallet)
        elif outcome is Outcome.PUSH:
            self.player.win_money(bet)
            result.add(EventType.WALLET_UPDATED, wallet=self.player.wallet)

        round_over = self.player.wallet < self.rules.min_playable_balance
        self.round.outcome = outcome
        self.round.over = round_over

        result.add(
            EventType.RESULTS_READY,
            outcome=outcome.value,
            message=str(outcome),
            round_over=round_over,
            player_value=self.player.hand.value,
            dealer_value=self.round.dealer_hand.value,
            bet=bet,
            wallet=self.player.wallet,
        )
        logger.info("Round resolved: %s (bet %d, wallet %d)", outcome, bet, self.player.wallet)

        if round_over:
            logger.info("Wallet below %d, session over", self.rules.min_playable_balance)
            self.session_ended()

    def _abort_round(self, result: CommandResult, error: EmptyDeckError) -> None:
        """The deck ran dry mid-round: refund the bet and start over."""
        refund = self.round.actual_bet
        if refund:
            self.player.win_money(refund)
            result.add(EventType.WALLET_UPDATED, wallet=self.player.wallet)

        result.add(EventType.DECK_EXHAUSTED, cards_remaining=0)
        result.add(EventType.ROUND_ABORTED, reason=str(error), refunded=refund)
        logger.warning("Round aborted: %s; refunded %d", error, refund)

        self.round = Round(player=self.player)
        self.player.hand = Hand()
        self.deck_ran_out()
        self._reject(result, error)

    def deal_next_round(self) -> CommandResult:
        """Throw away the finished round and go back to betting."""
        command = CommandType.DEAL_NEXT_ROUND.value
        if self.state != GameState.RESOLVED:
            return self._out_of_state(command)

        self.round = Round(player=self.player)
        self.player.hand = Hand()
        self.next_round()

        result = CommandResult(command=command)
        result.add(EventType.NEW_ROUND, wallet=self.player.wallet, intended_bet=self.intended_bet)
        return result

    # Helpers

    def _draw(self) -> Card:
        if self.round.deck is None:
            raise EmptyDeckError("No deck loaded")
        return self.round.deck.draw()

    def _not_enough_money(self, result: CommandResult, error: InsufficientFundsError) -> None:
        result.add(
            EventType.NOT_ENOUGH_MONEY,
            message=str(error),
            required=error.required,
            available=error.available,
        )

    @staticmethod
    def _reject(result: CommandResult, error: BlackjackError) -> CommandResult:
        result.accepted = False
        result.error = error
        return result

    def _out_of_state(self, command: str) -> CommandResult:
        error = OutOfStateCommand(command, self.state.name)
        logger.debug("Ignoring command: %s", error)
        return CommandResult(command=command, accepted=False, error=error)

    # Queries

    @property
    def can_bet(self) -> bool:
        return self.state == GameState.AWAITING_BET

    @property
    def can_hit(self) -> bool:
        return self.state == GameState.PLAYER_TURN and not self.player.hand.is_busted

    @property
    def can_stand(self) -> bool:
        return self.state == GameState.PLAYER_TURN

    @property
    def is_session_over(self) -> bool:
        return self.state == GameState.SESSION_OVER

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe view of the table for state queries."""
        outcome = self.round.outcome
        return {
            "state": self.state.name,
            "player": self.player.to_dict(),
            "dealer_hand": self.round.dealer_hand.to_dict(),
            "intended_bet": self.intended_bet,
            "actual_bet": self.round.actual_bet,
            "outcome": outcome.value if outcome else None,
            "round_over": self.round.over,
            "cards_remaining": self.round.deck.cards_remaining if self.round.deck else 0,
            "can_bet": self.can_bet,
            "can_hit": self.can_hit,
            "can_stand": self.can_stand,
        }
