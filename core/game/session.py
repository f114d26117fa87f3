"""Caller-owned game session wiring the engine to its collaborators."""

import asyncio
import logging
from typing import Any, Mapping

from core.errors import SupplierUnavailable
from core.game.engine import BlackjackGame
from core.game.events import (
    CommandResult,
    CommandType,
    EventEmitter,
    EventHandler,
    EventType,
)
from core.player import Player
from core.suppliers import DeckSupplier, WalletStore

logger = logging.getLogger(__name__)


class GameSession:
    """
    One player at one table.

    Commands are serialised: each runs to completion, including any deck
    fetch it triggers, before the next one is looked at. Events from the
    engine are published on ``events`` in the order the engine produced
    them, and every wallet change is pushed to the wallet store.
    """

    def __init__(
        self,
        deck_supplier: DeckSupplier,
        wallet_store: WalletStore,
        game: BlackjackGame | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        self.game = game or BlackjackGame()
        self.events = emitter or EventEmitter()
        self._deck_supplier = deck_supplier
        self._wallet_store = wallet_store
        self._lock = asyncio.Lock()
        # Set when the last wallet push failed
        self.wallet_dirty = False

    @property
    def player(self) -> Player:
        return self.game.player

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self.events.subscribe(handler, event_type)

    async def start(self) -> str:
        """Register the player with the wallet store and return its id."""
        if self.player.id is None:
            try:
                player_id = await self._wallet_store.create(self.player.wallet)
            except SupplierUnavailable:
                logger.warning("Could not register player with wallet store")
                raise
            self.player.assign_id(player_id)
            logger.info("Registered player %s with wallet %d", player_id, self.player.wallet)
        return self.player.id  # type: ignore[return-value]

    async def dispatch(
        self,
        command: CommandType | str,
        payload: Mapping[str, Any] | None = None,
    ) -> CommandResult:
        """
        Run one inbound command.

        A failed wallet push does not fail the command: it is logged and
        retried on the next dispatch.

        Raises:
            SupplierUnavailable: the deck supplier failed; the engine is left
                waiting and `retry-deck` asks again
            ValueError: unknown command name
        """
        async with self._lock:
            result = self.game.handle(command, payload)
            self._publish(result)

            if self.wallet_dirty or result.has(EventType.WALLET_UPDATED):
                await self._persist_wallet()

            if result.has(EventType.DECK_REQUESTED):
                result.extend(await self._deal_from_supplier())

            return result

    async def sync_wallet(self) -> None:
        """Push the current balance to the wallet store."""
        if self.player.id is None:
            logger.debug("Player not registered, wallet not persisted")
            return
        try:
            await self._wallet_store.update(self.player.id, self.player.wallet)
        except SupplierUnavailable as exc:
            logger.warning("Wallet update for %s failed: %s", self.player.id, exc)
            self.wallet_dirty = True
            raise
        self.wallet_dirty = False

    async def _persist_wallet(self) -> None:
        try:
            await self.sync_wallet()
        except SupplierUnavailable:
            logger.info("Wallet for %s will be pushed again on the next command", self.player.id)

    async def _deal_from_supplier(self) -> CommandResult:
        try:
            descriptors = await self._deck_supplier.fetch()
        except SupplierUnavailable as exc:
            logger.warning("Deck supplier unavailable: %s", exc)
            raise

        deal = self.game.load_deck(descriptors)
        self._publish(deal)
        if isinstance(deal.error, SupplierUnavailable):
            logger.warning("Deck rejected: %s", deal.error)
            raise deal.error
        return deal

    def _publish(self, result: CommandResult) -> None:
        self.events.emit_all(result.events)
