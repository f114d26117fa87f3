"""Network-backed deck supplier and wallet store, with in-process fallbacks."""

import logging
from typing import Any
from uuid import uuid4

import httpx
import redis.asyncio as redis
from redis.exceptions import RedisError

from config import config
from core.errors import SupplierUnavailable
from core.suppliers import DeckSupplier, InMemoryWalletStore, ShuffledDeckSupplier, WalletStore

logger = logging.getLogger(__name__)


class HttpDeckSupplier(DeckSupplier):
    """Fetch a deck from a remote deck service."""

    def __init__(
        self,
        url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout or config.suppliers.timeout
        self._transport = transport

    async def fetch(self) -> list[Any]:
        """
        GET the deck URL.

        Accepts either a bare JSON list of descriptors or an object with a
        ``cards`` list.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            raise SupplierUnavailable(f"Deck request to {self._url} failed: {exc}") from exc
        except ValueError as exc:
            raise SupplierUnavailable(f"Deck response was not JSON: {exc}") from exc

        cards = payload.get("cards") if isinstance(payload, dict) else payload
        if not isinstance(cards, list):
            raise SupplierUnavailable("Deck response has no card list")
        return cards


class RedisWalletStore(WalletStore):
    """Redis-backed wallet store."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client
        self._prefix = "blackjack:wallet:"

    def _key(self, player_id: str) -> str:
        return f"{self._prefix}{player_id}"

    async def create(self, wallet: int) -> str:
        player_id = str(uuid4())
        try:
            await self._redis.set(self._key(player_id), wallet)
        except RedisError as exc:
            raise SupplierUnavailable(f"Could not create player: {exc}") from exc
        return player_id

    async def get(self, player_id: str) -> int | None:
        try:
            data = await self._redis.get(self._key(player_id))
        except RedisError as exc:
            raise SupplierUnavailable(f"Could not read wallet: {exc}") from exc
        if data is None:
            return None
        return int(data)

    async def update(self, player_id: str, wallet: int) -> None:
        try:
            # xx: only overwrite an existing player
            updated = await self._redis.set(self._key(player_id), wallet, xx=True)
        except RedisError as exc:
            raise SupplierUnavailable(f"Could not update wallet: {exc}") from exc
        if not updated:
            raise SupplierUnavailable(f"Unknown player {player_id}")


# Global wallet store instance
_wallet_store: WalletStore | None = None


async def get_wallet_store() -> WalletStore:
    """Get or create the wallet store."""
    global _wallet_store

    if _wallet_store is not None:
        return _wallet_store

    if config.suppliers.wallet_backend == "redis":
        try:
            redis_client = redis.from_url(config.redis.url)
            await redis_client.ping()
            _wallet_store = RedisWalletStore(redis_client)
            return _wallet_store
        except RedisError as exc:
            logger.warning("Redis unavailable (%s), using in-memory wallet store", exc)

    _wallet_store = InMemoryWalletStore()
    return _wallet_store


def get_deck_supplier() -> DeckSupplier:
    """Use the configured deck service, or generate decks locally."""
    if config.suppliers.deck_url:
        return HttpDeckSupplier(config.suppliers.deck_url)
    return ShuffledDeckSupplier()
