"""Signed session ids and the registry of live game sessions."""

import logging
from datetime import datetime, timedelta
from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from api.suppliers import get_deck_supplier, get_wallet_store
from config import config
from core.game import BlackjackGame, GameSession
from core.player import Player

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session_ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


class SessionRegistry:
    """In-memory map of raw session ids to live game sessions, with expiry."""

    def __init__(self, ttl: int | None = None) -> None:
        self._ttl = ttl or config.session_ttl
        self._sessions: dict[str, tuple[GameSession, datetime]] = {}

    def add(self, session_id: str, session: GameSession) -> None:
        self._sessions[session_id] = (session, datetime.now() + timedelta(seconds=self._ttl))

    def get(self, session_id: str) -> GameSession | None:
        """Return the session and extend its lifetime, or None if gone."""
        if session_id not in self._sessions:
            return None

        session, expiry = self._sessions[session_id]
        if expiry < datetime.now():
            self.remove(session_id)
            return None

        self.add(session_id, session)
        return session

    def remove(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._sessions.items() if expiry < now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


# Global registry instance
registry = SessionRegistry()


async def create_game_session() -> tuple[str, GameSession]:
    """Seat a new player and return the signed token with its session."""
    pruned = registry.cleanup_expired()
    if pruned:
        logger.info("Dropped %d expired sessions", pruned)

    session = GameSession(
        deck_supplier=get_deck_supplier(),
        wallet_store=await get_wallet_store(),
        game=BlackjackGame(
            rules=config.game,
            player=Player(wallet=config.game.starting_wallet),
        ),
    )
    await session.start()

    session_id = str(uuid4())
    registry.add(session_id, session)
    return get_session_signer().sign(session_id), session


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    signer = get_session_signer()
    return signer.unsign(token)


def get_game_session(token: str) -> GameSession | None:
    """Resolve a signed token to its live session."""
    session_id = extract_session_id(token)
    if session_id is None:
        return None
    return registry.get(session_id)
