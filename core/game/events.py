"""Named commands, notifications and the event channel."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable

from core.errors import BlackjackError


class CommandType(Enum):
    """Inbound commands from the presentation layer."""

    INCREASE_BET = "increase-bet"
    RESET_BET = "reset-bet"
    CONFIRM_BET = "confirm-bet"
    HIT = "hit"
    STAND = "stand"
    DEAL_NEXT_ROUND = "deal-next-round"
    RETRY_DECK = "retry-deck"


class EventType(Enum):
    """Outbound notifications published by the engine."""

    # Dealing
    HANDS_READY = "hands-ready"
    PLAYER_HAND_UPDATED = "player-hand-updated"
    PLAYER_BUST = "player-bust"
    DEALER_DEALT_CARD = "dealer-dealt-card"
    DEALER_BUST = "dealer-bust"

    # Betting and money
    BET_CHANGED = "bet-changed"
    BET_PLACED = "bet-placed"
    NOT_ENOUGH_MONEY = "not-enough-money"
    WALLET_UPDATED = "wallet-updated"

    # Round flow
    DECK_REQUESTED = "deck-requested"
    DECK_EXHAUSTED = "deck-exhausted"
    RESULTS_READY = "results-ready"
    ROUND_ABORTED = "round-aborted"
    NEW_ROUND = "new-round"


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events are the only thing the presentation layer renders from.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def name(self) -> str:
        return self.event_type.value

    def to_message(self) -> dict[str, Any]:
        """JSON-safe form for the wire."""
        return {
            "type": "event",
            "event": self.name,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        return f"{self.name}: {self.data}"


@dataclass
class CommandResult:
    """
    What a command did.

    ``events`` lists the notifications to publish, in order. Rejected
    commands carry the reason in ``error`` instead of raising.
    """

    command: str
    accepted: bool = True
    events: list[GameEvent] = field(default_factory=list)
    error: BlackjackError | None = None

    def add(self, event_type: EventType, **data: Any) -> GameEvent:
        event = GameEvent(event_type=event_type, data=data)
        self.events.append(event)
        return event

    def extend(self, other: "CommandResult") -> None:
        """Append another result's events, keeping its failure if any."""
        self.events.extend(other.events)
        if not other.accepted:
            self.accepted = False
            self.error = other.error

    def has(self, event_type: EventType) -> bool:
        return any(e.event_type is event_type for e in self.events)

    @property
    def event_names(self) -> list[str]:
        return [e.name for e in self.events]


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Simple event emitter for game events.

    Allows subscribing to specific event types or all events.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[GameEvent] = []

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> bool:
        """Remove a handler. Returns False if it was not subscribed."""
        handlers = self._handlers.get(event_type, [])
        if handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def emit(self, event: GameEvent) -> None:
        """Deliver an event to type-specific handlers, then catch-all handlers."""
        self._event_history.append(event)

        for handler in list(self._handlers.get(event.event_type, [])):
            handler(event)

        for handler in list(self._handlers.get(None, [])):
            handler(event)

    def emit_all(self, events: Iterable[GameEvent]) -> None:
        for event in events:
            self.emit(event)

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        return self._event_history.copy()

    def clear_history(self) -> None:
        self._event_history.clear()
