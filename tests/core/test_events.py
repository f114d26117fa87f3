"""Tests for the event channel."""

from core.game.events import CommandResult, EventEmitter, EventType, GameEvent
from core.errors import OutOfStateCommand


class TestEventEmitter:
    def test_type_specific_subscription(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append, EventType.PLAYER_BUST)

        emitter.emit(GameEvent(EventType.PLAYER_BUST))
        emitter.emit(GameEvent(EventType.DEALER_BUST))

        assert [e.event_type for e in received] == [EventType.PLAYER_BUST]

    def test_catch_all_subscription(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)

        emitter.emit_all([GameEvent(EventType.BET_CHANGED), GameEvent(EventType.WALLET_UPDATED)])

        assert [e.name for e in received] == ["bet-changed", "wallet-updated"]

    def test_unsubscribe(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)

        assert emitter.unsubscribe(received.append)
        assert not emitter.unsubscribe(received.append)

        emitter.emit(GameEvent(EventType.NEW_ROUND))
        assert received == []

    def test_history(self):
        emitter = EventEmitter()
        emitter.emit(GameEvent(EventType.NEW_ROUND))
        assert len(emitter.history) == 1
        emitter.clear_history()
        assert emitter.history == []

    def test_handler_may_unsubscribe_itself(self):
        emitter = EventEmitter()
        calls = []

        def once(event):
            calls.append(event)
            emitter.unsubscribe(once)

        emitter.subscribe(once)
        emitter.emit(GameEvent(EventType.NEW_ROUND))
        emitter.emit(GameEvent(EventType.NEW_ROUND))
        assert len(calls) == 1


class TestGameEvent:
    def test_to_message(self):
        event = GameEvent(EventType.BET_CHANGED, {"intended_bet": 5})
        message = event.to_message()
        assert message["type"] == "event"
        assert message["event"] == "bet-changed"
        assert message["data"] == {"intended_bet": 5}
        assert "timestamp" in message


class TestCommandResult:
    def test_extend_keeps_failure(self):
        first = CommandResult(command="confirm-bet")
        first.add(EventType.BET_PLACED, amount=5)

        second = CommandResult(command="load-deck", accepted=False, error=OutOfStateCommand("load-deck", "RESOLVED"))
        second.add(EventType.DECK_EXHAUSTED, cards_remaining=0)

        first.extend(second)
        assert first.event_names == ["bet-placed", "deck-exhausted"]
        assert not first.accepted
        assert isinstance(first.error, OutOfStateCommand)
        assert first.has(EventType.DECK_EXHAUSTED)
        assert not first.has(EventType.RESULTS_READY)
