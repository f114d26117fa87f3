"""Tests for the WebSocket event channel."""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from api.main import app


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def token(client):
    return client.post("/api/game/new").json()["session_id"]


def test_unknown_session_closes(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws/game/forged"):
            pass

    assert exc_info.value.code == 4404


def test_sends_state_on_connect(client, token):
    with client.websocket_connect(f"/ws/game/{token}") as ws:
        message = ws.receive_json()

    assert message["type"] == "state"
    assert message["state"]["state"] == "AWAITING_BET"


def test_events_arrive_before_result(client, token):
    with client.websocket_connect(f"/ws/game/{token}") as ws:
        ws.receive_json()
        ws.send_json({"command": "increase-bet", "amount": 5})

        event = ws.receive_json()
        result = ws.receive_json()

    assert event["type"] == "event"
    assert event["event"] == "bet-changed"
    assert event["data"] == {"intended_bet": 5}
    assert result == {"type": "result", "command": "increase-bet", "accepted": True, "error": None}


def test_out_of_state_command(client, token):
    with client.websocket_connect(f"/ws/game/{token}") as ws:
        ws.receive_json()
        ws.send_json({"command": "stand"})

        result = ws.receive_json()

    assert result["type"] == "result"
    assert result["accepted"] is False
    assert result["error"] == "Cannot stand while AWAITING_BET"


def test_get_state(client, token):
    with client.websocket_connect(f"/ws/game/{token}") as ws:
        ws.receive_json()
        ws.send_json({"command": "get-state"})

        message = ws.receive_json()

    assert message["type"] == "state"
    assert message["state"]["player"]["wallet"] == 100


@pytest.mark.parametrize("raw", ["not json", '["hit"]', '{"command": "split"}'])
def test_malformed_message(client, token, raw):
    with client.websocket_connect(f"/ws/game/{token}") as ws:
        ws.receive_json()
        ws.send_text(raw)

        message = ws.receive_json()

    assert message["type"] == "error"
    assert message["message"].startswith("Bad command")


class BrokenPipeSocket:
    """Accepts commands but fails to send any event."""

    def __init__(self, messages):
        self.messages = list(messages)
        self.sent = []
        self.closed_code = None

    async def accept(self):
        pass

    async def close(self, code=1000):
        self.closed_code = code

    async def receive_text(self):
        if not self.messages:
            raise WebSocketDisconnect(code=1000)
        return self.messages.pop(0)

    async def send_json(self, data):
        if data["type"] == "event":
            raise RuntimeError("connection lost")
        self.sent.append(data)


@pytest.mark.asyncio
async def test_dead_event_sender_ends_the_channel():
    import asyncio

    from api.session import create_game_session
    from api.websocket import game_websocket

    token, session = await create_game_session()
    socket = BrokenPipeSocket(['{"command": "confirm-bet", "amount": 10}', '{"command": "stand"}'])

    await asyncio.wait_for(game_websocket(socket, token), timeout=5)

    # Only the opening state went out; the second command was never read
    assert [m["type"] for m in socket.sent] == ["state"]
    assert socket.messages == ['{"command": "stand"}']
    assert session.game.state.name == "PLAYER_TURN"
