"""WebSocket event channel: commands in, notifications out."""

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from api.session import get_game_session
from core.errors import SupplierUnavailable
from core.game import CommandResult, CommandType, GameEvent

logger = logging.getLogger(__name__)

router = APIRouter()


def _result_message(result: CommandResult) -> dict[str, Any]:
    return {
        "type": "result",
        "command": result.command,
        "accepted": result.accepted,
        "error": str(result.error) if result.error else None,
    }


def _parse_command(message: Any) -> tuple[CommandType, dict[str, Any]]:
    """Decode ``{"command": "...", "amount": n}``; ValueError if malformed."""
    if not isinstance(message, dict):
        raise ValueError("Message must be a JSON object")
    command = CommandType(message.get("command"))
    payload = {}
    if message.get("amount") is not None:
        payload["amount"] = message["amount"]
    return command, payload


async def _drain(queue: asyncio.Queue, forwarder: asyncio.Task) -> bool:
    """Wait until every queued event is sent; False if the forwarder died first."""
    joined = asyncio.ensure_future(queue.join())
    await asyncio.wait({joined, forwarder}, return_when=asyncio.FIRST_COMPLETED)
    if joined.done():
        return True
    joined.cancel()
    return False


@router.websocket("/game/{session_id}")
async def game_websocket(websocket: WebSocket, session_id: str) -> None:
    """
    WebSocket endpoint for real-time table updates.

    Messages from client:
    - {"command": "increase-bet", "amount": 5}
    - {"command": "confirm-bet"} / {"command": "hit"} / {"command": "stand"} ...
    - {"command": "get-state"}

    Messages to client:
    - {"type": "state", "state": {...}}
    - {"type": "event", "event": "...", "data": {...}, "timestamp": "..."}
    - {"type": "result", "command": "...", "accepted": bool, "error": ...}
    - {"type": "error", "message": "..."}
    """
    session = get_game_session(session_id)
    if session is None:
        await websocket.close(code=4404)
        return

    await websocket.accept()
    queue: asyncio.Queue[GameEvent] = asyncio.Queue()
    handler = queue.put_nowait
    session.subscribe(handler)

    async def forward_events() -> None:
        while True:
            event = await queue.get()
            try:
                await websocket.send_json(event.to_message())
            finally:
                queue.task_done()

    forwarder = asyncio.create_task(forward_events())
    await websocket.send_json({"type": "state", "state": session.game.snapshot()})

    try:
        while True:
            raw = await websocket.receive_text()

            try:
                message = json.loads(raw)
                if isinstance(message, dict) and message.get("command") == "get-state":
                    await websocket.send_json({"type": "state", "state": session.game.snapshot()})
                    continue
                command, payload = _parse_command(message)
            except ValueError as exc:
                await websocket.send_json({"type": "error", "message": f"Bad command: {exc}"})
                continue

            try:
                result = await session.dispatch(command, payload)
            except SupplierUnavailable as exc:
                await websocket.send_json({"type": "error", "message": str(exc)})
                continue

            # Events go out before the result message
            if not await _drain(queue, forwarder):
                logger.info("Event forwarding stopped, closing session channel")
                break
            await websocket.send_json(_result_message(result))

    except WebSocketDisconnect:
        logger.info("WebSocket for session disconnected")
    finally:
        session.events.unsubscribe(handler)
        forwarder.cancel()
        try:
            await forwarder
        except asyncio.CancelledError:
            pass
        except (WebSocketDisconnect, RuntimeError) as exc:
            logger.info("Event forwarder ended: %r", exc)
