"""Game API endpoints."""

from fastapi import APIRouter, HTTPException, Header
from typing import Annotated

from api.schemas import (
    CommandRequest,
    CommandResponse,
    EventResponse,
    GameStateResponse,
    NewGameResponse,
)
from api.session import create_game_session, get_game_session
from core.errors import SupplierUnavailable
from core.game import CommandResult, GameSession

router = APIRouter()


def _require_session(session_id: str) -> GameSession:
    session = get_game_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown or expired session")
    return session


def _state_response(session: GameSession) -> GameStateResponse:
    return GameStateResponse(**session.game.snapshot())


def _command_response(session: GameSession, result: CommandResult) -> CommandResponse:
    return CommandResponse(
        command=result.command,
        accepted=result.accepted,
        error=str(result.error) if result.error else None,
        events=[EventResponse(event=e.name, data=e.data) for e in result.events],
        state=_state_response(session),
    )


@router.post("/new")
async def new_game() -> NewGameResponse:
    """Seat a new player with the starting wallet."""
    try:
        session_id, session = await create_game_session()
    except SupplierUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return NewGameResponse(
        session_id=session_id,
        player_id=session.player.id or "",
        wallet=session.player.wallet,
    )


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current table state."""
    return _state_response(_require_session(session_id))


@router.post("/command")
async def send_command(
    request: CommandRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> CommandResponse:
    """
    Run one command.

    Commands that don't fit the current state come back with
    ``accepted=false`` rather than an error status.
    """
    session = _require_session(session_id)
    payload = {"amount": request.amount} if request.amount is not None else {}

    try:
        result = await session.dispatch(request.command, payload)
    except SupplierUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return _command_response(session, result)
