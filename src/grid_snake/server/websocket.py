"""WebSocket handlers for controlling and spectating a session."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from grid_snake.controls import TouchPhase
from grid_snake.server.models import InputMessage, KeyMessage, SessionStatus
from grid_snake.server.session_manager import GameSession, SessionManager
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_DIRECTION_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _apply_input(session: GameSession, raw: str) -> None:
    """Feed one client message into the engine; malformed input is dropped."""
    try:
        msg = InputMessage.validate_json(raw)
    except ValidationError:
        return

    if session.engine is None or session.status != SessionStatus.ACTIVE:
        return
    if isinstance(msg, KeyMessage):
        session.engine.press_direction(_DIRECTION_MAP[msg.direction])
    else:
        session.engine.touch(TouchPhase(msg.phase), (msg.x, msg.y))


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Controller WebSocket: send input, receive state on every change."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return
    if session.status != SessionStatus.ACTIVE:
        await websocket.close(code=4009, reason="Session is finished.")
        return

    await websocket.accept()

    # Only one socket steers a session at a time.
    previous_ws = session.controller
    if previous_ws is not None and previous_ws is not websocket:
        try:
            await previous_ws.close(code=4008, reason="Replaced by new connection.")
        except Exception:
            logger.warning(
                "Failed closing previous controller in session %s.", session_id,
            )

    session.controller = websocket
    logger.info("Controller connected to session %s.", session_id)

    # Send initial state snapshot so the client gets immediate feedback.
    async with session.lock:
        state = session.snapshot()
    await websocket.send_text(json.dumps(state, separators=(",", ":")))

    try:
        while True:
            raw = await websocket.receive_text()
            async with session.lock:
                _apply_input(session, raw)
    except WebSocketDisconnect:
        logger.info("Controller disconnected from session %s.", session_id)
    finally:
        # A newer connection may have replaced this socket while this handler
        # was still shutting down.
        if session.controller is websocket:
            session.controller = None


@ws_router.websocket("/sessions/{session_id}/spectate")
async def spectate(websocket: WebSocket, session_id: str) -> None:
    """Spectator WebSocket: receive-only state stream."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    session.spectators.append(websocket)
    logger.info("Spectator connected to session %s.", session_id)

    async with session.lock:
        state = session.snapshot()
    await websocket.send_text(json.dumps(state, separators=(",", ":")))

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Spectator disconnected from session %s.", session_id)
    finally:
        if websocket in session.spectators:
            session.spectators.remove(websocket)
