"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from grid_snake.config import GameConfig
from grid_snake.grid import Bounds, Viewport
from grid_snake.server.models import (
    CreateSessionRequest,
    SessionStatus,
    SessionSummary,
    ViewportRequest,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request):
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a session and start its first round."""
    manager = _get_manager(request)
    client_ip = request.client.host if request.client else "unknown"
    try:
        config = GameConfig(
            movement_interval=body.movement_interval,
            starting_tail_length=body.starting_tail_length,
            swipe_threshold=body.swipe_threshold,
            screen_zoom=body.screen_zoom,
            restart_delay=body.restart_delay,
            seed=body.seed,
        )
        viewport = Viewport(
            orthographic_size=body.orthographic_size, aspect=body.aspect,
        )
        session = manager.create_session(
            config, viewport, frame_rate=body.frame_rate, client_ip=client_ip,
        )
    except PermissionError as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List active sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and the current round state."""
    manager = _get_manager(request)
    session = manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    return {
        "session_id": session.session_id,
        "status": session.status.value,
        "round": session.round,
        "frame_rate": session.frame_rate,
        "config": session.config.to_dict(),
        "viewport": {
            "orthographic_size": session.viewport.orthographic_size,
            "aspect": session.viewport.aspect,
        },
        "controller_connected": session.controller is not None,
        "spectators": len(session.spectators),
        "state": session.snapshot(),
    }


@router.put("/{session_id}/viewport")
async def set_viewport(
    session_id: str, body: ViewportRequest, request: Request,
) -> dict:
    """Change the session viewport."""
    manager = _get_manager(request)
    session = manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    try:
        viewport = Viewport(
            orthographic_size=body.orthographic_size, aspect=body.aspect,
        )
        Bounds.from_viewport(viewport, session.config.screen_zoom)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        manager.set_viewport(session_id, viewport)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {
        "session_id": session_id,
        "orthographic_size": viewport.orthographic_size,
        "aspect": viewport.aspect,
    }


@router.delete("/{session_id}")
async def close_session(session_id: str, request: Request) -> dict:
    """Stop a session."""
    manager = _get_manager(request)
    try:
        await manager.close_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {"status": SessionStatus.FINISHED.value, "session_id": session_id}
