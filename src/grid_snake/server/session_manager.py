"""In-memory session registry, round restarts, and async frame loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from grid_snake.config import GameConfig
from grid_snake.engine import GameEngine
from grid_snake.grid import Bounds, Viewport
from grid_snake.server.models import SessionStatus, SessionSummary

logger = logging.getLogger(__name__)

# Simple rate limit: max sessions created per IP within the window.
_RATE_LIMIT_WINDOW = 60.0  # seconds
_RATE_LIMIT_MAX = 10
_RATE_COMPACT_INTERVAL = 60.0  # seconds between stale-key sweeps
_MAX_FINISHED_SESSIONS = 100


@dataclass
class GameSession:
    """One hosted simulation and the sockets watching it."""

    session_id: str
    config: GameConfig
    viewport: Viewport
    frame_rate: int
    status: SessionStatus = SessionStatus.ACTIVE
    engine: GameEngine | None = None
    round: int = 0
    restart_pending: bool = False
    controller: WebSocket | None = None
    spectators: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    def new_round(self) -> None:
        """Replace the engine with a freshly constructed one."""
        self.engine = GameEngine(
            self.config, viewport=self.viewport, on_restart=self._request_restart,
        )
        self.round += 1
        self.restart_pending = False

    def _request_restart(self) -> None:
        self.restart_pending = True

    def snapshot(self) -> dict:
        """Return the session's current round state."""
        assert self.engine is not None  # noqa: S101
        return {
            "session_id": self.session_id,
            "round": self.round,
            **self.engine.get_state(),
        }

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            status=self.status,
            round=self.round,
            frame_rate=self.frame_rate,
            movement_interval=self.config.movement_interval,
        )


class SessionManager:
    """Central registry managing all hosted sessions."""

    def __init__(self, max_finished_sessions: int = _MAX_FINISHED_SESSIONS) -> None:
        if max_finished_sessions < 0:
            raise ValueError("max_finished_sessions must be >= 0.")
        self._sessions: dict[str, GameSession] = {}
        self._rate_limits: dict[str, list[float]] = {}
        self._last_rate_compact: float = 0.0
        self._max_finished_sessions = max_finished_sessions

    def _check_rate_limit(self, client_ip: str) -> bool:
        """Return True if the client is within rate limits."""
        now = time.monotonic()
        timestamps = self._rate_limits.get(client_ip, [])
        timestamps = [t for t in timestamps if now - t < _RATE_LIMIT_WINDOW]
        if timestamps:
            self._rate_limits[client_ip] = timestamps
        else:
            self._rate_limits.pop(client_ip, None)
        self._compact_rate_limits(now)
        return len(timestamps) < _RATE_LIMIT_MAX

    def _compact_rate_limits(self, now: float) -> None:
        """Remove rate-limit entries whose timestamps have all expired."""
        if now - self._last_rate_compact < _RATE_COMPACT_INTERVAL:
            return
        self._last_rate_compact = now
        stale_ips = [
            ip for ip, ts in self._rate_limits.items()
            if all(now - t >= _RATE_LIMIT_WINDOW for t in ts)
        ]
        for ip in stale_ips:
            del self._rate_limits[ip]
        if stale_ips:
            logger.info(
                "Compacted %d stale rate-limit entries.", len(stale_ips),
            )

    def _record_creation(self, client_ip: str) -> None:
        self._rate_limits.setdefault(client_ip, []).append(time.monotonic())

    def create_session(
        self,
        config: GameConfig,
        viewport: Viewport,
        frame_rate: int = 60,
        client_ip: str = "unknown",
    ) -> GameSession:
        """Create a session, start its first round and its frame loop."""
        if not self._check_rate_limit(client_ip):
            raise PermissionError("Rate limit exceeded. Try again later.")

        session = GameSession(
            session_id=uuid.uuid4().hex[:12],
            config=config,
            viewport=viewport,
            frame_rate=frame_rate,
        )
        session.new_round()
        self._sessions[session.session_id] = session
        self._record_creation(client_ip)
        session._task = asyncio.create_task(self._frame_loop(session))
        logger.info(
            "Session %s created (tick=%.3fs, fps=%d).",
            session.session_id, config.movement_interval, frame_rate,
        )
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[SessionSummary]:
        """Return summaries of active sessions."""
        return [
            s.summary() for s in self._sessions.values()
            if s.status == SessionStatus.ACTIVE
        ]

    def set_viewport(self, session_id: str, viewport: Viewport) -> GameSession:
        """Change the viewport used for boundary checks and later rounds.

        Raises ``ValueError`` when the session is finished or when the
        viewport is too small to hold a playfield at the session zoom.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        if session.status != SessionStatus.ACTIVE:
            raise ValueError("Session is finished.")
        Bounds.from_viewport(viewport, session.config.screen_zoom)
        session.viewport = viewport
        logger.info(
            "Session %s viewport set to size=%.2f aspect=%.3f.",
            session_id, viewport.orthographic_size, viewport.aspect,
        )
        return session

    async def close_session(self, session_id: str) -> None:
        """Stop a session's frame loop and disconnect its sockets."""
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        if session.status == SessionStatus.FINISHED:
            raise ValueError("Session is already finished.")

        self._mark_session_finished(session)
        task = session._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        await self._close_connections(session)
        self._prune_finished_sessions()
        logger.info("Session %s closed.", session_id)

    async def _frame_loop(self, session: GameSession) -> None:
        """Drive the engine once per frame, broadcasting state on change."""
        frame_interval = 1.0 / session.frame_rate
        last = time.monotonic()
        signature: tuple | None = None
        try:
            while session.status == SessionStatus.ACTIVE:
                await asyncio.sleep(frame_interval)
                now = time.monotonic()
                async with session.lock:
                    assert session.engine is not None  # noqa: S101
                    session.engine.update(now - last, session.viewport)
                    if session.restart_pending:
                        session.new_round()
                        logger.info(
                            "Session %s started round %d.",
                            session.session_id, session.round,
                        )
                    state = session.snapshot()
                last = now

                current = (state["round"], state["tick"], state["state"])
                if current != signature:
                    signature = current
                    await self._broadcast(session, state)
        except asyncio.CancelledError:
            logger.info("Frame loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Frame loop error in session %s.", session.session_id)
            self._mark_session_finished(session)
        finally:
            if session.status == SessionStatus.FINISHED:
                await self._close_connections(session)
                self._prune_finished_sessions()

    def _mark_session_finished(self, session: GameSession) -> None:
        """Transition a session to finished exactly once."""
        if session.status != SessionStatus.FINISHED:
            session.status = SessionStatus.FINISHED
            session.finished_at = time.monotonic()

    async def _close_connections(self, session: GameSession) -> None:
        """Close the controller and spectator sockets of a finished session."""
        ws = session.controller
        session.controller = None
        if ws is not None:
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session finished.")
            except Exception:
                logger.warning(
                    "Failed closing controller socket in session %s.",
                    session.session_id,
                )

        for ws in list(session.spectators):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session finished.")
            except Exception:
                logger.warning(
                    "Failed closing spectator socket in session %s.",
                    session.session_id,
                )
        session.spectators.clear()

    def _prune_finished_sessions(self) -> None:
        """Bound retained finished sessions to avoid unbounded registry growth."""
        finished = [
            s for s in self._sessions.values() if s.status == SessionStatus.FINISHED
        ]
        overflow = len(finished) - self._max_finished_sessions
        if overflow <= 0:
            return

        finished.sort(
            key=lambda s: s.finished_at if s.finished_at is not None else s.created_at,
        )
        for stale in finished[:overflow]:
            self._sessions.pop(stale.session_id, None)
        logger.info(
            "Pruned %d finished sessions (retaining up to %d).",
            overflow,
            self._max_finished_sessions,
        )

    async def _broadcast(self, session: GameSession, state: dict) -> None:
        """Send state to the controller and all spectators."""
        payload = json.dumps(state, separators=(",", ":"))

        ws = session.controller
        if ws is not None:
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                if session.controller is ws:
                    session.controller = None

        # Iterate over a snapshot so concurrent disconnect handlers can mutate
        # the live spectator list without affecting this send loop.
        dead_spectators: list[WebSocket] = []
        for ws in list(session.spectators):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead_spectators.append(ws)

        for ws in dead_spectators:
            if ws in session.spectators:
                session.spectators.remove(ws)

    async def cleanup(self) -> None:
        """Cancel all running frame loops and release rate-limit state."""
        tasks = [
            s._task for s in self._sessions.values()
            if s._task and not s._task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._rate_limits.clear()
        logger.info("SessionManager cleanup complete.")
