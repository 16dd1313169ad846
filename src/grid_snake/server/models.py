"""Pydantic models for API request/response schemas and socket messages."""

from __future__ import annotations

import enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class SessionStatus(str, enum.Enum):
    """Lifecycle states for a hosted session."""

    ACTIVE = "active"
    FINISHED = "finished"


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    movement_interval: float = Field(default=0.1, gt=0, le=2.0)
    starting_tail_length: int = Field(default=3, ge=0, le=100)
    swipe_threshold: float = Field(default=100.0, gt=0)
    screen_zoom: float = Field(default=1.0, gt=0, le=10.0)
    restart_delay: float = Field(default=3.0, ge=0, le=30.0)
    orthographic_size: float = Field(default=10.0, ge=1, le=200)
    aspect: float = Field(default=16 / 9, gt=0, le=10.0)
    frame_rate: int = Field(default=60, ge=10, le=240)
    seed: int | None = None


class ViewportRequest(BaseModel):
    """Request body for PUT /sessions/{session_id}/viewport."""

    orthographic_size: float = Field(ge=1, le=200)
    aspect: float = Field(gt=0, le=10.0)


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    status: SessionStatus
    round: int
    frame_rate: int
    movement_interval: float


class KeyMessage(BaseModel):
    """Discrete key-direction press from a controlling client."""

    type: Literal["key"]
    direction: Literal["up", "down", "left", "right"]


class TouchMessage(BaseModel):
    """One touch/drag sample from a controlling client."""

    type: Literal["touch"]
    phase: Literal["began", "moved", "ended"]
    x: float
    y: float


InputMessage = TypeAdapter(
    Annotated[Union[KeyMessage, TouchMessage], Field(discriminator="type")],
)
