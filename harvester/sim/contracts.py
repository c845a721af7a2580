"""Serialisable contracts shared by the engine, the driver and the replay log."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from harvester.sim.goals import Goal


class ErrorCode(str, Enum):
    OK = "OK"
    NOT_OWNER = "NOT_OWNER"
    NO_PATH = "NO_PATH"
    BUSY = "BUSY"
    NOT_FOUND = "NOT_FOUND"
    NOT_ENOUGH_RESOURCES = "NOT_ENOUGH_RESOURCES"
    INVALID_TARGET = "INVALID_TARGET"
    FULL = "FULL"
    NOT_IN_RANGE = "NOT_IN_RANGE"
    INVALID_ARGS = "INVALID_ARGS"
    TIRED = "TIRED"
    NO_BODYPART = "NO_BODYPART"


class ObjectKind(str, Enum):
    CONTROLLER = "controller"
    SPAWN = "spawn"
    EXTENSION = "extension"
    SOURCE = "source"
    CONSTRUCTION_SITE = "construction_site"


class EventKind(str, Enum):
    GOAL_ASSIGNED = "GOAL_ASSIGNED"
    GOAL_CLEARED = "GOAL_CLEARED"
    AGENT_ERROR = "AGENT_ERROR"
    SPAWN = "SPAWN"
    MEMORY_RELEASED = "MEMORY_RELEASED"


class Event(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: EventKind
    payload: dict[str, Any] = Field(default_factory=dict)


class AgentSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    room_id: str
    position: tuple[int, int]
    energy: int
    capacity: int
    spawning: bool = False
    goal: Goal | None = None


class RoomSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    room_id: str
    energy_available: int
    energy_capacity: int
    construction_sites: int = 0
    controller_progress: int = 0


class TickPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tick: int
    agents: list[AgentSnapshot] = Field(default_factory=list)
    rooms: list[RoomSnapshot] = Field(default_factory=list)
    events: list[Event] | None = None
