"""Boundary between the decision engine and whatever simulates the world."""

from __future__ import annotations

from typing import Protocol

from harvester.sim.contracts import ErrorCode, RoomSnapshot
from harvester.sim.world_state import AgentHandle, BodyPart, ObjectHandle


class WorldQuery(Protocol):
    tick: int

    def agents(self) -> list[AgentHandle]:
        """Return handles for every live agent, including those still spawning."""

    def agent(self, name: str) -> AgentHandle | None:
        """Return a fresh handle for the named agent, or None if it is gone."""

    def resolve(self, object_id: str) -> ObjectHandle | None:
        """Return a fresh handle for the id, or None if it no longer exists."""

    def find_structures(self, room_id: str) -> list[ObjectHandle]:
        ...

    def find_my_spawns(self, room_id: str) -> list[ObjectHandle]:
        ...

    def find_construction_sites(self, room_id: str) -> list[ObjectHandle]:
        ...

    def find_sources_active(self, room_id: str) -> list[ObjectHandle]:
        ...

    def energy_available(self, room_id: str) -> int:
        """Total energy stored in the room's spawns and extensions."""


class ActionSink(Protocol):
    def upgrade_controller(
        self, agent: AgentHandle, controller: ObjectHandle
    ) -> ErrorCode: ...

    def harvest(self, agent: AgentHandle, source: ObjectHandle) -> ErrorCode: ...

    def transfer(
        self, agent: AgentHandle, target: ObjectHandle, amount: int
    ) -> ErrorCode: ...

    def build(self, agent: AgentHandle, site: ObjectHandle) -> ErrorCode: ...

    def move_to(
        self,
        agent: AgentHandle,
        target: ObjectHandle,
        *,
        path_style: dict[str, str] | None = None,
    ) -> ErrorCode: ...

    def spawn_agent(
        self, spawn: ObjectHandle, body: list[BodyPart], name: str
    ) -> ErrorCode: ...


class World(WorldQuery, ActionSink, Protocol):
    """Everything the engine and the driver need from the simulation."""


class SimulatedWorld(World, Protocol):
    """A world the driver loop can step on its own."""

    def room_ids(self) -> list[str]: ...

    def room_snapshots(self) -> list[RoomSnapshot]: ...

    def advance(self) -> None:
        """Close the current tick and open the next one."""
