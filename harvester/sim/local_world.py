"""In-memory world simulation implementing the engine's world boundary."""

from __future__ import annotations

import logging
from typing import Iterable

from harvester.sim.contracts import ErrorCode, ObjectKind, RoomSnapshot
from harvester.sim.movement import build_grid, next_step
from harvester.sim.pathfinding import PathFinder
from harvester.sim.world_state import (
    BUILD_POWER,
    BUILD_RANGE,
    EXTENSION_ENERGY_CAPACITY,
    HARVEST_POWER,
    SOURCE_REGEN_TICKS,
    SPAWN_TIME_PER_PART,
    STRUCTURE_KINDS,
    UPGRADE_POWER,
    UPGRADE_RANGE,
    AgentHandle,
    AgentState,
    BodyPart,
    ObjectHandle,
    ObjectState,
    Position,
    RoomState,
    body_cost,
    range_to,
)

logger = logging.getLogger(__name__)

_SPAWN_OFFSETS = (
    (0, 1),
    (1, 0),
    (-1, 0),
    (0, -1),
    (1, 1),
    (-1, 1),
    (1, -1),
    (-1, -1),
)


class LocalWorld:
    """A small deterministic room simulation.

    Actions take effect immediately. Handles are snapshots stamped with the
    tick they were issued on; acting through a handle from an earlier tick is
    rejected with INVALID_TARGET.
    """

    def __init__(
        self,
        *,
        rooms: Iterable[RoomState],
        objects: Iterable[ObjectState] = (),
        agents: Iterable[AgentState] = (),
        tick: int = 0,
    ) -> None:
        self.tick = tick
        self._rooms = {room.room_id: room for room in rooms}
        self._objects: dict[str, ObjectState] = {}
        self._agents: dict[str, AgentState] = {}
        self._pathfinders = {
            room_id: PathFinder(build_grid(room))
            for room_id, room in self._rooms.items()
        }
        self._id_counters: dict[str, int] = {}
        for obj in objects:
            self._add_object(obj)
        for agent in agents:
            if agent.room_id not in self._rooms:
                raise ValueError(
                    f"Agent {agent.name} is in unknown room {agent.room_id}."
                )
            self._agents[agent.name] = agent

    # -- queries -----------------------------------------------------------

    def room_ids(self) -> list[str]:
        return list(self._rooms.keys())

    def agents(self) -> list[AgentHandle]:
        return [
            self._agents[name].handle(self.tick) for name in sorted(self._agents)
        ]

    def agent(self, name: str) -> AgentHandle | None:
        state = self._agents.get(name)
        return state.handle(self.tick) if state else None

    def resolve(self, object_id: str) -> ObjectHandle | None:
        obj = self._objects.get(object_id)
        return obj.handle(self.tick) if obj else None

    def find_structures(self, room_id: str) -> list[ObjectHandle]:
        return self._find(room_id, STRUCTURE_KINDS)

    def find_my_spawns(self, room_id: str) -> list[ObjectHandle]:
        return self._find(room_id, (ObjectKind.SPAWN,))

    def find_construction_sites(self, room_id: str) -> list[ObjectHandle]:
        return self._find(room_id, (ObjectKind.CONSTRUCTION_SITE,))

    def find_sources_active(self, room_id: str) -> list[ObjectHandle]:
        return [
            handle
            for handle in self._find(room_id, (ObjectKind.SOURCE,))
            if handle.store is not None and handle.store.used > 0
        ]

    def energy_available(self, room_id: str) -> int:
        return sum(obj.energy for obj in self._energy_structures(room_id))

    def energy_capacity(self, room_id: str) -> int:
        return sum(obj.energy_capacity for obj in self._energy_structures(room_id))

    def room_snapshots(self) -> list[RoomSnapshot]:
        snapshots = []
        for room_id in self._rooms:
            controller = next(
                (
                    obj
                    for obj in self._objects.values()
                    if obj.room_id == room_id and obj.kind == ObjectKind.CONTROLLER
                ),
                None,
            )
            snapshots.append(
                RoomSnapshot(
                    room_id=room_id,
                    energy_available=self.energy_available(room_id),
                    energy_capacity=self.energy_capacity(room_id),
                    construction_sites=len(self.find_construction_sites(room_id)),
                    controller_progress=controller.progress if controller else 0,
                )
            )
        return snapshots

    # -- actions -----------------------------------------------------------

    def upgrade_controller(
        self, agent: AgentHandle, controller: ObjectHandle
    ) -> ErrorCode:
        checked = self._check(agent, controller, ObjectKind.CONTROLLER)
        if isinstance(checked, ErrorCode):
            return checked
        worker, target = checked
        work = worker.count(BodyPart.WORK)
        if work == 0:
            return ErrorCode.NO_BODYPART
        if worker.energy <= 0:
            return ErrorCode.NOT_ENOUGH_RESOURCES
        if range_to(worker.position, target.position) > UPGRADE_RANGE:
            return ErrorCode.NOT_IN_RANGE
        spent = min(work * UPGRADE_POWER, worker.energy)
        worker.energy -= spent
        target.progress += spent
        return ErrorCode.OK

    def harvest(self, agent: AgentHandle, source: ObjectHandle) -> ErrorCode:
        checked = self._check(agent, source, ObjectKind.SOURCE)
        if isinstance(checked, ErrorCode):
            return checked
        worker, target = checked
        work = worker.count(BodyPart.WORK)
        if work == 0:
            return ErrorCode.NO_BODYPART
        if range_to(worker.position, target.position) > 1:
            return ErrorCode.NOT_IN_RANGE
        if target.energy <= 0:
            return ErrorCode.NOT_ENOUGH_RESOURCES
        free = worker.capacity - worker.energy
        if free <= 0:
            return ErrorCode.FULL
        gained = min(work * HARVEST_POWER, target.energy, free)
        target.energy -= gained
        worker.energy += gained
        if target.regen_at is None:
            target.regen_at = self.tick + SOURCE_REGEN_TICKS
        return ErrorCode.OK

    def transfer(
        self, agent: AgentHandle, target: ObjectHandle, amount: int
    ) -> ErrorCode:
        checked = self._check(agent, target, ObjectKind.SPAWN, ObjectKind.EXTENSION)
        if isinstance(checked, ErrorCode):
            return checked
        worker, structure = checked
        if amount <= 0:
            return ErrorCode.INVALID_ARGS
        if worker.energy < amount:
            return ErrorCode.NOT_ENOUGH_RESOURCES
        if range_to(worker.position, structure.position) > 1:
            return ErrorCode.NOT_IN_RANGE
        if structure.energy_capacity - structure.energy < amount:
            return ErrorCode.FULL
        worker.energy -= amount
        structure.energy += amount
        return ErrorCode.OK

    def build(self, agent: AgentHandle, site: ObjectHandle) -> ErrorCode:
        checked = self._check(agent, site, ObjectKind.CONSTRUCTION_SITE)
        if isinstance(checked, ErrorCode):
            return checked
        worker, target = checked
        work = worker.count(BodyPart.WORK)
        if work == 0:
            return ErrorCode.NO_BODYPART
        if worker.energy <= 0:
            return ErrorCode.NOT_ENOUGH_RESOURCES
        if range_to(worker.position, target.position) > BUILD_RANGE:
            return ErrorCode.NOT_IN_RANGE
        spent = min(
            work * BUILD_POWER, worker.energy, target.progress_total - target.progress
        )
        worker.energy -= spent
        target.progress += spent
        if target.progress >= target.progress_total:
            self._complete_site(target)
        return ErrorCode.OK

    def move_to(
        self,
        agent: AgentHandle,
        target: ObjectHandle,
        *,
        path_style: dict[str, str] | None = None,
    ) -> ErrorCode:
        checked = self._check(agent, target)
        if isinstance(checked, ErrorCode):
            return checked
        worker, destination = checked
        if worker.count(BodyPart.MOVE) == 0:
            return ErrorCode.NO_BODYPART
        if worker.moved_tick == self.tick:
            return ErrorCode.TIRED
        if worker.room_id != destination.room_id:
            return ErrorCode.NO_PATH
        blocked = self._occupied(worker.room_id, exclude=worker.name)
        step = next_step(
            self._pathfinders[worker.room_id],
            worker.position,
            destination.position,
            blocked,
        )
        if step is None:
            return ErrorCode.NO_PATH
        if step != worker.position:
            worker.position = step
            worker.moved_tick = self.tick
        if path_style:
            logger.debug(
                "%s moving to %s (path %s)",
                worker.name,
                destination.object_id,
                path_style.get("stroke"),
            )
        return ErrorCode.OK

    def spawn_agent(
        self, spawn: ObjectHandle, body: list[BodyPart], name: str
    ) -> ErrorCode:
        obj = self._fresh_object(spawn)
        if obj is None or obj.kind != ObjectKind.SPAWN:
            return ErrorCode.INVALID_TARGET
        if not body:
            return ErrorCode.INVALID_ARGS
        if name in self._agents:
            return ErrorCode.INVALID_ARGS
        if any(
            agent.spawning and range_to(agent.position, obj.position) <= 1
            for agent in self._agents.values()
        ):
            return ErrorCode.BUSY
        cost = body_cost(body)
        if self.energy_available(obj.room_id) < cost:
            return ErrorCode.NOT_ENOUGH_RESOURCES
        position = self._free_tile_near(obj.room_id, obj.position)
        if position is None:
            return ErrorCode.BUSY
        self._withdraw_energy(obj, cost)
        self._agents[name] = AgentState(
            name=name,
            room_id=obj.room_id,
            position=position,
            body=list(body),
            spawning_ticks=len(body) * SPAWN_TIME_PER_PART,
        )
        return ErrorCode.OK

    # -- world editing -----------------------------------------------------

    def remove_object(self, object_id: str) -> None:
        self._objects.pop(object_id, None)

    def set_object_energy(self, object_id: str, energy: int) -> None:
        obj = self._objects[object_id]
        obj.energy = max(0, min(energy, obj.energy_capacity))

    # -- tick --------------------------------------------------------------

    def advance(self) -> None:
        """Finish the current tick: age agents, regenerate sources."""
        expired = []
        for agent in self._agents.values():
            if agent.spawning:
                agent.spawning_ticks -= 1
                continue
            agent.ticks_to_live -= 1
            if agent.ticks_to_live <= 0:
                expired.append(agent.name)
        for name in expired:
            logger.info("agent %s expired", name)
            del self._agents[name]

        next_tick = self.tick + 1
        for obj in self._objects.values():
            if obj.kind != ObjectKind.SOURCE or obj.regen_at is None:
                continue
            if next_tick >= obj.regen_at:
                obj.energy = obj.energy_capacity
                obj.regen_at = None
        self.tick = next_tick

    # -- internals ---------------------------------------------------------

    def _add_object(self, obj: ObjectState) -> str:
        if obj.room_id not in self._rooms:
            raise ValueError(f"Object is in unknown room {obj.room_id}.")
        if not obj.object_id:
            obj.object_id = self._next_id(obj.kind)
        elif obj.object_id in self._objects:
            raise ValueError(f"Duplicate object id {obj.object_id}.")
        self._objects[obj.object_id] = obj
        return obj.object_id

    def _next_id(self, kind: ObjectKind) -> str:
        prefix = kind.value.replace("_", "-")
        count = self._id_counters.get(prefix, 0)
        while True:
            count += 1
            candidate = f"{prefix}-{count}"
            if candidate not in self._objects:
                break
        self._id_counters[prefix] = count
        return candidate

    def _find(self, room_id: str, kinds: tuple[ObjectKind, ...]) -> list[ObjectHandle]:
        return [
            obj.handle(self.tick)
            for obj in self._objects.values()
            if obj.room_id == room_id and obj.kind in kinds
        ]

    def _energy_structures(self, room_id: str) -> list[ObjectState]:
        return [
            obj
            for obj in self._objects.values()
            if obj.room_id == room_id
            and obj.kind in (ObjectKind.SPAWN, ObjectKind.EXTENSION)
        ]

    def _fresh_object(self, handle: ObjectHandle) -> ObjectState | None:
        if handle.tick != self.tick:
            return None
        return self._objects.get(handle.object_id)

    def _check(
        self, agent: AgentHandle, target: ObjectHandle, *kinds: ObjectKind
    ) -> ErrorCode | tuple[AgentState, ObjectState]:
        worker = self._agents.get(agent.name)
        if worker is None:
            return ErrorCode.NOT_FOUND
        if agent.tick != self.tick:
            return ErrorCode.INVALID_TARGET
        if worker.spawning:
            return ErrorCode.BUSY
        obj = self._fresh_object(target)
        if obj is None:
            return ErrorCode.INVALID_TARGET
        if kinds and obj.kind not in kinds:
            return ErrorCode.INVALID_TARGET
        return worker, obj

    def _complete_site(self, site: ObjectState) -> None:
        del self._objects[site.object_id]
        self._add_object(
            ObjectState(
                object_id="",
                kind=ObjectKind.EXTENSION,
                room_id=site.room_id,
                position=site.position,
                energy_capacity=EXTENSION_ENERGY_CAPACITY,
            )
        )
        logger.info("construction site %s completed", site.object_id)

    def _occupied(self, room_id: str, *, exclude: str | None = None) -> set[Position]:
        blocked = {
            agent.position
            for agent in self._agents.values()
            if agent.room_id == room_id and agent.name != exclude
        }
        blocked.update(
            obj.position
            for obj in self._objects.values()
            if obj.room_id == room_id and obj.kind != ObjectKind.CONSTRUCTION_SITE
        )
        return blocked

    def _free_tile_near(self, room_id: str, position: Position) -> Position | None:
        room = self._rooms[room_id]
        blocked = self._occupied(room_id)
        x, y = position
        for dx, dy in _SPAWN_OFFSETS:
            candidate = (x + dx, y + dy)
            if not room.in_bounds(*candidate):
                continue
            if candidate in room.walls or candidate in blocked:
                continue
            return candidate
        return None

    def _withdraw_energy(self, spawn: ObjectState, amount: int) -> None:
        remaining = amount
        ordered = [spawn] + [
            obj
            for obj in self._energy_structures(spawn.room_id)
            if obj.object_id != spawn.object_id
        ]
        for structure in ordered:
            taken = min(structure.energy, remaining)
            structure.energy -= taken
            remaining -= taken
            if remaining == 0:
                break
