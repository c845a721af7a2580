"""World runtime state and the per-tick handles handed out to the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from harvester.sim.contracts import ObjectKind

Position = tuple[int, int]


class BodyPart(str, Enum):
    MOVE = "move"
    WORK = "work"
    CARRY = "carry"


BODY_PART_COST = {
    BodyPart.MOVE: 50,
    BodyPart.WORK: 100,
    BodyPart.CARRY: 50,
}
CARRY_CAPACITY = 50
AGENT_LIFETIME = 1500
SPAWN_TIME_PER_PART = 3

SOURCE_ENERGY_CAPACITY = 3000
SOURCE_REGEN_TICKS = 300
SPAWN_ENERGY_CAPACITY = 300
EXTENSION_ENERGY_CAPACITY = 50
EXTENSION_BUILD_COST = 3000

HARVEST_POWER = 2
UPGRADE_POWER = 1
BUILD_POWER = 5
UPGRADE_RANGE = 3
BUILD_RANGE = 3

STRUCTURE_KINDS = (ObjectKind.CONTROLLER, ObjectKind.SPAWN, ObjectKind.EXTENSION)


def body_cost(body: list[BodyPart] | tuple[BodyPart, ...]) -> int:
    return sum(BODY_PART_COST[part] for part in body)


def range_to(a: Position, b: Position) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def is_near_to(a: Position, b: Position) -> bool:
    return range_to(a, b) <= 1


@dataclass(frozen=True)
class Store:
    used: int
    capacity: int

    @property
    def free(self) -> int:
        return max(self.capacity - self.used, 0)


@dataclass(frozen=True)
class AgentHandle:
    """Read-only view of an agent, valid for the tick it was issued on."""

    name: str
    room_id: str
    position: Position
    store: Store
    body: tuple[BodyPart, ...]
    spawning: bool
    ticks_to_live: int
    tick: int


@dataclass(frozen=True)
class ObjectHandle:
    """Read-only view of a room object, valid for the tick it was issued on."""

    object_id: str
    kind: ObjectKind
    room_id: str
    position: Position
    tick: int
    store: Store | None = None
    progress: int = 0
    progress_total: int = 0


@dataclass(frozen=True)
class RoomState:
    room_id: str
    width: int
    height: int
    walls: frozenset[Position] = frozenset()

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height


@dataclass
class ObjectState:
    object_id: str
    kind: ObjectKind
    room_id: str
    position: Position
    energy: int = 0
    energy_capacity: int = 0
    progress: int = 0
    progress_total: int = 0
    regen_at: int | None = None

    def handle(self, tick: int) -> ObjectHandle:
        store = None
        if self.kind in (ObjectKind.SOURCE, ObjectKind.SPAWN, ObjectKind.EXTENSION):
            store = Store(used=self.energy, capacity=self.energy_capacity)
        return ObjectHandle(
            object_id=self.object_id,
            kind=self.kind,
            room_id=self.room_id,
            position=self.position,
            tick=tick,
            store=store,
            progress=self.progress,
            progress_total=self.progress_total,
        )


@dataclass
class AgentState:
    name: str
    room_id: str
    position: Position
    body: list[BodyPart] = field(
        default_factory=lambda: [
            BodyPart.MOVE,
            BodyPart.MOVE,
            BodyPart.CARRY,
            BodyPart.WORK,
        ]
    )
    energy: int = 0
    ticks_to_live: int = AGENT_LIFETIME
    spawning_ticks: int = 0
    moved_tick: int = -1

    @property
    def capacity(self) -> int:
        return CARRY_CAPACITY * self.count(BodyPart.CARRY)

    @property
    def spawning(self) -> bool:
        return self.spawning_ticks > 0

    def count(self, part: BodyPart) -> int:
        return sum(1 for item in self.body if item == part)

    def handle(self, tick: int) -> AgentHandle:
        return AgentHandle(
            name=self.name,
            room_id=self.room_id,
            position=self.position,
            store=Store(used=self.energy, capacity=self.capacity),
            body=tuple(self.body),
            spawning=self.spawning,
            ticks_to_live=self.ticks_to_live,
            tick=tick,
        )
