"""Load a room from a JSON definition with an ASCII map."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from harvester.sim.contracts import ObjectKind
from harvester.sim.local_world import LocalWorld
from harvester.sim.world_state import (
    EXTENSION_BUILD_COST,
    EXTENSION_ENERGY_CAPACITY,
    SOURCE_ENERGY_CAPACITY,
    SPAWN_ENERGY_CAPACITY,
    AgentState,
    ObjectState,
    RoomState,
)

WALL = "#"
FLOOR = "."

SYMBOLS = {
    "S": ObjectKind.SOURCE,
    "C": ObjectKind.CONTROLLER,
    "P": ObjectKind.SPAWN,
    "E": ObjectKind.EXTENSION,
    "B": ObjectKind.CONSTRUCTION_SITE,
}

DEFAULT_ROOM: dict[str, Any] = {
    "room_id": "W1N1",
    "map": [
        "##############",
        "#S...........#",
        "#............#",
        "#.....C......#",
        "#............#",
        "#..B.....P...#",
        "#........E...#",
        "#............#",
        "#...........S#",
        "##############",
    ],
    "agents": [
        {"name": "founder", "position": [8, 4]},
    ],
}


@dataclass(frozen=True)
class AgentDef:
    name: str
    position: tuple[int, int]
    energy: int = 0


@dataclass(frozen=True)
class RoomDef:
    room_id: str
    lines: list[str]
    agents: list[AgentDef] = field(default_factory=list)
    spawn_energy: int = SPAWN_ENERGY_CAPACITY
    site_progress_total: int = EXTENSION_BUILD_COST


def parse_room(data: dict[str, Any]) -> RoomDef:
    try:
        room_id = data["room_id"]
        lines = list(data["map"])
    except KeyError as exc:
        raise ValueError(f"Room definition is missing {exc.args[0]!r}.") from exc
    agents = [
        AgentDef(
            name=agent["name"],
            position=(int(agent["position"][0]), int(agent["position"][1])),
            energy=int(agent.get("energy", 0)),
        )
        for agent in data.get("agents", [])
    ]
    return RoomDef(
        room_id=room_id,
        lines=lines,
        agents=agents,
        spawn_energy=int(data.get("spawn_energy", SPAWN_ENERGY_CAPACITY)),
        site_progress_total=int(
            data.get("site_progress_total", EXTENSION_BUILD_COST)
        ),
    )


def build_world(room: RoomDef) -> LocalWorld:
    if not room.lines:
        raise ValueError(f"Room {room.room_id} has an empty map.")
    width = len(room.lines[0])
    if any(len(line) != width for line in room.lines):
        raise ValueError(f"Room {room.room_id} map rows must all be {width} wide.")

    walls: set[tuple[int, int]] = set()
    objects: list[ObjectState] = []
    for y, line in enumerate(room.lines):
        for x, symbol in enumerate(line):
            if symbol == WALL:
                walls.add((x, y))
                continue
            if symbol == FLOOR:
                continue
            kind = SYMBOLS.get(symbol)
            if kind is None:
                raise ValueError(
                    f"Room {room.room_id} has unknown map symbol {symbol!r} "
                    f"at ({x}, {y})."
                )
            objects.append(_object_for(kind, room, (x, y)))

    state = RoomState(
        room_id=room.room_id,
        width=width,
        height=len(room.lines),
        walls=frozenset(walls),
    )
    agents = []
    for agent in room.agents:
        if not state.in_bounds(*agent.position) or agent.position in walls:
            raise ValueError(f"Agent {agent.name} starts on a blocked tile.")
        agents.append(
            AgentState(
                name=agent.name,
                room_id=room.room_id,
                position=agent.position,
                energy=agent.energy,
            )
        )
    return LocalWorld(rooms=[state], objects=objects, agents=agents)


def load_world(path: Path | None = None) -> LocalWorld:
    if path is None:
        return build_world(parse_room(DEFAULT_ROOM))
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Missing room definition file: {path}") from exc
    return build_world(parse_room(json.loads(text)))


def build_tiny_world() -> LocalWorld:
    return load_world()


def _object_for(
    kind: ObjectKind, room: RoomDef, position: tuple[int, int]
) -> ObjectState:
    if kind == ObjectKind.SOURCE:
        return ObjectState(
            object_id="",
            kind=kind,
            room_id=room.room_id,
            position=position,
            energy=SOURCE_ENERGY_CAPACITY,
            energy_capacity=SOURCE_ENERGY_CAPACITY,
        )
    if kind == ObjectKind.SPAWN:
        return ObjectState(
            object_id="",
            kind=kind,
            room_id=room.room_id,
            position=position,
            energy=min(room.spawn_energy, SPAWN_ENERGY_CAPACITY),
            energy_capacity=SPAWN_ENERGY_CAPACITY,
        )
    if kind == ObjectKind.EXTENSION:
        return ObjectState(
            object_id="",
            kind=kind,
            room_id=room.room_id,
            position=position,
            energy_capacity=EXTENSION_ENERGY_CAPACITY,
        )
    if kind == ObjectKind.CONSTRUCTION_SITE:
        return ObjectState(
            object_id="",
            kind=kind,
            room_id=room.room_id,
            position=position,
            progress_total=room.site_progress_total,
        )
    return ObjectState(
        object_id="", kind=kind, room_id=room.room_id, position=position
    )
