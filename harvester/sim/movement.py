"""Single-step movement helpers used by the local world."""

from __future__ import annotations

from harvester.sim.pathfinding import Grid, PathFinder
from harvester.sim.world_state import Position, RoomState, range_to


def build_grid(room: RoomState) -> Grid:
    return Grid(width=room.width, height=room.height, walls=room.walls)


def next_step(
    pathfinder: PathFinder,
    start: Position,
    target: Position,
    blocked: set[Position],
    *,
    goal_range: int = 1,
) -> Position | None:
    """Return the first tile of a path toward target, or None when unreachable.

    Returns start itself when it is already within goal_range of target.
    """
    path = pathfinder.find_path(start, target, blocked, goal_range=goal_range)
    if path:
        return path[0]
    if range_to(start, target) <= goal_range:
        return start
    return None
