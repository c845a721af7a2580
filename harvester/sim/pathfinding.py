"""Grid-based pathfinding (A*) over an 8-connected room grid."""

from __future__ import annotations

from dataclasses import dataclass
import heapq

from harvester.sim.world_state import Position, range_to

_DIRECTIONS = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)


@dataclass(frozen=True)
class Grid:
    width: int
    height: int
    walls: frozenset[Position]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_walkable(self, x: int, y: int, blocked: set[Position]) -> bool:
        if not self.in_bounds(x, y):
            return False
        if (x, y) in self.walls:
            return False
        if (x, y) in blocked:
            return False
        return True


class PathFinder:
    def __init__(self, grid: Grid) -> None:
        self._grid = grid

    def find_path(
        self,
        start: Position,
        goal: Position,
        blocked: set[Position],
        *,
        goal_range: int = 0,
    ) -> list[Position]:
        """Return the steps from start (exclusive) to a tile within goal_range.

        The goal tile itself may be occupied when goal_range >= 1.
        """
        if range_to(start, goal) <= goal_range:
            return []
        if goal_range == 0 and not self._grid.is_walkable(*goal, blocked):
            return []

        open_set: list[tuple[int, int, Position]] = []
        counter = 0
        heapq.heappush(open_set, (0, counter, start))
        came_from: dict[Position, Position | None] = {start: None}
        g_score: dict[Position, int] = {start: 0}

        while open_set:
            _, _, current = heapq.heappop(open_set)
            if range_to(current, goal) <= goal_range:
                return self._reconstruct_path(came_from, current)

            for neighbor in self._neighbors(current, blocked):
                tentative = g_score[current] + 1
                if tentative < g_score.get(neighbor, 1_000_000):
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative
                    counter += 1
                    f_score = tentative + max(
                        range_to(neighbor, goal) - goal_range, 0
                    )
                    heapq.heappush(open_set, (f_score, counter, neighbor))

        return []

    def _neighbors(self, current: Position, blocked: set[Position]) -> list[Position]:
        x, y = current
        candidates = [(x + dx, y + dy) for dx, dy in _DIRECTIONS]
        return [
            pos for pos in candidates if self._grid.is_walkable(pos[0], pos[1], blocked)
        ]

    @staticmethod
    def _reconstruct_path(
        came_from: dict[Position, Position | None],
        current: Position,
    ) -> list[Position]:
        path = []
        while current in came_from and came_from[current] is not None:
            path.append(current)
            current = came_from[current]
        path.reverse()
        return path

