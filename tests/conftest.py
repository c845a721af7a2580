from __future__ import annotations

from typing import Any, Callable, Sequence

import pytest

from harvester.sim.contracts import ErrorCode
from harvester.sim.local_world import LocalWorld
from harvester.sim.world_loader import build_world, parse_room


class ScriptedRandom:
    """Replays fixed draws so policy decisions are predictable."""

    def __init__(self, draws: Sequence[float] = (), *, pick: int = 0) -> None:
        self.draws = list(draws)
        self.pick = pick
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.draws.pop(0)

    def choice(self, seq):
        self.calls += 1
        return seq[self.pick]


class RecordingWorld:
    """Wraps a LocalWorld, records every action call, optionally forces results."""

    ACTIONS = ("upgrade_controller", "harvest", "transfer", "build", "move_to")

    def __init__(self, world: LocalWorld, forced: dict[str, ErrorCode] | None = None):
        self.inner = world
        self.forced = dict(forced or {})
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def __getattr__(self, name: str):
        attr = getattr(self.inner, name)
        if name not in self.ACTIONS:
            return attr

        def _record(agent, target, *args, **kwargs):
            self.calls.append((name, target.object_id, kwargs))
            if name in self.forced:
                return self.forced[name]
            return attr(agent, target, *args, **kwargs)

        return _record

    @property
    def tick(self) -> int:
        return self.inner.tick

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def make_world() -> Callable[..., LocalWorld]:
    def _make(
        lines: list[str], agents: list[dict] | None = None, **extra
    ) -> LocalWorld:
        data = {"room_id": "R1", "map": lines, "agents": agents or []}
        data.update(extra)
        return build_world(parse_room(data))

    return _make


@pytest.fixture
def scripted_rng() -> type[ScriptedRandom]:
    return ScriptedRandom


@pytest.fixture
def recording() -> type[RecordingWorld]:
    return RecordingWorld
