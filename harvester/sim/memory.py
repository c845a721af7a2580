"""Per-agent memory records keyed by agent name."""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable

from pydantic import ValidationError

from harvester.sim.goals import AgentMemory

logger = logging.getLogger(__name__)


class MemoryStore:
    """Holds one raw JSON-compatible record per agent name.

    Records outlive a single tick; `reconcile` drops the ones whose agent is
    no longer alive.
    """

    def __init__(self, records: dict[str, dict[str, Any]] | None = None) -> None:
        self._records: dict[str, dict[str, Any]] = dict(records or {})

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)

    @property
    def names(self) -> list[str]:
        return sorted(self._records)

    def load(self, name: str) -> AgentMemory:
        raw = self._records.get(name)
        if raw is None:
            return AgentMemory()
        try:
            return AgentMemory.model_validate(raw)
        except ValidationError as exc:
            logger.warning("discarding unreadable memory for %s: %s", name, exc)
            return AgentMemory()

    def save(self, name: str, memory: AgentMemory) -> None:
        self._records[name] = memory.model_dump(mode="json")

    def reconcile(self, live_names: Iterable[str]) -> list[str]:
        live = set(live_names)
        released = [name for name in sorted(self._records) if name not in live]
        for name in released:
            del self._records[name]
        return released

    def snapshot(self) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(self._records)
