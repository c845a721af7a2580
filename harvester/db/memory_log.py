"""Snapshot the agent memory store to disk and back (JSON)."""

from __future__ import annotations

import json
from pathlib import Path

from harvester.sim.memory import MemoryStore

MEMORY_FILE_NAME = "memory.json"


def save_memory_snapshot(path: Path, store: MemoryStore) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump({"agents": store.snapshot()}, handle, indent=2, sort_keys=True)
        handle.write("\n")


def load_memory_snapshot(path: Path) -> MemoryStore:
    if not path.exists():
        return MemoryStore()
    data = json.loads(path.read_text(encoding="utf-8"))
    records = data.get("agents", {})
    if not isinstance(records, dict):
        raise ValueError(f"Memory snapshot {path} has no agents mapping.")
    return MemoryStore(records)
