from pathlib import Path

from harvester.db.memory_log import load_memory_snapshot, save_memory_snapshot
from harvester.sim.goals import AgentMemory, DepositGoal, UpgradeGoal
from harvester.sim.memory import MemoryStore


def test_missing_record_loads_as_idle() -> None:
    store = MemoryStore()

    assert store.load("nobody") == AgentMemory()
    assert "nobody" not in store


def test_saved_goal_round_trips_as_plain_record() -> None:
    store = MemoryStore()
    store.save("a", AgentMemory(goal=UpgradeGoal(controller_id="controller-1")))

    assert store.snapshot() == {
        "a": {"goal": {"kind": "upgrade", "controller_id": "controller-1"}}
    }
    assert store.load("a").goal == UpgradeGoal(controller_id="controller-1")


def test_unreadable_record_is_discarded() -> None:
    store = MemoryStore({"a": {"goal": {"kind": "teleport"}}})

    assert store.load("a") == AgentMemory()


def test_reconcile_drops_only_dead_names() -> None:
    store = MemoryStore()
    for name in ("a", "b", "c"):
        store.save(name, AgentMemory(goal=DepositGoal()))

    released = store.reconcile(["b", "z"])

    assert released == ["a", "c"]
    assert store.names == ["b"]


def test_snapshot_is_detached() -> None:
    store = MemoryStore()
    store.save("a", AgentMemory(goal=DepositGoal()))

    snapshot = store.snapshot()
    snapshot["a"]["goal"] = None

    assert store.load("a").goal == DepositGoal()


def test_memory_snapshot_file_round_trip(tmp_path: Path) -> None:
    store = MemoryStore()
    store.save("a", AgentMemory(goal=DepositGoal()))
    store.save("b", AgentMemory())
    path = tmp_path / "run" / "memory.json"

    save_memory_snapshot(path, store)
    restored = load_memory_snapshot(path)

    assert restored.names == ["a", "b"]
    assert restored.load("a").goal == DepositGoal()
    assert load_memory_snapshot(tmp_path / "missing.json").names == []
