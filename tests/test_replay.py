import json
from pathlib import Path

from harvester.db.replay_log import (
    RUN_LOG_NAME,
    append_tick_payload,
    create_run_folder,
    write_header,
)
from harvester.render.replay_reader import read_header, read_tick_payloads
from harvester.sim.contracts import AgentSnapshot, Event, EventKind, TickPayload
from harvester.sim.goals import HarvestGoal


def _payload(tick: int) -> TickPayload:
    return TickPayload(
        tick=tick,
        agents=[
            AgentSnapshot(
                name="a",
                room_id="R1",
                position=(2, 3),
                energy=4,
                capacity=50,
                goal=HarvestGoal(source_id="source-1"),
            )
        ],
        events=[
            Event(
                kind=EventKind.GOAL_ASSIGNED,
                payload={"agent": "a", "goal": "harvest source-1"},
            )
        ],
    )


def test_replay_log_header_and_ticks(tmp_path: Path) -> None:
    run_dir, log_path = create_run_folder(tmp_path, timestamp="2026-01-31T15-50-00Z")
    write_header(log_path, metadata={"run_id": run_dir.name, "seed": 1})
    append_tick_payload(log_path, _payload(1))

    with log_path.open("r", encoding="utf-8") as handle:
        records = [json.loads(line) for line in handle]

    assert log_path.name == RUN_LOG_NAME
    assert records[0]["type"] == "header"
    assert records[0]["metadata"]["run_id"] == run_dir.name
    assert records[1]["type"] == "tick"
    assert records[1]["payload"]["agents"][0]["goal"] == {
        "kind": "harvest",
        "source_id": "source-1",
    }


def test_replay_reader_skips_header_and_garbage(tmp_path: Path) -> None:
    run_dir, log_path = create_run_folder(tmp_path, timestamp="2026-01-31T15-51-00Z")
    write_header(log_path, metadata={"run_id": run_dir.name})
    append_tick_payload(log_path, _payload(2))
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write("not json\n")

    payloads = list(read_tick_payloads(log_path))

    assert [payload.tick for payload in payloads] == [2]
    assert payloads[0].agents[0].goal == HarvestGoal(source_id="source-1")
    assert payloads[0].events[0].kind == EventKind.GOAL_ASSIGNED
    assert read_header(log_path) == {"run_id": run_dir.name}
