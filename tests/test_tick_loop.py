from harvester.sim import tick_loop
from harvester.sim.config import PopulationConfig
from harvester.sim.contracts import EventKind
from harvester.sim.goals import AgentMemory, BuildGoal, HarvestGoal
from harvester.sim.memory import MemoryStore
from harvester.sim.resolver import make_rng
from harvester.sim.tick_loop import run_tick, run_ticks
from harvester.sim.world_loader import build_tiny_world

ROOM = [
    "#########",
    "#S......#",
    "#...C...#",
    "#.......#",
    "#########",
]


def _events(payload, kind):
    return [event for event in payload.events or [] if event.kind == kind]


def test_empty_agents_never_keep_spending_goals() -> None:
    world = build_tiny_world()
    store = MemoryStore()

    for payload in run_ticks(world, ticks=300, store=store, rng=make_rng(3)):
        for agent in payload.agents:
            if agent.energy == 0:
                assert agent.goal is None or isinstance(agent.goal, HarvestGoal)
        live = {agent.name for agent in payload.agents}
        assert set(store.names) <= live


def test_colony_makes_progress() -> None:
    payloads = list(run_ticks(build_tiny_world(), ticks=300, rng=make_rng(11)))

    assert [payload.tick for payload in payloads[:3]] == [0, 1, 2]
    assert len(payloads[-1].agents) > 1
    assigned = [
        event.payload["goal"]
        for payload in payloads
        for event in _events(payload, EventKind.GOAL_ASSIGNED)
    ]
    assert any(goal.startswith("harvest") for goal in assigned)
    assert any(not goal.startswith("harvest") for goal in assigned)


def test_spawn_requested_when_energy_allows() -> None:
    world = build_tiny_world()
    payload = run_tick(world, MemoryStore(), make_rng())

    spawns = _events(payload, EventKind.SPAWN)
    assert [event.payload["agent"] for event in spawns] == ["0-0"]
    assert world.agent("0-0").spawning


def test_population_cap_blocks_spawning() -> None:
    world = build_tiny_world()
    payload = run_tick(
        world,
        MemoryStore(),
        make_rng(),
        population=PopulationConfig(max_agents=1),
    )

    assert _events(payload, EventKind.SPAWN) == []
    assert [agent.name for agent in world.agents()] == ["founder"]


def test_memory_of_dead_agents_is_released(make_world) -> None:
    world = make_world(ROOM, agents=[{"name": "a", "position": [2, 2]}])
    store = MemoryStore({"ghost": {"goal": {"kind": "deposit"}}})

    payload = run_tick(world, store, make_rng())

    released = _events(payload, EventKind.MEMORY_RELEASED)
    assert [event.payload["agent"] for event in released] == ["ghost"]
    assert store.names == ["a"]


def test_cleared_goal_is_replaced_on_next_tick(make_world) -> None:
    world = make_world(ROOM, agents=[{"name": "a", "position": [2, 2]}])
    store = MemoryStore()
    store.save("a", AgentMemory(goal=BuildGoal(site_id="construction-site-9")))

    first = run_tick(world, store, make_rng())
    assert [e.kind for e in first.events or []] == [EventKind.GOAL_CLEARED]
    assert store.load("a").goal is None

    second = run_tick(world, store, make_rng())
    assert _events(second, EventKind.GOAL_ASSIGNED)
    assert store.load("a").goal == HarvestGoal(source_id="source-1")


def test_one_failing_agent_does_not_stop_the_tick(make_world, monkeypatch) -> None:
    world = make_world(
        ROOM,
        agents=[
            {"name": "a", "position": [2, 2]},
            {"name": "b", "position": [3, 3]},
        ],
    )
    store = MemoryStore()
    store.save("a", AgentMemory(goal=HarvestGoal(source_id="source-1")))
    real_run_agent = tick_loop.run_agent

    def _flaky(agent, memory, *args, **kwargs):
        if agent.name == "a":
            raise RuntimeError("boom")
        return real_run_agent(agent, memory, *args, **kwargs)

    monkeypatch.setattr(tick_loop, "run_agent", _flaky)
    payload = run_tick(world, store, make_rng())

    errors = _events(payload, EventKind.AGENT_ERROR)
    assert [event.payload["agent"] for event in errors] == ["a"]
    assert store.load("a").goal == HarvestGoal(source_id="source-1")
    assert store.load("b").goal == HarvestGoal(source_id="source-1")


def test_spawning_agents_are_skipped() -> None:
    world = build_tiny_world()
    store = MemoryStore()
    run_tick(world, store, make_rng())

    assert "0-0" not in store
    assert "founder" in store


def test_runs_are_reproducible_with_same_seed() -> None:
    first = [
        payload.model_dump()
        for payload in run_ticks(build_tiny_world(), ticks=60, rng=make_rng(5))
    ]
    second = [
        payload.model_dump()
        for payload in run_ticks(build_tiny_world(), ticks=60, rng=make_rng(5))
    ]

    assert first == second
