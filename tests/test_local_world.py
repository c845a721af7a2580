from harvester.sim.contracts import ErrorCode
from harvester.sim.pathfinding import Grid, PathFinder
from harvester.sim.world_state import (
    AGENT_LIFETIME,
    SOURCE_REGEN_TICKS,
    BodyPart,
    range_to,
)

ROOM = [
    "#########",
    "#S......#",
    "#.......#",
    "#...P...#",
    "#########",
]

CORRIDOR = [
    "#######",
    "#S#...#",
    "###.###",
    "#.....#",
    "#######",
]


def test_handles_from_an_earlier_tick_are_rejected(make_world) -> None:
    world = make_world(ROOM, agents=[{"name": "a", "position": [2, 2]}])
    agent = world.agent("a")
    source = world.resolve("source-1")

    world.advance()

    assert world.harvest(agent, source) == ErrorCode.INVALID_TARGET
    assert world.harvest(world.agent("a"), source) == ErrorCode.INVALID_TARGET
    assert world.harvest(world.agent("a"), world.resolve("source-1")) == ErrorCode.OK


def test_handles_are_snapshots(make_world) -> None:
    world = make_world(ROOM, agents=[{"name": "a", "position": [2, 2]}])
    before = world.agent("a")

    world.harvest(before, world.resolve("source-1"))

    assert before.store.used == 0
    assert world.agent("a").store.used == 2


def test_unknown_ids_do_not_resolve(make_world) -> None:
    world = make_world(ROOM)

    assert world.resolve("source-99") is None
    assert world.agent("ghost") is None


def test_move_to_steps_once_per_tick(make_world) -> None:
    world = make_world(ROOM, agents=[{"name": "a", "position": [7, 3]}])
    source = world.resolve("source-1")

    assert world.move_to(world.agent("a"), source) == ErrorCode.OK
    assert world.move_to(world.agent("a"), source) == ErrorCode.TIRED
    assert range_to(world.agent("a").position, (1, 1)) == 5


def test_move_to_reports_unreachable_targets(make_world) -> None:
    world = make_world(CORRIDOR, agents=[{"name": "a", "position": [1, 3]}])

    result = world.move_to(world.agent("a"), world.resolve("source-1"))

    assert result == ErrorCode.NO_PATH
    assert world.agent("a").position == (1, 3)


def test_agents_route_around_each_other() -> None:
    grid = Grid(width=5, height=3, walls=frozenset())
    finder = PathFinder(grid)

    path = finder.find_path((0, 1), (4, 1), {(2, 0), (2, 1)})

    assert path[-1] == (4, 1)
    assert (2, 2) in path


def test_path_to_range_stops_next_to_goal() -> None:
    finder = PathFinder(Grid(width=6, height=1, walls=frozenset()))

    assert finder.find_path((0, 0), (5, 0), {(5, 0)}, goal_range=1) == [
        (1, 0),
        (2, 0),
        (3, 0),
        (4, 0),
    ]


def test_transfer_rejects_overfilling(make_world) -> None:
    world = make_world(
        ROOM,
        agents=[{"name": "a", "position": [3, 2], "energy": 50}],
        spawn_energy=280,
    )

    result = world.transfer(world.agent("a"), world.resolve("spawn-1"), 50)

    assert result == ErrorCode.FULL
    assert world.agent("a").store.used == 50


def test_sources_regenerate_after_harvest(make_world) -> None:
    world = make_world(ROOM, agents=[{"name": "a", "position": [2, 2]}])
    world.harvest(world.agent("a"), world.resolve("source-1"))
    assert world.resolve("source-1").store.used == 2998

    for _ in range(SOURCE_REGEN_TICKS):
        world.advance()

    assert world.resolve("source-1").store.used == 3000


def test_agents_expire(make_world) -> None:
    world = make_world(ROOM, agents=[{"name": "a", "position": [2, 2]}])

    for _ in range(AGENT_LIFETIME):
        world.advance()

    assert world.agents() == []


def test_spawning_agents_cannot_act(make_world) -> None:
    world = make_world(ROOM)
    spawn = world.find_my_spawns("R1")[0]
    body = [BodyPart.MOVE, BodyPart.CARRY, BodyPart.WORK]
    assert world.spawn_agent(spawn, body, "new") == ErrorCode.OK

    agent = world.agent("new")
    assert agent.spawning
    assert world.move_to(agent, world.resolve("source-1")) == ErrorCode.BUSY

    for _ in range(9):
        world.advance()
    assert not world.agent("new").spawning
