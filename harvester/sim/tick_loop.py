"""Tick loop orchestration: run every agent, tidy memory, grow the population."""

from __future__ import annotations

import logging
from typing import Iterable

from harvester.sim.agent_policy import run_agent
from harvester.sim.config import (
    DEFAULT_POLICY,
    DEFAULT_POPULATION,
    PolicyConfig,
    PopulationConfig,
)
from harvester.sim.contracts import AgentSnapshot, Event, EventKind, TickPayload
from harvester.sim.goals import AgentMemory, describe_goal
from harvester.sim.memory import MemoryStore
from harvester.sim.population import maybe_spawn
from harvester.sim.resolver import RandomSource, make_rng
from harvester.sim.world_api import SimulatedWorld

logger = logging.getLogger(__name__)


def run_ticks(
    world: SimulatedWorld,
    ticks: int | None,
    *,
    store: MemoryStore | None = None,
    rng: RandomSource | None = None,
    policy: PolicyConfig = DEFAULT_POLICY,
    population: PopulationConfig = DEFAULT_POPULATION,
) -> Iterable[TickPayload]:
    memory_store = store if store is not None else MemoryStore()
    generator = rng if rng is not None else make_rng()
    step_count = 0
    while ticks is None or step_count < ticks:
        yield run_tick(
            world,
            memory_store,
            generator,
            policy=policy,
            population=population,
        )
        step_count += 1


def run_tick(
    world: SimulatedWorld,
    store: MemoryStore,
    rng: RandomSource,
    *,
    policy: PolicyConfig = DEFAULT_POLICY,
    population: PopulationConfig = DEFAULT_POPULATION,
) -> TickPayload:
    tick = world.tick
    logger.debug("tick %s starting", tick)
    events: list[Event] = []

    for agent in world.agents():
        if agent.spawning:
            continue
        memory = store.load(agent.name)
        try:
            updated = run_agent(agent, memory, world, rng, config=policy)
        except Exception as exc:
            logger.exception("agent %s failed on tick %s", agent.name, tick)
            events.append(
                Event(
                    kind=EventKind.AGENT_ERROR,
                    payload={"agent": agent.name, "error": repr(exc)},
                )
            )
            continue
        store.save(agent.name, updated)
        events.extend(_goal_events(agent.name, memory, updated))

    for name in store.reconcile(agent.name for agent in world.agents()):
        events.append(Event(kind=EventKind.MEMORY_RELEASED, payload={"agent": name}))

    headcount = len(world.agents())
    sequence = 0
    for room_id in world.room_ids():
        for spawn in world.find_my_spawns(room_id):
            name = maybe_spawn(
                world,
                spawn,
                population=headcount,
                sequence=sequence,
                config=population,
            )
            if name is None:
                continue
            sequence += 1
            headcount += 1
            events.append(
                Event(
                    kind=EventKind.SPAWN,
                    payload={"agent": name, "spawn": spawn.object_id},
                )
            )

    payload = TickPayload(
        tick=tick,
        agents=_snapshot_agents(world, store),
        rooms=world.room_snapshots(),
        events=events or None,
    )
    world.advance()
    logger.debug("tick %s done, %s agents", tick, len(payload.agents))
    return payload


def _goal_events(name: str, before: AgentMemory, after: AgentMemory) -> list[Event]:
    if before.goal == after.goal:
        return []
    if after.goal is None:
        return [
            Event(
                kind=EventKind.GOAL_CLEARED,
                payload={"agent": name, "goal": describe_goal(before.goal)},
            )
        ]
    return [
        Event(
            kind=EventKind.GOAL_ASSIGNED,
            payload={"agent": name, "goal": describe_goal(after.goal)},
        )
    ]


def _snapshot_agents(
    world: SimulatedWorld, store: MemoryStore
) -> list[AgentSnapshot]:
    return [
        AgentSnapshot(
            name=agent.name,
            room_id=agent.room_id,
            position=agent.position,
            energy=agent.store.used,
            capacity=agent.store.capacity,
            spawning=agent.spawning,
            goal=store.load(agent.name).goal,
        )
        for agent in world.agents()
    ]
