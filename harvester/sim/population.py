"""Decide whether a spawn should start a new worker this tick."""

from __future__ import annotations

import logging

from harvester.sim.config import DEFAULT_POPULATION, PopulationConfig
from harvester.sim.contracts import ErrorCode
from harvester.sim.world_api import World
from harvester.sim.world_state import ObjectHandle, body_cost

logger = logging.getLogger(__name__)


def agent_name(tick: int, sequence: int) -> str:
    return f"{tick}-{sequence}"


def maybe_spawn(
    world: World,
    spawn: ObjectHandle,
    *,
    population: int,
    sequence: int,
    config: PopulationConfig = DEFAULT_POPULATION,
) -> str | None:
    """Request a new worker and return its name, or None if nothing was spawned."""
    logger.debug("running spawn %s", spawn.object_id)
    if population >= config.max_agents:
        return None
    body = list(config.body)
    if world.energy_available(spawn.room_id) < body_cost(body):
        return None
    name = agent_name(world.tick, sequence)
    result = world.spawn_agent(spawn, body, name)
    if result != ErrorCode.OK:
        logger.warning("couldn't spawn: %s", result.value)
        return None
    logger.info("spawning %s at %s", name, spawn.object_id)
    return name
