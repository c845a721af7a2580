"""Resolve-or-execute step for a single agent."""

from __future__ import annotations

from harvester.sim.config import DEFAULT_POLICY, PolicyConfig
from harvester.sim.executor import execute
from harvester.sim.goals import AgentMemory
from harvester.sim.resolver import RandomSource, resolve
from harvester.sim.world_api import World
from harvester.sim.world_state import AgentHandle


def run_agent(
    agent: AgentHandle,
    memory: AgentMemory,
    world: World,
    rng: RandomSource,
    *,
    config: PolicyConfig = DEFAULT_POLICY,
) -> AgentMemory:
    """Execute the committed goal, or pick one when there is none.

    Exactly one of the two runs per call; a goal cleared by the executor is
    only replaced on the next tick.
    """
    if memory.goal is not None:
        goal = execute(agent, memory.goal, world, config=config)
    else:
        goal = resolve(agent, world, rng, config=config)
    return AgentMemory(goal=goal)
