"""Pick a new goal for an agent that has none."""

from __future__ import annotations

import logging
import random
from typing import Protocol, Sequence, TypeVar

from harvester.sim.config import DEFAULT_POLICY, DEFAULT_SEED, PolicyConfig
from harvester.sim.contracts import ObjectKind
from harvester.sim.goals import BuildGoal, DepositGoal, Goal, HarvestGoal, UpgradeGoal
from harvester.sim.world_api import WorldQuery
from harvester.sim.world_state import AgentHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource(Protocol):
    def random(self) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...


def make_rng(seed: int = DEFAULT_SEED) -> random.Random:
    return random.Random(seed)


def chance(rng: RandomSource, probability: float) -> bool:
    return rng.random() < probability


def resolve(
    agent: AgentHandle,
    world: WorldQuery,
    rng: RandomSource,
    *,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Goal | None:
    """Commit to one goal, or return None to stay idle this tick.

    Carrying energy: upgrade with probability 0.7 (0.3 while construction sites
    exist), otherwise deposit with probability 0.3, otherwise build. Empty:
    harvest a uniformly chosen active source.
    """
    if agent.store.used > 0:
        goal = _spend_energy(agent, world, rng, config)
    else:
        goal = _collect_energy(agent, world, rng)
    if goal is None:
        logger.debug("%s found nothing to do", agent.name)
    return goal


def _spend_energy(
    agent: AgentHandle, world: WorldQuery, rng: RandomSource, config: PolicyConfig
) -> Goal | None:
    sites = world.find_construction_sites(agent.room_id)
    if sites:
        upgrade_chance = config.upgrade_chance_with_sites
    else:
        upgrade_chance = config.upgrade_chance_without_sites
    if chance(rng, upgrade_chance):
        for structure in world.find_structures(agent.room_id):
            if structure.kind == ObjectKind.CONTROLLER:
                return UpgradeGoal(controller_id=structure.object_id)
        return None
    if chance(rng, config.deposit_chance):
        return DepositGoal()
    if sites:
        return BuildGoal(site_id=sites[0].object_id)
    return None


def _collect_energy(
    agent: AgentHandle, world: WorldQuery, rng: RandomSource
) -> Goal | None:
    sources = world.find_sources_active(agent.room_id)
    if not sources:
        return None
    source = rng.choice(sources)
    return HarvestGoal(source_id=source.object_id)
