"""Carry out an agent's committed goal for the current tick.

Every action is attempted optimistically. Movement is only issued in reaction
to a NOT_IN_RANGE rejection (or, for harvesting, a failed adjacency check).
Any other rejection, a target id that no longer resolves, or a goal whose
precondition no longer holds clears the goal so the resolver picks a new one
next tick.
"""

from __future__ import annotations

import logging

from harvester.sim.config import DEFAULT_POLICY, PolicyConfig
from harvester.sim.contracts import ErrorCode, ObjectKind
from harvester.sim.goals import BuildGoal, DepositGoal, Goal, HarvestGoal, UpgradeGoal
from harvester.sim.world_api import World
from harvester.sim.world_state import AgentHandle, ObjectHandle, is_near_to

logger = logging.getLogger(__name__)


def is_applicable(agent: AgentHandle, goal: Goal) -> bool:
    if isinstance(goal, HarvestGoal):
        return agent.store.free > 0
    return agent.store.used > 0


def execute(
    agent: AgentHandle,
    goal: Goal | None,
    world: World,
    *,
    config: PolicyConfig = DEFAULT_POLICY,
) -> Goal | None:
    """Run one tick of the committed goal and return the goal to keep."""
    if goal is None:
        return None
    if not is_applicable(agent, goal):
        logger.debug("%s: %s no longer applicable", agent.name, goal.kind)
        return None
    if isinstance(goal, UpgradeGoal):
        return _upgrade(agent, goal, world)
    if isinstance(goal, HarvestGoal):
        return _harvest(agent, goal, world)
    if isinstance(goal, DepositGoal):
        return _deposit(agent, goal, world, config)
    if isinstance(goal, BuildGoal):
        return _build(agent, goal, world, config)
    return None


def _upgrade(agent: AgentHandle, goal: UpgradeGoal, world: World) -> Goal | None:
    controller = _resolve(world, goal.controller_id, ObjectKind.CONTROLLER)
    if controller is None:
        logger.debug("%s: controller %s is gone", agent.name, goal.controller_id)
        return None
    result = world.upgrade_controller(agent, controller)
    if result == ErrorCode.OK:
        return _settle(agent, goal, world)
    return _after_action(agent, goal, world, controller, result, "upgrade")


def _harvest(agent: AgentHandle, goal: HarvestGoal, world: World) -> Goal | None:
    source = _resolve(world, goal.source_id, ObjectKind.SOURCE)
    if source is None:
        logger.debug("%s: source %s is gone", agent.name, goal.source_id)
        return None
    if not is_near_to(agent.position, source.position):
        world.move_to(agent, source)
        return goal
    result = world.harvest(agent, source)
    if result != ErrorCode.OK:
        logger.warning("%s couldn't harvest: %s", agent.name, result.value)
        return None
    return goal


def _deposit(
    agent: AgentHandle, goal: DepositGoal, world: World, config: PolicyConfig
) -> Goal | None:
    destination = _deposit_target(agent, world, config)
    if destination is None:
        logger.warning("%s has no home spawn to deposit into", agent.name)
        return None
    result = world.transfer(agent, destination, agent.store.used)
    if result == ErrorCode.OK:
        # the full load went out, so the delivery is finished
        return None
    return _after_action(agent, goal, world, destination, result, "transfer energy")


def _deposit_target(
    agent: AgentHandle, world: World, config: PolicyConfig
) -> ObjectHandle | None:
    spawns = world.find_my_spawns(agent.room_id)
    if not spawns:
        return None
    home = spawns[0]
    if world.energy_available(agent.room_id) < config.replenish_threshold:
        for structure in world.find_structures(agent.room_id):
            if structure.kind == ObjectKind.EXTENSION:
                return structure
    return home


def _build(
    agent: AgentHandle, goal: BuildGoal, world: World, config: PolicyConfig
) -> Goal | None:
    site = _resolve(world, goal.site_id, ObjectKind.CONSTRUCTION_SITE)
    if site is None:
        logger.debug("%s: construction site %s is gone", agent.name, goal.site_id)
        return None
    result = world.build(agent, site)
    if result == ErrorCode.NOT_IN_RANGE:
        world.move_to(agent, site, path_style=dict(config.build_path_style))
        return goal
    if result == ErrorCode.OK:
        return _settle(agent, goal, world)
    return _after_action(agent, goal, world, site, result, "build")


def _settle(agent: AgentHandle, goal: Goal, world: World) -> Goal | None:
    current = world.agent(agent.name)
    if current is None or current.store.used <= 0:
        return None
    return goal


def _after_action(
    agent: AgentHandle,
    goal: Goal,
    world: World,
    target: ObjectHandle,
    result: ErrorCode,
    verb: str,
) -> Goal | None:
    if result == ErrorCode.NOT_IN_RANGE:
        world.move_to(agent, target)
        return goal
    logger.warning("%s couldn't %s: %s", agent.name, verb, result.value)
    return None


def _resolve(world: World, object_id: str, kind: ObjectKind) -> ObjectHandle | None:
    handle = world.resolve(object_id)
    if handle is None or handle.kind != kind:
        return None
    return handle
