"""Decision engine, world boundary and the local room simulation."""

from harvester.sim.agent_policy import run_agent
from harvester.sim.config import DEFAULT_SEED, PolicyConfig, PopulationConfig
from harvester.sim.contracts import (
    AgentSnapshot,
    ErrorCode,
    Event,
    EventKind,
    ObjectKind,
    RoomSnapshot,
    TickPayload,
)
from harvester.sim.executor import execute
from harvester.sim.goals import (
    AgentMemory,
    BuildGoal,
    DepositGoal,
    Goal,
    HarvestGoal,
    UpgradeGoal,
)
from harvester.sim.local_world import LocalWorld
from harvester.sim.memory import MemoryStore
from harvester.sim.population import maybe_spawn
from harvester.sim.resolver import make_rng, resolve
from harvester.sim.tick_loop import run_tick, run_ticks
from harvester.sim.world_api import ActionSink, SimulatedWorld, World, WorldQuery
from harvester.sim.world_loader import build_tiny_world, load_world

__all__ = [
    "ActionSink",
    "AgentMemory",
    "AgentSnapshot",
    "BuildGoal",
    "DEFAULT_SEED",
    "DepositGoal",
    "ErrorCode",
    "Event",
    "EventKind",
    "Goal",
    "HarvestGoal",
    "LocalWorld",
    "MemoryStore",
    "ObjectKind",
    "PolicyConfig",
    "PopulationConfig",
    "RoomSnapshot",
    "SimulatedWorld",
    "TickPayload",
    "UpgradeGoal",
    "World",
    "WorldQuery",
    "build_tiny_world",
    "execute",
    "load_world",
    "make_rng",
    "maybe_spawn",
    "resolve",
    "run_agent",
    "run_tick",
    "run_ticks",
]
