"""Tunable constants for the goal policy and the population controller."""

from __future__ import annotations

from dataclasses import dataclass, field

from harvester.sim.world_state import BodyPart

DEFAULT_SEED = 0xCAFEBEEF


@dataclass(frozen=True)
class PolicyConfig:
    upgrade_chance_with_sites: float = 0.3
    upgrade_chance_without_sites: float = 0.7
    deposit_chance: float = 0.3
    replenish_threshold: int = 300
    build_path_style: dict[str, str] = field(
        default_factory=lambda: {"stroke": "#ffffff"}
    )

    def __post_init__(self) -> None:
        for name in (
            "upgrade_chance_with_sites",
            "upgrade_chance_without_sites",
            "deposit_chance",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.replenish_threshold < 0:
            raise ValueError("replenish_threshold must be non-negative")


@dataclass(frozen=True)
class PopulationConfig:
    max_agents: int = 6
    body: tuple[BodyPart, ...] = (
        BodyPart.MOVE,
        BodyPart.MOVE,
        BodyPart.CARRY,
        BodyPart.WORK,
    )

    def __post_init__(self) -> None:
        if self.max_agents < 0:
            raise ValueError("max_agents must be non-negative")
        if not self.body:
            raise ValueError("body must contain at least one part")


DEFAULT_POLICY = PolicyConfig()
DEFAULT_POPULATION = PopulationConfig()
