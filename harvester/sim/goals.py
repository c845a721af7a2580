"""Committed goal variants and the per-agent memory record.

A goal only ever holds stable object ids. Live handles are re-resolved from
those ids on every tick and never stored here.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class UpgradeGoal(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["upgrade"] = "upgrade"
    controller_id: str


class HarvestGoal(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["harvest"] = "harvest"
    source_id: str


class DepositGoal(BaseModel):
    """Deliver carried energy home; the destination is picked every tick."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["deposit"] = "deposit"


class BuildGoal(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["build"] = "build"
    site_id: str


Goal = Annotated[
    Union[UpgradeGoal, HarvestGoal, DepositGoal, BuildGoal],
    Field(discriminator="kind"),
]


class AgentMemory(BaseModel):
    model_config = ConfigDict(extra="forbid")

    goal: Goal | None = None


def describe_goal(goal: Goal | None) -> str:
    if goal is None:
        return "idle"
    if isinstance(goal, UpgradeGoal):
        return f"upgrade {goal.controller_id}"
    if isinstance(goal, HarvestGoal):
        return f"harvest {goal.source_id}"
    if isinstance(goal, BuildGoal):
        return f"build {goal.site_id}"
    return "deposit"
