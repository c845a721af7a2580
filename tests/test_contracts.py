import pytest
from pydantic import ValidationError

from harvester.sim.goals import (
    AgentMemory,
    BuildGoal,
    DepositGoal,
    HarvestGoal,
    UpgradeGoal,
    describe_goal,
)


def test_memory_record_selects_variant_by_kind() -> None:
    memory = AgentMemory.model_validate({"goal": {"kind": "build", "site_id": "s"}})

    assert memory.goal == BuildGoal(site_id="s")
    assert AgentMemory.model_validate({}).goal is None
    assert AgentMemory.model_validate({"goal": None}).goal is None


def test_memory_record_rejects_bad_shapes() -> None:
    with pytest.raises(ValidationError):
        AgentMemory.model_validate({"goal": {"kind": "harvest"}})
    with pytest.raises(ValidationError):
        AgentMemory.model_validate({"goal": {"kind": "deposit", "target": "x"}})
    with pytest.raises(ValidationError):
        AgentMemory.model_validate({"goal": None, "extra": 1})


def test_goals_are_immutable() -> None:
    goal = UpgradeGoal(controller_id="c")

    with pytest.raises(ValidationError):
        goal.controller_id = "other"


def test_goal_descriptions() -> None:
    assert describe_goal(None) == "idle"
    assert describe_goal(DepositGoal()) == "deposit"
    assert describe_goal(HarvestGoal(source_id="source-2")) == "harvest source-2"
    assert describe_goal(UpgradeGoal(controller_id="c")) == "upgrade c"
