import pytest

from agent_planner.plans import Complexity, Effort
from agent_planner.quick_planner import create_quick_plan


def test_list_request_gets_simple_retrieval_plan():
    plan = create_quick_plan("list all files")

    assert plan is not None
    assert plan.complexity == Complexity.SIMPLE
    assert plan.estimated_effort == Effort.QUICK
    assert [m.id for m in plan.milestones] == ["fetch", "present"]
    assert all(m.completed is False for m in plan.milestones)


def test_unmatched_request_returns_none():
    assert create_quick_plan("write a novel") is None


@pytest.mark.parametrize(
    "task,complexity,count",
    [
        ("Create a new branch for the fix", Complexity.MODERATE, 3),
        ("remove the old backups", Complexity.SIMPLE, 3),
        ("please deploy the api", Complexity.COMPLEX, 5),
        ("analyze the codebase for dead code", Complexity.EXPLORATORY, 6),
        ("review last month's spending", Complexity.MODERATE, 4),
    ],
)
def test_template_shapes(task, complexity, count):
    plan = create_quick_plan(task)

    assert plan is not None
    assert plan.complexity == complexity
    assert len(plan.milestones) == count


def test_prefix_templates_need_a_following_word():
    # "listing" is not "list " so the retrieval template must not match
    assert create_quick_plan("listing prices for a novel") is None


def test_each_call_returns_an_independent_plan():
    first = create_quick_plan("show my cards")
    first.milestones[0].completed = True

    second = create_quick_plan("show my cards")

    assert second.milestones[0].completed is False


def test_wire_form_uses_camel_case():
    wire = create_quick_plan("get the weather").to_wire()

    assert wire["taskSummary"] == "Information retrieval task"
    assert wire["estimatedEffort"] == "quick"
    assert wire["explorationNeeded"] is False
    assert wire["milestones"][0] == {
        "id": "fetch",
        "description": "Fetch requested information",
        "completed": False,
    }
