from agent_planner.plans import Complexity, Effort, ExecutionPlan, milestone
from agent_planner.tracker import PlanTracker


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _plan(count: int = 3) -> ExecutionPlan:
    return ExecutionPlan(
        task_summary="Ship the release",
        complexity=Complexity.MODERATE,
        estimated_effort=Effort.MEDIUM,
        exploration_needed=False,
        milestones=[milestone(f"m{i}", f"Step {i}") for i in range(1, count + 1)],
    )


def test_unknown_milestone_changes_nothing():
    tracker = PlanTracker(_plan())

    assert tracker.complete_milestone("nope") is False

    progress = tracker.get_progress()
    assert progress.completed == 0
    assert progress.percentage == 0
    assert len(progress.remaining) == 3


def test_completing_every_milestone():
    tracker = PlanTracker(_plan())

    for mid in ("m1", "m2", "m3"):
        assert tracker.complete_milestone(mid) is True

    assert tracker.is_complete() is True
    assert tracker.get_next_milestone() is None
    assert tracker.get_progress().percentage == 100
    assert tracker.get_progress().remaining == []


def test_repeat_completion_is_idempotent():
    tracker = PlanTracker(_plan())

    assert tracker.complete_milestone("m2") is True
    assert tracker.complete_milestone("m2") is True

    assert tracker.get_progress().completed == 1


def test_next_milestone_follows_list_order():
    tracker = PlanTracker(_plan())
    tracker.complete_milestone("m2")

    assert tracker.get_next_milestone().id == "m1"

    tracker.complete_milestone("m1")
    assert tracker.get_next_milestone().id == "m3"


def test_percentage_rounds_half_up():
    tracker = PlanTracker(_plan(count=3))
    tracker.complete_milestone("m1")
    assert tracker.get_progress().percentage == 33

    tracker.complete_milestone("m2")
    assert tracker.get_progress().percentage == 67

    halves = PlanTracker(_plan(count=8))
    halves.complete_milestone("m1")
    # 12.5 rounds up
    assert halves.get_progress().percentage == 13


def test_progress_string_uses_clock():
    clock = FakeClock()
    tracker = PlanTracker(_plan(count=4), clock=clock)
    tracker.complete_milestone("m1")
    clock.now += 42.4

    assert tracker.get_progress_string() == (
        "📊 **Progress: 25%** (1/4 milestones)\n⏱️ Elapsed: 42s"
    )


def test_detailed_status():
    tracker = PlanTracker(_plan(count=2))
    tracker.complete_milestone("m1")

    assert tracker.get_detailed_status() == (
        "📋 Plan Status:\n   ✅ 1. Step 1\n   ⬜ 2. Step 2"
    )
