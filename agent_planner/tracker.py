"""
Plan Tracker - milestone progress for one in-flight plan.

Each milestone moves pending → completed and never back. Milestones are
worked in list order; the order is the dependency order fixed when the plan
was made.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from agent_planner.plans import ExecutionPlan, Milestone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanProgress:
    completed: int
    total: int
    percentage: int
    remaining: List[Milestone]


class PlanTracker:
    def __init__(
        self,
        plan: ExecutionPlan,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.plan = plan
        self._clock = clock
        self._start = clock()

    def complete_milestone(self, milestone_id: str) -> bool:
        """
        Mark a milestone completed.

        Returns:
            False for an unknown id (nothing changes); True otherwise,
            including repeat calls for an already completed milestone.
        """
        for milestone in self.plan.milestones:
            if milestone.id != milestone_id:
                continue
            if not milestone.completed:
                milestone.completed = True
                logger.info(f"Milestone completed: {milestone.description}")
            return True
        logger.warning(f"Unknown milestone id: {milestone_id}")
        return False

    def get_progress(self) -> PlanProgress:
        milestones = self.plan.milestones
        completed = sum(1 for m in milestones if m.completed)
        total = len(milestones)
        percentage = math.floor(completed * 100 / total + 0.5) if total else 100
        return PlanProgress(
            completed=completed,
            total=total,
            percentage=percentage,
            remaining=[m for m in milestones if not m.completed],
        )

    def get_next_milestone(self) -> Optional[Milestone]:
        return next((m for m in self.plan.milestones if not m.completed), None)

    def is_complete(self) -> bool:
        return all(m.completed for m in self.plan.milestones)

    def elapsed_seconds(self) -> int:
        return round(self._clock() - self._start)

    def get_progress_string(self) -> str:
        progress = self.get_progress()
        return (
            f"📊 **Progress: {progress.percentage}%** "
            f"({progress.completed}/{progress.total} milestones)\n"
            f"⏱️ Elapsed: {self.elapsed_seconds()}s"
        )

    def get_detailed_status(self) -> str:
        lines = ["📋 Plan Status:"]
        for index, m in enumerate(self.plan.milestones, start=1):
            status = "✅" if m.completed else "⬜"
            lines.append(f"   {status} {index}. {m.description}")
        return "\n".join(lines)
