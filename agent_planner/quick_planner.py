"""
Quick Planner - canned plans for common request shapes.

No AI call. Returns None when nothing matches so the caller can escalate
to the LLM planner.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from agent_planner.plans import Complexity, Effort, ExecutionPlan, milestone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanTemplate:
    task_summary: str
    complexity: Complexity
    estimated_effort: Effort
    exploration_needed: bool
    milestones: Tuple[Tuple[str, str], ...]

    def instantiate(self) -> ExecutionPlan:
        """Fresh plan each call; callers mutate milestone state."""
        return ExecutionPlan(
            task_summary=self.task_summary,
            complexity=self.complexity,
            estimated_effort=self.estimated_effort,
            exploration_needed=self.exploration_needed,
            milestones=[milestone(mid, desc) for mid, desc in self.milestones],
        )


RETRIEVAL = PlanTemplate(
    "Information retrieval task", Complexity.SIMPLE, Effort.QUICK, False,
    (
        ("fetch", "Fetch requested information"),
        ("present", "Present results to user"),
    ),
)

CREATION = PlanTemplate(
    "Creation task", Complexity.MODERATE, Effort.MEDIUM, False,
    (
        ("validate", "Validate inputs and prerequisites"),
        ("create", "Create the requested resource"),
        ("verify", "Verify creation was successful"),
    ),
)

DELETION = PlanTemplate(
    "Deletion task", Complexity.SIMPLE, Effort.QUICK, False,
    (
        ("confirm", "Confirm resource exists"),
        ("delete", "Delete the resource"),
        ("verify", "Verify deletion"),
    ),
)

DEPLOYMENT = PlanTemplate(
    "Deployment task", Complexity.COMPLEX, Effort.SUBSTANTIAL, True,
    (
        ("check_status", "Check current deployment status"),
        ("validate", "Validate deployment prerequisites"),
        ("build", "Build/prepare for deployment"),
        ("deploy", "Execute deployment"),
        ("verify", "Verify deployment success"),
    ),
)

CODEBASE_ANALYSIS = PlanTemplate(
    "Codebase analysis task", Complexity.EXPLORATORY, Effort.SUBSTANTIAL, True,
    (
        ("explore_structure", "Explore project structure"),
        ("identify_components", "Identify key components"),
        ("analyze_patterns", "Analyze code patterns and architecture"),
        ("identify_issues", "Identify areas for improvement"),
        ("generate_recommendations", "Generate recommendations"),
        ("present_findings", "Present findings to user"),
    ),
)

GENERIC_ANALYSIS = PlanTemplate(
    "Analysis task", Complexity.MODERATE, Effort.MEDIUM, True,
    (
        ("gather", "Gather relevant information"),
        ("analyze", "Analyze the information"),
        ("synthesize", "Synthesize findings"),
        ("present", "Present analysis results"),
    ),
)

_RETRIEVAL_RE = re.compile(r"^(list|show|get|fetch|display)\s", re.IGNORECASE)
_CREATION_RE = re.compile(r"^(create|add|make|new)\s", re.IGNORECASE)
_DELETION_RE = re.compile(r"^(delete|remove|destroy)\s", re.IGNORECASE)
_DEPLOY_RE = re.compile(r"deploy|release|ship", re.IGNORECASE)
_ANALYSIS_RE = re.compile(r"analyze|review|audit|examine|assess|evaluate|improve", re.IGNORECASE)
_CODEBASE_RE = re.compile(r"repo|codebase|project|code|architecture", re.IGNORECASE)


def _analysis_template(task: str) -> PlanTemplate:
    return CODEBASE_ANALYSIS if _CODEBASE_RE.search(task) else GENERIC_ANALYSIS


# (predicate, template chooser), first match wins.
QUICK_RULES: Sequence[Tuple[Callable[[str], bool], Callable[[str], PlanTemplate]]] = (
    (lambda task: bool(_RETRIEVAL_RE.search(task)), lambda task: RETRIEVAL),
    (lambda task: bool(_CREATION_RE.search(task)), lambda task: CREATION),
    (lambda task: bool(_DELETION_RE.search(task)), lambda task: DELETION),
    (lambda task: bool(_DEPLOY_RE.search(task)), lambda task: DEPLOYMENT),
    (lambda task: bool(_ANALYSIS_RE.search(task)), _analysis_template),
)


def create_quick_plan(task_description: str) -> Optional[ExecutionPlan]:
    for matches, choose in QUICK_RULES:
        if matches(task_description):
            plan = choose(task_description).instantiate()
            logger.debug(f"Quick plan matched: {plan.task_summary}")
            return plan
    return None

