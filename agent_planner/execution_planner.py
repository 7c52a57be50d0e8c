"""
Execution Planner - structured plans for tasks the quick planner can't cover.

Flow:
    create_quick_plan(task)
        ↓ (None, or exploratory)
    one LLM call with the planning system prompt
        ↓
    greedy {...} extraction → ModelPlan validation/repair
        ↓ (any failure)
    static 5-milestone fallback plan

create_plan() never raises; every path returns a plan with milestones.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import ValidationError

from agent_planner.config import PlannerConfig
from agent_planner.llm.base import BaseLLM
from agent_planner.llm.factory import build_llm
from agent_planner.llm.json_extract import extract_json_object
from agent_planner.plans import (
    Complexity,
    Effort,
    ExecutionPlan,
    ModelPlan,
    PlanningContext,
    milestone,
)
from agent_planner.prompts import EXECUTION_PLANNER_SYSTEM_PROMPT
from agent_planner.quick_planner import create_quick_plan
from agent_planner.trace import PlanSource, TraceCollector

logger = logging.getLogger(__name__)

FALLBACK_MILESTONES = (
    ("understand", "Understand the task requirements"),
    ("explore", "Explore and gather information"),
    ("execute", "Execute the main task"),
    ("verify", "Verify results"),
    ("report", "Report findings to user"),
)


def fallback_plan(task: str) -> ExecutionPlan:
    return ExecutionPlan(
        task_summary=task[:100],
        complexity=Complexity.EXPLORATORY,
        estimated_effort=Effort.SUBSTANTIAL,
        exploration_needed=True,
        milestones=[milestone(mid, desc) for mid, desc in FALLBACK_MILESTONES],
    )


def build_planning_prompt(context: PlanningContext) -> str:
    parts: List[str] = [f"Create an execution plan for this task:\n\nTASK: {context.original_task}"]
    if context.exploration_findings:
        parts.append(f"FINDINGS FROM EXPLORATION:\n{context.exploration_findings}")
    if context.available_tools:
        parts.append(f"AVAILABLE TOOLS: {', '.join(context.available_tools)}")
    if context.constraints:
        parts.append(f"CONSTRAINTS: {', '.join(context.constraints)}")
    return "\n\n".join(parts)


def parse_plan_response(text: str, task: str) -> ExecutionPlan:
    """Raises ValueError for anything that can't become a non-empty plan."""
    data = extract_json_object(text)
    try:
        parsed = ModelPlan.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"plan failed validation: {exc.error_count()} errors") from exc
    return parsed.to_plan(task)


class ExecutionPlanner:
    def __init__(self, llm: BaseLLM) -> None:
        self._llm = llm

    @classmethod
    def from_config(
        cls, config: PlannerConfig, llm_config_path: Optional[str] = None
    ) -> "ExecutionPlanner":
        """Planner whose model replies are capped at ``planner_max_tokens``."""
        return cls(build_llm(llm_config_path, max_tokens=config.planner_max_tokens))

    async def create_plan(
        self, context: PlanningContext, trace: Optional[TraceCollector] = None
    ) -> ExecutionPlan:
        quick_plan = create_quick_plan(context.original_task)
        if quick_plan is not None and quick_plan.complexity != Complexity.EXPLORATORY:
            logger.info("Using quick plan for straightforward task")
            _record(trace, PlanSource.QUICK, quick_plan)
            return quick_plan

        logger.info("Creating AI-powered execution plan")
        messages = [
            {"role": "system", "content": EXECUTION_PLANNER_SYSTEM_PROMPT},
            {"role": "user", "content": build_planning_prompt(context)},
        ]
        try:
            raw = await self._llm.generate_messages(messages)
            plan = parse_plan_response(raw, context.original_task)
        except Exception as exc:
            logger.error(f"Failed to create AI plan, falling back to generic: {exc}", exc_info=True)
            plan = fallback_plan(context.original_task)
            _record(trace, PlanSource.FALLBACK, plan, note=f"error={exc}")
            return plan

        logger.info(
            f"Plan created: {plan.complexity.value} complexity, {len(plan.milestones)} milestones"
        )
        _record(trace, PlanSource.LLM, plan)
        return plan


def _record(
    trace: Optional[TraceCollector],
    source: PlanSource,
    plan: ExecutionPlan,
    note: Optional[str] = None,
) -> None:
    if trace is not None:
        trace.record_plan(source, plan, note=note)
