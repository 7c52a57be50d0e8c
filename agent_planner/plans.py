"""Plan and milestone models shared by every planner.

Field names are snake_case in Python; the wire form (LLM replies, executor
payloads) uses camelCase aliases.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class Complexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    EXPLORATORY = "exploratory"


class Effort(str, Enum):
    QUICK = "quick"
    MEDIUM = "medium"
    SUBSTANTIAL = "substantial"


class Milestone(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str
    description: str
    completed: bool = False


class ToolAwareMilestone(Milestone):
    suggested_tools: List[str] = Field(default_factory=list, alias="suggestedTools")
    tool_strategy: Optional[str] = Field(None, alias="toolStrategy")
    can_delegate: Optional[bool] = Field(None, alias="canDelegate")


class ExecutionPlan(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_summary: str = Field(alias="taskSummary")
    complexity: Complexity
    estimated_effort: Effort = Field(alias="estimatedEffort")
    exploration_needed: bool = Field(alias="explorationNeeded")
    milestones: List[Milestone] = Field(min_length=1)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class ToolAwarePlan(ExecutionPlan):
    milestones: List[ToolAwareMilestone] = Field(min_length=1)
    tools_required: List[str] = Field(default_factory=list, alias="toolsRequired")
    delegation_opportunities: List[str] = Field(
        default_factory=list, alias="delegationOpportunities"
    )


class PlanningContext(BaseModel):
    original_task: str
    exploration_findings: Optional[str] = None
    available_tools: Optional[List[str]] = None
    constraints: Optional[List[str]] = None


class ModelPlan(ExecutionPlan):
    """An ExecutionPlan parsed from LLM output, repaired rather than trusted.

    Missing or unknown complexity/effort values become the most cautious tag,
    milestones always start pending, and ids are made present and unique.
    """

    task_summary: str = Field("", alias="taskSummary")
    complexity: Complexity = Complexity.EXPLORATORY
    estimated_effort: Effort = Field(Effort.SUBSTANTIAL, alias="estimatedEffort")
    exploration_needed: bool = Field(True, alias="explorationNeeded")

    @field_validator("task_summary", mode="before")
    @classmethod
    def _repair_summary(cls, value: Any) -> Any:
        return "" if value is None else str(value).strip()

    @field_validator("complexity", mode="before")
    @classmethod
    def _repair_complexity(cls, value: Any) -> Any:
        normalized = str(value).strip().lower() if value is not None else ""
        if normalized in {c.value for c in Complexity}:
            return normalized
        logger.warning(f"Unknown plan complexity {value!r}, using exploratory")
        return Complexity.EXPLORATORY

    @field_validator("estimated_effort", mode="before")
    @classmethod
    def _repair_effort(cls, value: Any) -> Any:
        normalized = str(value).strip().lower() if value is not None else ""
        if normalized in {e.value for e in Effort}:
            return normalized
        logger.warning(f"Unknown plan effort {value!r}, using substantial")
        return Effort.SUBSTANTIAL

    @model_validator(mode="before")
    @classmethod
    def _repair_milestones(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        raw = data.get("milestones")
        if not isinstance(raw, list):
            return data
        seen: set[str] = set()
        repaired = []
        for index, item in enumerate(raw, start=1):
            if isinstance(item, str):
                item = {"description": item}
            if not isinstance(item, dict):
                continue
            milestone_id = str(item.get("id") or f"step_{index}")
            base_id, suffix = milestone_id, 2
            while milestone_id in seen:
                milestone_id = f"{base_id}_{suffix}"
                suffix += 1
            seen.add(milestone_id)
            repaired.append(
                {
                    "id": milestone_id,
                    "description": str(item.get("description") or milestone_id),
                    "completed": False,
                }
            )
        return {**data, "milestones": repaired}

    def to_plan(self, task: str) -> ExecutionPlan:
        return ExecutionPlan(
            task_summary=self.task_summary or task[:100],
            complexity=self.complexity,
            estimated_effort=self.estimated_effort,
            exploration_needed=self.exploration_needed,
            milestones=self.milestones,
        )


def milestone(milestone_id: str, description: str) -> Milestone:
    return Milestone(id=milestone_id, description=description)
