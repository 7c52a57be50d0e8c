"""Per-request stage log for the task flow.

Besides free-form stages, planners record where a plan came from
(canned template, model reply, static fallback or tool routing) so a
trace answers "why did I get this plan" without reading the logs.
"""

from __future__ import annotations

import os
import re
import uuid
from dataclasses import dataclass
from enum import Enum

from agent_planner.plans import ExecutionPlan


class TraceLevel(Enum):
    OFF = "off"
    BASIC = "1"
    FULL = "full"


class PlanSource(str, Enum):
    QUICK = "plan.quick"
    LLM = "plan.llm"
    FALLBACK = "plan.fallback"
    TOOL_AWARE = "plan.tool_aware"


@dataclass(frozen=True)
class TraceEvent:
    stage: str
    detail: str | None = None


class TraceCollector:
    def __init__(self, level: TraceLevel, trace_id: str | None = None) -> None:
        self.level = level
        self.trace_id = trace_id or uuid.uuid4().hex
        self.events: list[TraceEvent] = []

    @classmethod
    def from_env(cls) -> "TraceCollector":
        raw = os.getenv("PLANNER_TRACE")
        if raw is None:
            return cls(level=TraceLevel.BASIC)
        normalized = raw.strip().lower()
        if normalized in {"off", "0", "false", "none"}:
            return cls(level=TraceLevel.OFF)
        if normalized in {"full", "2"}:
            return cls(level=TraceLevel.FULL)
        return cls(level=TraceLevel.BASIC)

    def record(self, stage: str, detail: str | None = None) -> None:
        self.events.append(TraceEvent(stage=stage, detail=detail))

    def record_plan(
        self, source: PlanSource, plan: ExecutionPlan, note: str | None = None
    ) -> None:
        detail = (
            f"complexity={plan.complexity.value} "
            f"milestones={','.join(m.id for m in plan.milestones)}"
        )
        if note:
            detail += f" {note}"
        self.record(source.value, detail)

    @property
    def plan_source(self) -> PlanSource | None:
        """Source of the last plan recorded in this trace."""
        sources = {s.value: s for s in PlanSource}
        for event in reversed(self.events):
            if event.stage in sources:
                return sources[event.stage]
        return None

    def stages(self) -> list[str]:
        return [event.stage for event in self.events]

    def render_lines(self) -> list[str]:
        if self.level is TraceLevel.OFF:
            return []
        if self.level is TraceLevel.BASIC:
            return [f"trace_id={self.trace_id} stage={e.stage}" for e in self.events]
        return [
            f"trace_id={self.trace_id} stage={e.stage} detail={_truncate(_sanitize(e.detail or ''))}"
            for e in self.events
        ]


# fallback notes carry provider error text, which can echo credentials
_KEY_PATTERN = re.compile(
    r"((?:OPENAI|ANTHROPIC)_API_KEY\s*[:=]\s*|x-api-key\s*[:=]\s*|Bearer\s+|sk-)([A-Za-z0-9_\-]{6,})",
    re.IGNORECASE,
)


def _sanitize(text: str) -> str:
    if not text:
        return ""
    return _KEY_PATTERN.sub(r"\1***", text)


def _truncate(text: str, limit: int = 500) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "...(truncated)"
