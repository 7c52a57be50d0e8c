"""Message → classification → plan → tracker, for the message handler to call."""

from __future__ import annotations

from dataclasses import dataclass

from agent_planner.execution_planner import ExecutionPlanner
from agent_planner.intent import ClassificationResult, IntentClassifier
from agent_planner.plans import ExecutionPlan, PlanningContext
from agent_planner.tool_aware_planner import ToolAwarePlanner
from agent_planner.trace import PlanSource, TraceCollector
from agent_planner.tracker import PlanTracker


@dataclass(frozen=True)
class TaskFlowResult:
    classification: ClassificationResult
    plan: ExecutionPlan | None
    tracker: PlanTracker | None
    reply: str | None
    plan_source: PlanSource | None
    trace_id: str
    trace_lines: list[str]


class TaskFlow:
    def __init__(
        self,
        classifier: IntentClassifier,
        execution_planner: ExecutionPlanner,
        tool_planner: ToolAwarePlanner | None = None,
    ) -> None:
        self._classifier = classifier
        self._execution_planner = execution_planner
        self._tool_planner = tool_planner

    async def handle(
        self,
        message: str,
        context: PlanningContext | None = None,
        trace: TraceCollector | None = None,
    ) -> TaskFlowResult:
        trace = trace or TraceCollector.from_env()
        trace.record("flow.start")

        classification = self._classifier.classify(message)
        trace.record(
            "intent.classified",
            f"{classification.intent.value} ({classification.confidence.value}) {classification.reasoning}",
        )

        if not classification.should_execute_task:
            trace.record("flow.finish", "conversational")
            return TaskFlowResult(
                classification=classification,
                plan=None,
                tracker=None,
                reply=classification.suggested_response,
                plan_source=None,
                trace_id=trace.trace_id,
                trace_lines=trace.render_lines(),
            )

        if self._tool_planner is not None:
            plan: ExecutionPlan = self._tool_planner.create_plan(message)
            trace.record_plan(
                PlanSource.TOOL_AWARE, plan, note=f"tools={','.join(plan.tools_required)}"
            )
        else:
            context = context or PlanningContext(original_task=message)
            plan = await self._execution_planner.create_plan(context, trace=trace)

        trace.record("flow.finish", "task")
        return TaskFlowResult(
            classification=classification,
            plan=plan,
            tracker=PlanTracker(plan),
            reply=None,
            plan_source=trace.plan_source,
            trace_id=trace.trace_id,
            trace_lines=trace.render_lines(),
        )
