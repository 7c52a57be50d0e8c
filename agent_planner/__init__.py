"""
Agent Planner - task planning and execution support for a chat agent.

    message
        ↓
    IntentClassifier (conversation or work?)
        ↓
    ToolAwarePlanner / ExecutionPlanner (quick plan first, LLM fallback)
        ↓
    ExecutionPlan + PlanTracker → external executor

ContextSummarizer keeps long conversations inside the prompt budget.
Nothing here executes tools or persists plans.
"""

from agent_planner.config import PlannerConfig
from agent_planner.execution_planner import ExecutionPlanner, fallback_plan
from agent_planner.flow import TaskFlow, TaskFlowResult
from agent_planner.intent import (
    ClassificationResult,
    Confidence,
    IntentClassifier,
    MessageIntent,
)
from agent_planner.plans import (
    Complexity,
    Effort,
    ExecutionPlan,
    Milestone,
    PlanningContext,
    ToolAwareMilestone,
    ToolAwarePlan,
)
from agent_planner.quick_planner import create_quick_plan
from agent_planner.summarizer import (
    ContextSummarizer,
    ConversationMessage,
    Role,
    SummaryCache,
    quick_summarize,
)
from agent_planner.tool_aware_planner import ToolAwarePlanner
from agent_planner.trace import PlanSource, TraceCollector
from agent_planner.tools import DEFAULT_TOOL_REGISTRY, ToolCapability, ToolCategory
from agent_planner.tracker import PlanProgress, PlanTracker

__all__ = [
    # Classification
    "ClassificationResult",
    "Confidence",
    "IntentClassifier",
    "MessageIntent",

    # Plans
    "Complexity",
    "Effort",
    "ExecutionPlan",
    "Milestone",
    "PlanningContext",
    "ToolAwareMilestone",
    "ToolAwarePlan",

    # Planners
    "create_quick_plan",
    "ExecutionPlanner",
    "fallback_plan",
    "ToolAwarePlanner",
    "DEFAULT_TOOL_REGISTRY",
    "ToolCapability",
    "ToolCategory",

    # Tracking
    "PlanProgress",
    "PlanTracker",

    # Summarization
    "ContextSummarizer",
    "ConversationMessage",
    "Role",
    "SummaryCache",
    "quick_summarize",

    # Glue
    "PlannerConfig",
    "PlanSource",
    "TaskFlow",
    "TaskFlowResult",
    "TraceCollector",
]

__version__ = "1.0.0"
