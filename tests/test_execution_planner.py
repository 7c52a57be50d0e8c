import asyncio
import json

import pytest

from agent_planner.config import PlannerConfig
from agent_planner.execution_planner import (
    ExecutionPlanner,
    build_planning_prompt,
    fallback_plan,
    parse_plan_response,
)
from agent_planner.llm.base import BaseLLM
from agent_planner.llm.openai import OpenAIChatLLM
from agent_planner.llm.stub import StubLLM
from agent_planner.plans import Complexity, Effort, PlanningContext
from agent_planner.prompts import EXECUTION_PLANNER_MARKER
from agent_planner.trace import PlanSource, TraceCollector, TraceLevel


class ScriptedLLM(BaseLLM):
    def __init__(self, reply: str) -> None:
        super().__init__()
        self.reply = reply
        self.calls = 0
        self.last_messages = None

    async def generate(self, prompt: str) -> str:
        self.calls += 1
        return self.reply

    async def generate_messages(self, messages):
        self.last_messages = messages
        return await self.generate(messages[-1]["content"])


class FailingLLM(BaseLLM):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    async def generate(self, prompt: str) -> str:
        self.calls += 1
        raise RuntimeError("model unavailable")


def _plan(context, llm):
    return asyncio.run(ExecutionPlanner(llm).create_plan(context))


def test_failing_llm_returns_fallback_plan():
    llm = FailingLLM()

    plan = _plan(PlanningContext(original_task="write a novel"), llm)

    assert llm.calls == 1
    assert plan.complexity == Complexity.EXPLORATORY
    assert plan.estimated_effort == Effort.SUBSTANTIAL
    assert plan.exploration_needed is True
    assert plan.task_summary == "write a novel"
    assert [m.id for m in plan.milestones] == [
        "understand",
        "explore",
        "execute",
        "verify",
        "report",
    ]


def test_straightforward_quick_plan_skips_llm():
    llm = FailingLLM()

    plan = _plan(PlanningContext(original_task="list all files"), llm)

    assert llm.calls == 0
    assert plan.complexity == Complexity.SIMPLE
    assert len(plan.milestones) == 2


def test_exploratory_quick_plan_escalates_to_llm():
    llm = StubLLM()

    plan = _plan(PlanningContext(original_task="analyze the codebase for dead code"), llm)

    assert plan.task_summary == "analyze the codebase for dead code"
    assert [m.id for m in plan.milestones] == ["investigate", "carry_out", "report"]


def test_model_reply_is_repaired():
    reply = "Here is the plan:\n" + json.dumps(
        {
            "taskSummary": "Write a novel",
            "complexity": "enormous",
            "estimatedEffort": "weeks",
            "milestones": [
                {"id": "draft", "description": "Draft chapters", "completed": True},
                {"id": "draft", "description": "Second draft"},
                "Edit the manuscript",
            ],
        }
    ) + "\nLet me know!"
    llm = ScriptedLLM(reply)

    plan = _plan(PlanningContext(original_task="write a novel"), llm)

    assert llm.calls == 1
    assert plan.complexity == Complexity.EXPLORATORY
    assert plan.estimated_effort == Effort.SUBSTANTIAL
    assert [m.id for m in plan.milestones] == ["draft", "draft_2", "step_3"]
    assert plan.milestones[2].description == "Edit the manuscript"
    assert all(m.completed is False for m in plan.milestones)


def test_empty_milestones_fall_back():
    reply = json.dumps(
        {
            "taskSummary": "Nothing",
            "complexity": "simple",
            "estimatedEffort": "quick",
            "explorationNeeded": False,
            "milestones": [],
        }
    )

    plan = _plan(PlanningContext(original_task="write a novel"), ScriptedLLM(reply))

    assert len(plan.milestones) == 5
    assert plan.complexity == Complexity.EXPLORATORY


def test_non_json_reply_falls_back():
    plan = _plan(PlanningContext(original_task="write a novel"), ScriptedLLM("I can't do that."))

    assert [m.id for m in plan.milestones][0] == "understand"


def test_messages_carry_system_prompt_and_context():
    llm = ScriptedLLM("not json")
    context = PlanningContext(
        original_task="write a novel",
        exploration_findings="Outline exists in notes.md",
        available_tools=["execute_bash", "trello_create_card"],
        constraints=["no network"],
    )

    _plan(context, llm)

    system, user = llm.last_messages
    assert system["role"] == "system"
    assert system["content"].startswith(EXECUTION_PLANNER_MARKER)
    assert user["role"] == "user"
    assert user["content"] == build_planning_prompt(context)


def test_build_planning_prompt_sections():
    prompt = build_planning_prompt(
        PlanningContext(
            original_task="write a novel",
            available_tools=["execute_bash"],
            constraints=["offline", "fast"],
        )
    )

    assert prompt == (
        "Create an execution plan for this task:\n\nTASK: write a novel"
        "\n\nAVAILABLE TOOLS: execute_bash"
        "\n\nCONSTRAINTS: offline, fast"
    )


def test_parse_plan_response_uses_task_when_summary_missing():
    task = "x" * 150
    text = '```json\n{"complexity": "moderate", "estimatedEffort": "medium", "milestones": ["a"]}\n```'

    plan = parse_plan_response(text, task)

    assert plan.task_summary == "x" * 100
    assert plan.exploration_needed is True
    assert plan.milestones[0].id == "step_1"


def test_fallback_plan_truncates_summary():
    plan = fallback_plan("y" * 250)

    assert len(plan.task_summary) == 100


def test_missing_enums_are_repaired_instead_of_falling_back():
    reply = json.dumps(
        {
            "taskSummary": "Write a novel",
            "milestones": [
                {"id": "outline", "description": "Outline the plot"},
                {"id": "draft", "description": "Draft chapters"},
            ],
        }
    )

    plan = _plan(PlanningContext(original_task="write a novel"), ScriptedLLM(reply))

    assert [m.id for m in plan.milestones] == ["outline", "draft"]
    assert plan.complexity == Complexity.EXPLORATORY
    assert plan.estimated_effort == Effort.SUBSTANTIAL
    assert plan.exploration_needed is True


def test_null_and_missing_enums_repair_the_same_way():
    milestones = [{"id": "a", "description": "A"}]
    explicit = parse_plan_response(
        json.dumps({"complexity": None, "estimatedEffort": None, "milestones": milestones}), "t"
    )
    omitted = parse_plan_response(json.dumps({"milestones": milestones}), "t")

    assert explicit.complexity == omitted.complexity == Complexity.EXPLORATORY
    assert explicit.estimated_effort == omitted.estimated_effort == Effort.SUBSTANTIAL


@pytest.mark.parametrize(
    "task,llm,source",
    [
        ("list all files", FailingLLM(), PlanSource.QUICK),
        ("write a novel", StubLLM(), PlanSource.LLM),
        ("write a novel", FailingLLM(), PlanSource.FALLBACK),
    ],
)
def test_trace_records_where_the_plan_came_from(task, llm, source):
    trace = TraceCollector(TraceLevel.FULL, trace_id="p")

    plan = asyncio.run(ExecutionPlanner(llm).create_plan(PlanningContext(original_task=task), trace))

    assert trace.plan_source is source
    assert trace.stages() == [source.value]
    assert trace.events[0].detail.startswith(
        f"complexity={plan.complexity.value} milestones={plan.milestones[0].id},"
    )


def test_fallback_trace_carries_error():
    trace = TraceCollector(TraceLevel.FULL, trace_id="p")

    asyncio.run(
        ExecutionPlanner(FailingLLM()).create_plan(PlanningContext(original_task="write a novel"), trace)
    )

    assert trace.events[0].detail.endswith("error=model unavailable")


def test_from_config_caps_planner_replies(tmp_path, monkeypatch):
    for name in ("LLM_MODEL", "LLM_BASE_URL", "OPENAI_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    planner = ExecutionPlanner.from_config(
        PlannerConfig(planner_max_tokens=777), llm_config_path=tmp_path / "absent.yaml"
    )

    assert isinstance(planner._llm, OpenAIChatLLM)
    assert planner._llm._max_tokens == 777
