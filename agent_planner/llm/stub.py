from __future__ import annotations

import json

from agent_planner.llm.base import DEFAULT_MAX_PROMPT_CHARS, BaseLLM
from agent_planner.prompts import CONTEXT_SUMMARY_MARKER, EXECUTION_PLANNER_MARKER


class StubLLM(BaseLLM):
    """Offline provider: canned planner JSON and a line-count summary."""

    def __init__(self, max_prompt_chars: int = DEFAULT_MAX_PROMPT_CHARS) -> None:
        super().__init__(max_prompt_chars=max_prompt_chars)

    async def generate(self, prompt: str) -> str:
        prompt = self._trim_prompt(prompt)
        if EXECUTION_PLANNER_MARKER in prompt:
            return _stub_plan(prompt)
        if CONTEXT_SUMMARY_MARKER in prompt:
            return _stub_summary(prompt)
        return "Okay."

    async def generate_messages(self, messages: list[dict[str, str]]) -> str:
        joined = "\n".join(msg.get("content", "") for msg in messages)
        return await self.generate(joined)


def _stub_plan(prompt: str) -> str:
    task = ""
    for line in prompt.splitlines():
        if line.startswith("TASK:"):
            task = line[len("TASK:"):].strip()
            break
    plan = {
        "taskSummary": task[:100] or "Stub plan",
        "complexity": "moderate",
        "estimatedEffort": "medium",
        "explorationNeeded": True,
        "milestones": [
            {"id": "investigate", "description": "Investigate the request", "completed": False},
            {"id": "carry_out", "description": "Carry out the main work", "completed": False},
            {"id": "report", "description": "Report results to user", "completed": False},
        ],
    }
    return json.dumps(plan)


def _stub_summary(prompt: str) -> str:
    _, _, conversation = prompt.partition("Conversation:")
    turns = [line for line in conversation.splitlines() if line.startswith(("User:", "Assistant:"))]
    return f"Earlier conversation covered {len(turns)} turns."
