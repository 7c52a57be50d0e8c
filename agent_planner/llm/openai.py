from __future__ import annotations

from typing import Any

import httpx

from agent_planner.llm.base import DEFAULT_MAX_PROMPT_CHARS, BaseLLM, validate_messages
from agent_planner.llm.transport import RetryingPoster


class OpenAIChatLLM(BaseLLM):
    """Any OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        max_tokens: int | None = None,
        timeout_s: float = 30.0,
        max_retries: int = 0,
        retry_backoff_s: float = 0.8,
        max_prompt_chars: int = DEFAULT_MAX_PROMPT_CHARS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(max_prompt_chars=max_prompt_chars)
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._max_tokens = max_tokens
        self._poster = RetryingPoster(
            provider="openai",
            timeout_s=timeout_s,
            max_retries=max_retries,
            retry_backoff_s=retry_backoff_s,
            transport=transport,
        )

    async def generate(self, prompt: str) -> str:
        return await self.generate_messages([{"role": "user", "content": prompt}])

    async def generate_messages(self, messages: list[dict[str, str]]) -> str:
        validate_messages(messages)
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": m["role"], "content": self._trim_prompt(m["content"])}
                for m in messages
            ],
            "temperature": 0,
        }
        if self._max_tokens:
            payload["max_tokens"] = self._max_tokens
        headers = {"Authorization": f"Bearer {self._api_key}"}
        data = await self._poster.post(
            f"{self._base_url}/chat/completions", payload, headers=headers
        )
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise RuntimeError("openai response missing expected content") from exc
