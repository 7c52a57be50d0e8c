from __future__ import annotations

from typing import Any

import httpx

from agent_planner.llm.base import (
    DEFAULT_MAX_PROMPT_CHARS,
    BaseLLM,
    split_system,
    validate_messages,
)
from agent_planner.llm.transport import RetryingPoster

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicLLM(BaseLLM):
    """Anthropic messages API; system messages go in the top-level ``system`` field."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str = "https://api.anthropic.com/v1",
        max_tokens: int = 2048,
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
            provider="anthropic",
            timeout_s=timeout_s,
            max_retries=max_retries,
            retry_backoff_s=retry_backoff_s,
            transport=transport,
        )

    async def generate(self, prompt: str) -> str:
        return await self.generate_messages([{"role": "user", "content": prompt}])

    async def generate_messages(self, messages: list[dict[str, str]]) -> str:
        validate_messages(messages)
        system, chat = split_system(messages)
        payload: dict[str, Any] = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [
                {"role": m["role"], "content": self._trim_prompt(m["content"])}
                for m in chat
            ],
        }
        if system:
            payload["system"] = system
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        data = await self._poster.post(f"{self._base_url}/messages", payload, headers=headers)
        try:
            blocks = data["content"]
            texts = [b["text"] for b in blocks if b.get("type") == "text"]
        except (KeyError, TypeError) as exc:
            raise RuntimeError("anthropic response missing expected content") from exc
        if not texts:
            raise RuntimeError("anthropic response had no text blocks")
        return "\n".join(texts)
