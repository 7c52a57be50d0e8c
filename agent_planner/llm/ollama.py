from __future__ import annotations

import httpx

from agent_planner.llm.base import DEFAULT_MAX_PROMPT_CHARS, BaseLLM, validate_messages
from agent_planner.llm.transport import RetryingPoster


class OllamaLLM(BaseLLM):
    def __init__(
        self,
        *,
        model: str,
        base_url: str,
        timeout_s: float = 30.0,
        max_retries: int = 0,
        retry_backoff_s: float = 0.8,
        max_prompt_chars: int = DEFAULT_MAX_PROMPT_CHARS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(max_prompt_chars=max_prompt_chars)
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._poster = RetryingPoster(
            provider="ollama",
            timeout_s=timeout_s,
            max_retries=max_retries,
            retry_backoff_s=retry_backoff_s,
            transport=transport,
        )

    async def generate(self, prompt: str) -> str:
        return await self.generate_messages([{"role": "user", "content": prompt}])

    async def generate_messages(self, messages: list[dict[str, str]]) -> str:
        """Ollama's /api/chat takes system/user/assistant roles natively."""
        validate_messages(messages)
        payload = {
            "model": self._model,
            "messages": [
                {"role": m["role"], "content": self._trim_prompt(m["content"])}
                for m in messages
            ],
            "stream": False,
        }
        data = await self._poster.post(f"{self._base_url}/api/chat", payload)
        try:
            return data["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise RuntimeError("ollama response missing expected content") from exc
