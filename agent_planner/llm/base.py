from __future__ import annotations

from abc import ABC, abstractmethod


DEFAULT_MAX_PROMPT_CHARS = 20000

ALLOWED_ROLES = ("system", "user", "assistant")


class BaseLLM(ABC):
    def __init__(self, max_prompt_chars: int = DEFAULT_MAX_PROMPT_CHARS) -> None:
        self._max_prompt_chars = max_prompt_chars

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Takes a fully constructed prompt string.
        Returns raw text output from the model (string).
        Must NOT parse JSON here.
        """
        raise NotImplementedError

    async def generate_messages(self, messages: list[dict[str, str]]) -> str:
        """
        Takes a list of chat messages and returns raw text output from the model.

        Message format:
        - Each message must be a dict with "role" and "content" keys
        - role: one of "system", "user" or "assistant" (case-sensitive)
        - content: a string

        The default implementation flattens the messages into a single prompt;
        providers with a native chat API override it.
        """
        validate_messages(messages)
        prompt_parts = []
        for msg in messages:
            role = msg.get("role", "user")
            content = msg.get("content", "")
            if role == "system":
                prompt_parts.append(f"System: {content}")
            elif role == "user":
                prompt_parts.append(f"User: {content}")
            else:
                prompt_parts.append(f"Assistant: {content}")
        return await self.generate("\n\n".join(prompt_parts))

    def _trim_prompt(self, prompt: str) -> str:
        if self._max_prompt_chars <= 0:
            return prompt
        if len(prompt) <= self._max_prompt_chars:
            return prompt
        return prompt[: self._max_prompt_chars]


def validate_messages(messages: list[dict[str, str]]) -> None:
    for msg in messages:
        if not isinstance(msg, dict):
            raise ValueError(f"Message must be a dict, got {type(msg)}")
        role = msg.get("role", "user")
        if role not in ALLOWED_ROLES:
            raise ValueError(f"Role must be 'system', 'user', or 'assistant', got '{role}'")
        content = msg.get("content", "")
        if not isinstance(content, str):
            raise ValueError(f"Content must be a string, got {type(content)}")


def split_system(messages: list[dict[str, str]]) -> tuple[str | None, list[dict[str, str]]]:
    """Pull system messages out of a chat list (for APIs taking a separate system field)."""
    system_parts = [m.get("content", "") for m in messages if m.get("role") == "system"]
    rest = [m for m in messages if m.get("role") != "system"]
    system = "\n\n".join(system_parts) if system_parts else None
    return system, rest
