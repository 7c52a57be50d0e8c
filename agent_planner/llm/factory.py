from __future__ import annotations

from pathlib import Path

from agent_planner.llm.anthropic import AnthropicLLM
from agent_planner.llm.base import BaseLLM
from agent_planner.llm.ollama import OllamaLLM
from agent_planner.llm.openai import OpenAIChatLLM
from agent_planner.llm.stub import StubLLM
from agent_planner.llm_config import LLMConfig


DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5"
DEFAULT_OLLAMA_MODEL = "llama3:8b"


def build_llm(config_path: str | Path | None = None, max_tokens: int | None = None) -> BaseLLM:
    """Build the configured provider; ``max_tokens`` caps the reply where the API supports it."""
    config = LLMConfig.load(config_path)
    return build_llm_from_config(config, max_tokens=max_tokens)


def build_llm_from_config(config: LLMConfig, max_tokens: int | None = None) -> BaseLLM:
    provider = config.provider.lower()

    if provider == "stub":
        return StubLLM(max_prompt_chars=config.max_prompt_chars)

    if provider == "openai":
        if not config.api_key:
            raise ValueError("openai provider requires api_key (set in config.yaml or OPENAI_API_KEY env)")
        return OpenAIChatLLM(
            api_key=config.api_key,
            model=config.model or DEFAULT_OPENAI_MODEL,
            base_url=config.resolved_base_url(),
            max_tokens=max_tokens,
            timeout_s=config.timeout_s,
            max_retries=config.max_retries,
            retry_backoff_s=config.retry_backoff_s,
            max_prompt_chars=config.max_prompt_chars,
        )

    if provider == "anthropic":
        if not config.api_key:
            raise ValueError("anthropic provider requires api_key (set in config.yaml or ANTHROPIC_API_KEY env)")
        return AnthropicLLM(
            api_key=config.api_key,
            model=config.model or DEFAULT_ANTHROPIC_MODEL,
            base_url=config.resolved_base_url(),
            max_tokens=max_tokens or 2048,
            timeout_s=config.timeout_s,
            max_retries=config.max_retries,
            retry_backoff_s=config.retry_backoff_s,
            max_prompt_chars=config.max_prompt_chars,
        )

    if provider == "ollama":
        return OllamaLLM(
            model=config.model or DEFAULT_OLLAMA_MODEL,
            base_url=config.resolved_base_url(),
            timeout_s=config.timeout_s,
            max_retries=config.max_retries,
            retry_backoff_s=config.retry_backoff_s,
            max_prompt_chars=config.max_prompt_chars,
        )

    raise ValueError(f"Unsupported LLM provider: {provider}")
