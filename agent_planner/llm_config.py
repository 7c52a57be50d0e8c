from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "config.yaml"

DEFAULT_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "anthropic": "https://api.anthropic.com/v1",
    "ollama": "http://localhost:11434",
}

API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


@dataclass(frozen=True)
class LLMConfig:
    """LLM settings read from ``configs/config.yaml`` and overridden by env."""

    provider: str = "stub"
    model: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    timeout_s: float = 30.0
    max_retries: int = 0
    retry_backoff_s: float = 0.8
    max_prompt_chars: int = 20000

    @classmethod
    def from_config_file(cls, config_path: str | Path | None = None) -> LLMConfig | None:
        config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
        if not config_path.exists():
            return None

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            logger.warning(f"Ignoring unreadable LLM config {config_path}: {exc}")
            return None

        if not config_data or "models" not in config_data:
            return None

        models_config = config_data["models"]
        provider = str(models_config.get("provider", "stub")).lower()
        provider_config = models_config.get(provider) or {}

        return cls(
            provider=provider,
            model=provider_config.get("model") or models_config.get("default"),
            base_url=provider_config.get("base_url"),
            api_key=provider_config.get("api_key") or None,
            timeout_s=float(models_config.get("timeout_s", 30.0)),
            max_retries=int(models_config.get("max_retries", 0)),
            retry_backoff_s=float(models_config.get("retry_backoff_s", 0.8)),
            max_prompt_chars=int(models_config.get("max_prompt_chars", 20000)),
        )

    @classmethod
    def from_env(cls) -> LLMConfig:
        provider = os.getenv("LLM_PROVIDER", "stub").lower()
        base_url = os.getenv("LLM_BASE_URL")
        if not base_url and provider == "openai":
            base_url = os.getenv("OPENAI_BASE_URL")
        if not base_url and provider == "ollama":
            base_url = os.getenv("OLLAMA_BASE_URL")

        key_env = API_KEY_ENV.get(provider)
        api_key = os.getenv(key_env) if key_env else None

        return cls(
            provider=provider,
            model=os.getenv("LLM_MODEL"),
            base_url=base_url,
            api_key=api_key,
            timeout_s=_env_float("LLM_TIMEOUT_S", 30.0),
            max_retries=_env_int("LLM_MAX_RETRIES", 0),
            retry_backoff_s=_env_float("LLM_RETRY_BACKOFF_S", 0.8),
            max_prompt_chars=_env_int("LLM_MAX_PROMPT_CHARS", 20000),
        )

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> LLMConfig:
        """Env wins; the config file only fills what env leaves unset."""
        file_config = cls.from_config_file(config_path)
        env_config = cls.from_env()

        if os.getenv("LLM_PROVIDER") or file_config is None:
            return env_config

        return cls(
            provider=file_config.provider,
            model=env_config.model or file_config.model,
            base_url=env_config.base_url or file_config.base_url,
            api_key=_provider_key_from_env(file_config.provider) or file_config.api_key,
            timeout_s=env_config.timeout_s if os.getenv("LLM_TIMEOUT_S") else file_config.timeout_s,
            max_retries=env_config.max_retries if os.getenv("LLM_MAX_RETRIES") else file_config.max_retries,
            retry_backoff_s=env_config.retry_backoff_s if os.getenv("LLM_RETRY_BACKOFF_S") else file_config.retry_backoff_s,
            max_prompt_chars=env_config.max_prompt_chars if os.getenv("LLM_MAX_PROMPT_CHARS") else file_config.max_prompt_chars,
        )

    def resolved_base_url(self) -> str | None:
        return self.base_url or DEFAULT_BASE_URLS.get(self.provider.lower())


def _provider_key_from_env(provider: str) -> str | None:
    key_env = API_KEY_ENV.get(provider)
    return os.getenv(key_env) if key_env else None


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default
