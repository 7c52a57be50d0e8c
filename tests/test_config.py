import pytest

from agent_planner.config import PlannerConfig
from agent_planner.llm.anthropic import AnthropicLLM
from agent_planner.llm.factory import build_llm, build_llm_from_config
from agent_planner.llm.ollama import OllamaLLM
from agent_planner.llm.openai import OpenAIChatLLM
from agent_planner.llm.stub import StubLLM
from agent_planner.llm_config import LLMConfig


LLM_ENV = (
    "LLM_PROVIDER",
    "LLM_MODEL",
    "LLM_BASE_URL",
    "OPENAI_BASE_URL",
    "OLLAMA_BASE_URL",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "LLM_TIMEOUT_S",
    "LLM_MAX_RETRIES",
    "LLM_RETRY_BACKOFF_S",
    "LLM_MAX_PROMPT_CHARS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in LLM_ENV:
        monkeypatch.delenv(name, raising=False)


def _write_config(tmp_path, body: str):
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")
    return path


def test_planner_config_defaults(monkeypatch):
    for name in ("PLANNER_HAS_TRELLO", "PLANNER_HAS_HETZNER", "SUMMARY_KEEP_RECENT"):
        monkeypatch.delenv(name, raising=False)

    config = PlannerConfig.from_env()

    assert config.has_trello is True
    assert config.has_hetzner is True
    assert config.keep_recent_count == 10
    assert config.quick_summary_max_length == 500


def test_planner_config_reads_env(monkeypatch):
    monkeypatch.setenv("PLANNER_HAS_HETZNER", "off")
    monkeypatch.setenv("PLANNER_HAS_TRELLO", "maybe")
    monkeypatch.setenv("SUMMARY_KEEP_RECENT", "4")
    monkeypatch.setenv("PLANNER_MAX_TOKENS", "0")

    config = PlannerConfig.from_env()

    assert config.has_hetzner is False
    assert config.has_trello is True
    assert config.keep_recent_count == 4
    assert config.planner_max_tokens == 2048


def test_missing_config_file_uses_env(tmp_path, monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "ollama")
    monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434")

    config = LLMConfig.load(tmp_path / "absent.yaml")

    assert config.provider == "ollama"
    assert config.resolved_base_url() == "http://gpu-box:11434"
    assert config.max_retries == 0


def test_config_file_with_env_overrides(tmp_path, monkeypatch):
    path = _write_config(
        tmp_path,
        "models:\n"
        "  provider: openai\n"
        "  timeout_s: 12\n"
        "  max_retries: 2\n"
        "  openai:\n"
        "    model: gpt-file\n"
        "    api_key: file-key\n",
    )
    monkeypatch.setenv("LLM_MODEL", "gpt-env")
    monkeypatch.setenv("LLM_MAX_RETRIES", "5")

    config = LLMConfig.load(path)

    assert config.provider == "openai"
    assert config.model == "gpt-env"
    assert config.api_key == "file-key"
    assert config.timeout_s == 12.0
    assert config.max_retries == 5
    assert config.resolved_base_url() == "https://api.openai.com/v1"


def test_unreadable_config_file_is_ignored(tmp_path):
    path = _write_config(tmp_path, "models: [unclosed\n")

    assert LLMConfig.from_config_file(path) is None
    assert LLMConfig.load(path).provider == "stub"


def test_bad_numeric_env_falls_back(monkeypatch):
    monkeypatch.setenv("LLM_TIMEOUT_S", "soon")

    assert LLMConfig.from_env().timeout_s == 30.0


@pytest.mark.parametrize(
    "config,expected",
    [
        (LLMConfig(provider="stub"), StubLLM),
        (LLMConfig(provider="openai", api_key="k"), OpenAIChatLLM),
        (LLMConfig(provider="Anthropic", api_key="k"), AnthropicLLM),
        (LLMConfig(provider="ollama"), OllamaLLM),
    ],
)
def test_factory_builds_provider(config, expected):
    assert isinstance(build_llm_from_config(config), expected)


@pytest.mark.parametrize("provider", ["openai", "anthropic"])
def test_factory_requires_api_key(provider):
    with pytest.raises(ValueError, match="requires api_key"):
        build_llm_from_config(LLMConfig(provider=provider))


def test_factory_rejects_unknown_provider():
    with pytest.raises(ValueError, match="Unsupported LLM provider"):
        build_llm_from_config(LLMConfig(provider="mystery"))


def test_build_llm_defaults_to_stub(tmp_path):
    assert isinstance(build_llm(tmp_path / "absent.yaml"), StubLLM)
