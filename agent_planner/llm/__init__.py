from agent_planner.llm.anthropic import AnthropicLLM
from agent_planner.llm.base import BaseLLM
from agent_planner.llm.factory import build_llm, build_llm_from_config
from agent_planner.llm.json_extract import extract_json_block, extract_json_object
from agent_planner.llm.ollama import OllamaLLM
from agent_planner.llm.openai import OpenAIChatLLM
from agent_planner.llm.stub import StubLLM

__all__ = [
    "AnthropicLLM",
    "BaseLLM",
    "build_llm",
    "build_llm_from_config",
    "extract_json_block",
    "extract_json_object",
    "OllamaLLM",
    "OpenAIChatLLM",
    "StubLLM",
]
