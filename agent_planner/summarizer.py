"""
Context Summarizer - keep recent turns verbatim, fold older ones into one message.

    [m1 .. m(n-k)]  →  one synthetic "CONVERSATION SUMMARY" user message
    [m(n-k+1) .. mn] →  returned unchanged, in order

Summaries are cached by a cheap fingerprint of the folded window: the first
50 characters of its oldest and newest message plus its length. Two windows
that agree on all three share a summary. That collision is accepted; swap
``fingerprint`` for a full content hash if it ever matters.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from agent_planner.config import PlannerConfig
from agent_planner.llm.base import BaseLLM
from agent_planner.llm.factory import build_llm
from agent_planner.prompts import build_summary_prompt

logger = logging.getLogger(__name__)

FINGERPRINT_CHARS = 50
FALLBACK_EXCERPT_CHARS = 100
QUICK_EXCERPT_CHARS = 100
DEFAULT_KEEP_RECENT = 10
DEFAULT_QUICK_MAX_LENGTH = 500
EMPTY_QUICK_SUMMARY = "Previous conversation context available."


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ConversationMessage:
    role: Role
    content: str
    timestamp: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConversationMessage":
        return cls(
            role=Role(data.get("role", "user")),
            content=str(data.get("content", "")),
            timestamp=data.get("timestamp"),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


def fingerprint(messages: Sequence[ConversationMessage]) -> str:
    if not messages:
        return "||0"
    first = messages[0].content[:FINGERPRINT_CHARS]
    last = messages[-1].content[:FINGERPRINT_CHARS]
    return f"{first}|{last}|{len(messages)}"


@dataclass
class SummaryCache:
    """Process-lifetime summary cache. Unbounded, no TTL.

    Guarded by an asyncio.Lock so coroutines on one loop see whole entries.
    """

    _items: Dict[str, str] = field(default_factory=dict)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return self._items.get(key)

    async def set(self, key: str, summary: str) -> None:
        async with self._lock:
            self._items[key] = summary

    async def clear(self) -> None:
        async with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


def truncation_summary(messages: Sequence[ConversationMessage]) -> str:
    return "\n".join(
        f"{m.role.value}: {m.content[:FALLBACK_EXCERPT_CHARS]}..." for m in messages
    )


def summary_message(summary: str, folded_count: int) -> ConversationMessage:
    return ConversationMessage(
        role=Role.USER,
        content=(
            f"📝 CONVERSATION SUMMARY ({folded_count} messages):\n\n"
            f"{summary}\n\n"
            "--- Recent messages below (full context) ---"
        ),
    )


class ContextSummarizer:
    def __init__(
        self,
        llm: BaseLLM,
        cache: Optional[SummaryCache] = None,
        keep_recent_count: int = DEFAULT_KEEP_RECENT,
        quick_max_length: int = DEFAULT_QUICK_MAX_LENGTH,
    ) -> None:
        self._llm = llm
        self.cache = cache if cache is not None else SummaryCache()
        self.keep_recent_count = keep_recent_count
        self.quick_max_length = quick_max_length

    @classmethod
    def from_config(
        cls,
        config: PlannerConfig,
        llm: Optional[BaseLLM] = None,
        llm_config_path: Optional[str] = None,
        cache: Optional[SummaryCache] = None,
    ) -> "ContextSummarizer":
        """Summarizer with the configured window; builds a token-capped LLM when none is given."""
        if llm is None:
            llm = build_llm(llm_config_path, max_tokens=config.summary_max_tokens)
        return cls(
            llm,
            cache=cache,
            keep_recent_count=config.keep_recent_count,
            quick_max_length=config.quick_summary_max_length,
        )

    async def summarize_context(
        self,
        messages: Sequence[ConversationMessage],
        keep_recent_count: Optional[int] = None,
    ) -> List[ConversationMessage]:
        """
        Fold everything but the newest ``keep_recent_count`` messages into one summary.

        ``keep_recent_count`` defaults to the summarizer's configured window;
        0 folds the whole conversation. Raises ValueError for a negative count.
        Model failures never raise; they degrade to a truncation summary.
        """
        if keep_recent_count is None:
            keep_recent_count = self.keep_recent_count
        if keep_recent_count < 0:
            raise ValueError("keep_recent_count must not be negative")
        if len(messages) <= keep_recent_count:
            logger.debug("No summarization needed - message count within limit")
            return list(messages)

        split = len(messages) - keep_recent_count
        old = list(messages[:split])
        recent = list(messages[split:])

        key = fingerprint(old)
        summary = await self.cache.get(key)
        if summary is None:
            logger.info(f"Summarizing {len(old)} old messages")
            summary = await self._generate_summary(old)
            await self.cache.set(key, summary)
        else:
            logger.info("Using cached summary")

        return [summary_message(summary, len(old)), *recent]

    def quick_summarize(self, messages: Sequence[ConversationMessage]) -> str:
        return quick_summarize(messages, max_length=self.quick_max_length)

    async def clear_cache(self) -> None:
        await self.cache.clear()
        logger.info("Summary cache cleared")

    async def _generate_summary(self, messages: Sequence[ConversationMessage]) -> str:
        conversation = "\n\n".join(
            f"{'User' if m.role is Role.USER else 'Assistant'}: {m.content}" for m in messages
        )
        try:
            text = await self._llm.generate_messages(
                [{"role": "user", "content": build_summary_prompt(conversation)}]
            )
        except Exception as exc:
            logger.error(f"Failed to generate summary, using truncation: {exc}", exc_info=True)
            return truncation_summary(messages)
        if not text or not text.strip():
            logger.warning("Summary model returned nothing, using truncation")
            return truncation_summary(messages)
        logger.info(f"Generated summary ({len(text)} characters)")
        return text.strip()


_QUICK_MARKERS = (
    (("task complete", "completed"), "✅ Completed"),
    (("error", "failed"), "❌ Error"),
    (("found", "created"), "📊 Result"),
)


def quick_summarize(
    messages: Sequence[ConversationMessage], max_length: int = DEFAULT_QUICK_MAX_LENGTH
) -> str:
    """Marker-based one-line extracts; no model call."""
    important: List[str] = []
    for m in messages:
        content = m.content.lower()
        for markers, label in _QUICK_MARKERS:
            if any(marker in content for marker in markers):
                important.append(f"{label}: {m.content[:QUICK_EXCERPT_CHARS]}")
                break

    summary = "\n".join(important)
    if len(summary) > max_length:
        summary = summary[:max_length] + "..."
    return summary or EMPTY_QUICK_SUMMARY
