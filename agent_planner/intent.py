"""
Intent Classifier - decide whether a chat message is conversation or work.

Runs before any planning so greetings, thanks and other chatter never reach
the LLM planner. Pure pattern matching, no I/O.

Categories are tested in declaration order and the first match wins; the
order resolves overlaps (a bare "what" is a clarification, "what's up" is a
greeting because greetings are tested first).
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)


class MessageIntent(str, Enum):
    GREETING = "greeting"
    FAREWELL = "farewell"
    GRATITUDE = "gratitude"
    AFFIRMATION = "affirmation"
    NEGATION = "negation"
    SMALL_TALK = "small_talk"
    AGENT_QUESTION = "agent_question"
    CLARIFICATION = "clarification"
    TASK = "task"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ClassificationResult:
    intent: MessageIntent
    confidence: Confidence
    should_execute_task: bool
    reasoning: str
    suggested_response: Optional[str] = None


_TAIL = r"[\s!.,?]*$"


def _patterns(*sources: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(src + _TAIL, re.IGNORECASE) for src in sources)


# (intent, patterns, reasoning) in priority order.
INTENT_PATTERNS: Sequence[Tuple[MessageIntent, Tuple[Pattern[str], ...], str]] = (
    (
        MessageIntent.GREETING,
        _patterns(
            r"^(hi|hey|hello|yo|sup|hiya|howdy|greetings)",
            r"^(good\s*(morning|afternoon|evening|night))",
            r"^(what'?s?\s*up|wassup|wazzup)",
        ),
        "Matched greeting pattern",
    ),
    (
        MessageIntent.FAREWELL,
        _patterns(
            r"^(bye|goodbye|see\s*ya|later|cya|peace|ttyl|take\s*care)",
            r"^(good\s*night|gn|have\s*a\s*good\s*(one|day|night))",
        ),
        "Matched farewell pattern",
    ),
    (
        MessageIntent.GRATITUDE,
        _patterns(
            r"^(thanks|thank\s*you|thx|ty|appreciate\s*it|cheers)",
            r"^(thanks\s*(a\s*lot|so\s*much|buddy|man|dude))",
        ),
        "Matched gratitude pattern",
    ),
    (
        MessageIntent.AFFIRMATION,
        _patterns(
            r"^(yes|yeah|yep|yup|ok|okay|sure|alright|sounds\s*good|perfect|great|cool|nice|awesome|got\s*it)",
            r"^(right|correct|exactly|absolutely|definitely)",
        ),
        "Matched affirmation pattern",
    ),
    (
        MessageIntent.NEGATION,
        _patterns(
            r"^(no|nope|nah|never\s*mind|nevermind|cancel|stop|forget\s*it|don'?t)",
        ),
        "Matched negation pattern",
    ),
    (
        MessageIntent.SMALL_TALK,
        _patterns(
            r"^how\s*(are\s*you|'?s\s*it\s*going|you\s*doing|have\s*you\s*been)",
            r"^what'?s\s*(going\s*on|new|happening)",
            r"^you\s*(good|okay|alright)",
        ),
        "Matched small talk pattern",
    ),
    (
        MessageIntent.AGENT_QUESTION,
        _patterns(
            r"^(who|what)\s*(are\s*you|is\s*this)",
            r"^what\s*(can\s*you\s*do|are\s*you(r)?\s*capabilities|do\s*you\s*do)",
            r"^(help|help\s*me|what\s*commands)",
            r"^(are\s*you\s*(a\s*bot|an?\s*ai|real))",
        ),
        "Matched agent meta-question pattern",
    ),
    (
        MessageIntent.CLARIFICATION,
        _patterns(
            r"^(what|huh|sorry|pardon|excuse\s*me)",
            r"^(can\s*you\s*(repeat|say\s*that\s*again|explain))",
            r"^(i\s*don'?t\s*(understand|get\s*it))",
        ),
        "Matched clarification pattern",
    ),
)

TASK_INDICATORS: Tuple[str, ...] = (
    # action verbs
    "create", "make", "build", "add", "remove", "delete", "update", "modify", "change",
    "deploy", "start", "stop", "restart", "run", "execute", "install", "setup",
    "clone", "push", "pull", "commit", "merge", "check", "analyze", "find", "search",
    "list", "show", "display", "get", "fetch", "send", "move", "copy", "rename",
    # objects
    "file", "folder", "directory", "repo", "repository", "server", "container",
    "card", "board", "task", "issue", "branch", "project", "workspace",
    "database", "table", "function", "endpoint", "api",
)

RESPONSES = {
    MessageIntent.GREETING: [
        "Hey! 👋 What can I help you with today?",
        "Hello! Ready to help. What do you need?",
        "Hi there! What would you like me to do?",
        "Hey! I'm here and ready. What's the task?",
    ],
    MessageIntent.FAREWELL: [
        "Goodbye! Let me know if you need anything else. 👋",
        "See you later! I'll be here when you need me.",
        "Take care! Come back anytime.",
    ],
    MessageIntent.GRATITUDE: [
        "You're welcome! Let me know if you need anything else.",
        "Happy to help! Anything else?",
        "No problem! I'm here if you need more help.",
    ],
    MessageIntent.AFFIRMATION: [
        "Got it! What would you like me to do?",
        "Okay! Ready when you are - just tell me what you need.",
        "Sure thing! What's the task?",
    ],
    MessageIntent.NEGATION: [
        "No worries! Let me know if you change your mind or need something else.",
        "Okay, cancelled. What else can I help with?",
        "Understood. I'm here when you're ready.",
    ],
    MessageIntent.SMALL_TALK: [
        "I'm doing great, thanks for asking! 🤖 Ready to help with any tasks you have.",
        "All good here! What can I do for you today?",
        "Running smoothly! Got something for me to work on?",
    ],
    MessageIntent.AGENT_QUESTION: [
        "I'm your AI assistant! I can help you with:\n"
        "• **Git/GitHub** - Clone repos, create branches, push code\n"
        "• **Trello** - Manage boards, cards, and tasks\n"
        "• **Deployment** - Deploy to Hetzner or Vercel\n"
        "• **Containers** - Manage Docker containers\n"
        "• **General tasks** - Run commands, manage files\n\n"
        "Just tell me what you need!",
    ],
    MessageIntent.CLARIFICATION: [
        "Could you tell me more about what you'd like me to do?",
        "I want to make sure I understand - what would you like me to help with?",
        "Let me know what task you have in mind and I'll get right on it!",
    ],
}

DEFAULT_RESPONSE = "What can I help you with?"
SHORT_MESSAGE_RESPONSE = (
    "I'm not sure what you mean. Could you give me a bit more detail "
    "about what you'd like me to do?"
)
SHORT_MESSAGE_WORDS = 3


class IntentClassifier:
    """Classifies chat messages; ``rng`` picks among canned replies."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def classify(self, message: str) -> ClassificationResult:
        trimmed = message.strip()

        if not trimmed:
            return self._conversational(
                MessageIntent.CLARIFICATION, Confidence.HIGH, "Empty message"
            )

        for intent, patterns, reasoning in INTENT_PATTERNS:
            if any(p.search(trimmed) for p in patterns):
                return self._conversational(intent, Confidence.HIGH, reasoning)

        lower = trimmed.lower()
        has_task_indicator = any(indicator in lower for indicator in TASK_INDICATORS)

        if len(trimmed.split()) <= SHORT_MESSAGE_WORDS and not has_task_indicator:
            return ClassificationResult(
                intent=MessageIntent.CLARIFICATION,
                confidence=Confidence.MEDIUM,
                should_execute_task=False,
                suggested_response=SHORT_MESSAGE_RESPONSE,
                reasoning="Short message without task indicators",
            )

        return ClassificationResult(
            intent=MessageIntent.TASK,
            confidence=Confidence.HIGH if has_task_indicator else Confidence.MEDIUM,
            should_execute_task=True,
            reasoning=(
                "Contains task action keywords"
                if has_task_indicator
                else "Longer message likely describing a task"
            ),
        )

    def is_conversational(self, message: str) -> bool:
        return not self.classify(message).should_execute_task

    def classification_summary(self, message: str) -> str:
        result = self.classify(message)
        return (
            f"Intent: {result.intent.value} ({result.confidence.value} confidence)"
            f" - {result.reasoning}"
        )

    def _conversational(
        self, intent: MessageIntent, confidence: Confidence, reasoning: str
    ) -> ClassificationResult:
        return ClassificationResult(
            intent=intent,
            confidence=confidence,
            should_execute_task=False,
            suggested_response=self._pick_response(intent),
            reasoning=reasoning,
        )

    def _pick_response(self, intent: MessageIntent) -> str:
        responses: List[str] = RESPONSES.get(intent, [])
        if not responses:
            return DEFAULT_RESPONSE
        return self._rng.choice(responses)
