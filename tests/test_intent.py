import random

import pytest

from agent_planner.intent import (
    RESPONSES,
    SHORT_MESSAGE_RESPONSE,
    Confidence,
    IntentClassifier,
    MessageIntent,
)


@pytest.fixture
def classifier():
    return IntentClassifier(rng=random.Random(7))


def test_greeting_is_high_confidence(classifier):
    result = classifier.classify("hello")

    assert result.intent == MessageIntent.GREETING
    assert result.confidence == Confidence.HIGH
    assert result.should_execute_task is False
    assert result.suggested_response in RESPONSES[MessageIntent.GREETING]


@pytest.mark.parametrize(
    "message,intent",
    [
        ("thanks!", MessageIntent.GRATITUDE),
        ("no", MessageIntent.NEGATION),
        ("Good morning!", MessageIntent.GREETING),
        ("what's up?", MessageIntent.GREETING),
        ("see ya", MessageIntent.FAREWELL),
        ("sounds good", MessageIntent.AFFIRMATION),
        ("never mind", MessageIntent.NEGATION),
        ("how are you?", MessageIntent.SMALL_TALK),
        ("what can you do?", MessageIntent.AGENT_QUESTION),
        ("huh?", MessageIntent.CLARIFICATION),
        ("I don't understand", MessageIntent.CLARIFICATION),
    ],
)
def test_conversational_categories(classifier, message, intent):
    result = classifier.classify(message)

    assert result.intent == intent
    assert result.should_execute_task is False


@pytest.mark.parametrize("message", ["", "   ", "\n\t"])
def test_empty_input_is_clarification(classifier, message):
    result = classifier.classify(message)

    assert result.intent == MessageIntent.CLARIFICATION
    assert result.confidence == Confidence.HIGH
    assert result.should_execute_task is False
    assert result.reasoning == "Empty message"


def test_negation_wins_over_clarification(classifier):
    # "stop" is also a task indicator; the negation pattern is tested first
    result = classifier.classify("stop")

    assert result.intent == MessageIntent.NEGATION


def test_short_message_without_indicator_asks_for_detail(classifier):
    result = classifier.classify("purple elephants")

    assert result.intent == MessageIntent.CLARIFICATION
    assert result.confidence == Confidence.MEDIUM
    assert result.suggested_response == SHORT_MESSAGE_RESPONSE


def test_short_message_with_indicator_is_task(classifier):
    result = classifier.classify("deploy it")

    assert result.intent == MessageIntent.TASK
    assert result.confidence == Confidence.HIGH
    assert result.should_execute_task is True
    assert result.suggested_response is None


def test_long_message_without_indicator_is_medium_task(classifier):
    result = classifier.classify("I would really like you to write me a short poem about autumn")

    assert result.intent == MessageIntent.TASK
    assert result.confidence == Confidence.MEDIUM


def test_is_conversational_and_summary(classifier):
    assert classifier.is_conversational("thanks") is True
    assert classifier.is_conversational("list all files in the repo") is False
    assert classifier.classification_summary("hello") == (
        "Intent: greeting (high confidence) - Matched greeting pattern"
    )
