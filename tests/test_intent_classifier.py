"""Tests for turn intent classification."""
import pytest

from mockinterview.interview.decision_engine import IntentClassifier, parse_verdict
from mockinterview.interview.schemas import TurnIntent
from mockinterview.interview.testing import MockLLMClient

QUESTION = "Tell me about a time you disagreed with a teammate."


@pytest.mark.parametrize("utterance", [
    "I'd like to skip to feedback",
    "Can we end the interview now?",
    "please stop the interview",
    "I want to wrap up this session",
    "Can I get my feedback?",
    "I'm done",
    "I don't want to answer any more",
    "OK that's enough",
    "No more questions please",
])
def test_end_requests_short_circuit(utterance):
    llm = MockLLMClient()
    assert IntentClassifier(llm).classify(QUESTION, utterance) == TurnIntent.END_NOW
    assert llm.call_count == 0


@pytest.mark.parametrize("utterance", [
    "Can we skip this question?",
    "Next question please",
    "Let's move on",
    "I'll pass on this one",
])
def test_skip_requests_short_circuit(utterance):
    llm = MockLLMClient()
    assert IntentClassifier(llm).classify(QUESTION, utterance) == TurnIntent.SKIP
    assert llm.call_count == 0


@pytest.mark.parametrize("utterance", [
    "I would terminate the session after thirty minutes of idle time and log the user out.",
    "Once I'm done with the schema migration I hand it to QA.",
    "We decided to move on to Kubernetes after the outage.",
    "I had to stop the session leak in our cache before the release.",
    "Let's move on to the part where we sharded the database.",
    "My manager said that's enough testing, but I pushed for one more load test.",
    "We skip this step in staging because the fixtures are already seeded.",
])
def test_answers_mentioning_request_phrases_go_to_llm(utterance):
    llm = MockLLMClient(["YES"])
    assert IntentClassifier(llm).classify(QUESTION, utterance) == TurnIntent.ADVANCE
    assert llm.call_count == 1


@pytest.mark.parametrize("utterance, expected", [
    ("Okay, I think I'm done.", TurnIntent.END_NOW),
    ("Sorry, could we wrap it up here?", TurnIntent.END_NOW),
    ("I’m done", TurnIntent.END_NOW),
    ("Skip", TurnIntent.SKIP),
    ("Hmm, can we move on to the next one please?", TurnIntent.SKIP),
])
def test_requests_with_fillers_and_courtesy(utterance, expected):
    llm = MockLLMClient()
    assert IntentClassifier(llm).classify(QUESTION, utterance) == expected
    assert llm.call_count == 0


def test_yes_verdict_advances():
    llm = MockLLMClient(["YES"])
    intent = IntentClassifier(llm).classify(QUESTION, "We compared both designs and picked one.")

    assert intent == TurnIntent.ADVANCE
    request = llm.request_history[0]
    assert QUESTION in request["messages"][0]["content"]
    assert request["temperature"] == 0.0


def test_no_verdict_retries():
    llm = MockLLMClient(["NO"])
    assert IntentClassifier(llm).classify(QUESTION, "can you clarify the question?") == TurnIntent.RETRY


def test_classification_is_repeatable():
    llm = MockLLMClient(["yes", "yes"])
    classifier = IntentClassifier(llm)
    first = classifier.classify(QUESTION, "I listened first.")
    second = classifier.classify(QUESTION, "I listened first.")
    assert first == second == TurnIntent.ADVANCE


def test_collaborator_errors_propagate():
    llm = MockLLMClient([ConnectionError("network down")])
    with pytest.raises(ConnectionError):
        IntentClassifier(llm).classify(QUESTION, "We talked it through.")


@pytest.mark.parametrize("raw, expected", [
    ("YES", True),
    ("yes.", True),
    ("  Yes, they did", True),
    ("NO", False),
    ("no", False),
    ("NO, wait, YES", False),
    ("The answer is YES", True),
    ("Maybe", False),
    ("", False),
])
def test_parse_verdict(raw, expected):
    assert parse_verdict(raw) is expected
