"""Tests for the question plan and its generation."""
import pytest

from mockinterview.interview.decision_engine import QuestionPlanner
from mockinterview.interview.schemas import (
    QuestionPlan, advance, current, is_exhausted, parse_question_list
)
from mockinterview.interview.testing import MockLLMClient, make_session_config


def test_advance_returns_new_plan():
    plan = QuestionPlan(("a", "b"))
    moved = advance(plan)
    assert moved.current_index == 1
    assert plan.current_index == 0
    assert current(moved) == "b"


def test_exhausted_at_length():
    plan = QuestionPlan(("a", "b"), current_index=2)
    assert is_exhausted(plan)
    assert not is_exhausted(QuestionPlan(("a", "b"), current_index=1))


def test_current_clamps_to_last_question():
    assert current(QuestionPlan(("a", "b"), current_index=2)) == "b"


def test_current_empty_plan_is_none():
    plan = QuestionPlan(())
    assert current(plan) is None
    assert is_exhausted(plan)


@pytest.mark.parametrize("index", [-1, 3])
def test_index_outside_bounds_rejected(index):
    with pytest.raises(ValueError):
        QuestionPlan(("a", "b"), current_index=index)


@pytest.mark.parametrize("raw", [
    '```json\n["One?", " Two? "]\n```',
    '```JSON\n["One?", " Two? "]\n```\n',
    '```\n["One?", " Two? "]\n```',
])
def test_parse_question_list_strips_fences(raw):
    assert parse_question_list(raw) == ["One?", "Two?"]


def test_parse_question_list_keeps_backticks_in_questions():
    raw = '```json\n["What does ```git rebase``` change?", "Two?"]\n```'
    assert parse_question_list(raw) == ["What does ```git rebase``` change?", "Two?"]


@pytest.mark.parametrize("raw", ["not json", "{}", "[]", '["ok", 3]', '["ok", "  "]'])
def test_parse_question_list_rejects_bad_shapes(raw):
    with pytest.raises(ValueError):
        parse_question_list(raw)


def test_generate_uses_collaborator_questions():
    llm = MockLLMClient(['["Why us?", "Tell me about a failure.", "Any questions?"]'])
    plan = QuestionPlanner(llm).generate(make_session_config(job_role="Data Analyst"))

    assert plan.questions == ("Why us?", "Tell me about a failure.", "Any questions?")
    assert plan.current_index == 0
    prompt = llm.request_history[0]["messages"][0]["content"]
    assert "Data Analyst" in prompt
    assert "exactly 5" in prompt


def test_generate_falls_back_on_non_json():
    llm = MockLLMClient(["not json"])
    plan = QuestionPlanner(llm).generate(make_session_config())

    assert list(plan.questions) == QuestionPlanner.fallback_questions()
    assert len(plan) == 5


def test_generate_falls_back_on_collaborator_error():
    llm = MockLLMClient([RuntimeError("timeout")])
    plan = QuestionPlanner(llm).generate(make_session_config())
    assert len(plan) == 5


def test_generate_keeps_longer_plans():
    llm = MockLLMClient(['["1?", "2?", "3?", "4?", "5?", "6?", "7?"]'])
    plan = QuestionPlanner(llm, question_count=5).generate(make_session_config())
    assert len(plan) == 7
