"""End-to-end turn sequencing against mock collaborators."""
import pytest

from mockinterview.interview.decision_engine import QuestionPlanner
from mockinterview.interview.orchestrator import is_closing_statement
from mockinterview.interview.prompts import CLOSING_PHRASE
from mockinterview.interview.schemas import (
    EndReason, InvalidTransitionError, OrchestratorState, TranscriptionError, TurnInProgressError
)
from mockinterview.interview.sequencer import TurnSequencer
from mockinterview.interview.testing import (
    FailingSessionStore, MockLLMClient, MockSTTService, MockTTSService,
    make_feedback_response, make_questions_response, make_session_config
)


def feedback_calls(llm):
    return [r for r in llm.request_history if r["max_tokens"] == 1500]


def test_start_produces_single_interviewer_turn(sequencer, llm, session_config, metrics):
    llm.queue(make_questions_response(5), "Welcome! Question 1?")
    session = sequencer.start(session_config)

    assert session.state == OrchestratorState.AWAITING_TURN
    assert len(session.transcript) == 1
    assert session.last_interviewer_line == "Welcome! Question 1?"
    assert session.plan.questions[0] == "Question 1?"
    assert metrics.interviews_started == 1


def test_question_generator_garbage_falls_back(sequencer, llm, session_config):
    llm.queue("not json", "Hello! Tell me about yourself.")
    session = sequencer.start(session_config)

    assert list(session.plan.questions) == QuestionPlanner.fallback_questions()
    assert len(session.transcript) == 1
    assert session.transcript[0].text == "Hello! Tell me about yourself."


def test_end_request_goes_straight_to_feedback(started, llm, store, metrics):
    llm.queue("Of course. Thank you for your time, feedback is on its way.", make_feedback_response())
    session = started.submit_answer("I'd like to skip to feedback")

    assert len(session.transcript) == 3
    assert session.state == OrchestratorState.FEEDBACK_READY
    assert session.end_reason == EndReason.CANDIDATE_REQUEST
    assert len(feedback_calls(llm)) == 1
    assert len(store.saved) == 1
    assert metrics.end_requests == 1


def test_last_question_answered_closes_interview(started, llm, store):
    for i in range(4):
        llm.queue("YES", f"Thanks. Question {i + 2}?")
        started.submit_answer(f"Answer {i + 1}")
    assert started.session.plan.current_index == 4

    llm.queue("YES", f"Great answer. {CLOSING_PHRASE}", make_feedback_response(overall=9))
    session = started.submit_answer("Answer 5")

    assert is_closing_statement(session.last_interviewer_line)
    assert session.plan.current_index == 5
    assert session.end_reason == EndReason.QUESTIONS_EXHAUSTED
    assert session.state == OrchestratorState.FEEDBACK_READY
    assert session.feedback.overall_score == 9
    assert store.saved[0].question_count == 5
    assert store.saved[0].session_id == session.session_id


def test_closing_line_without_phrase_still_concludes(started, llm, caplog):
    for i in range(4):
        llm.queue("YES", f"Thanks. Question {i + 2}?")
        started.submit_answer(f"Answer {i + 1}")

    llm.queue("YES", "Thanks, that was my last question.", make_feedback_response())
    with caplog.at_level("WARNING", logger="sequencer"):
        session = started.submit_answer("Answer 5")

    assert session.state == OrchestratorState.FEEDBACK_READY
    assert session.end_reason == EndReason.QUESTIONS_EXHAUSTED
    assert "closing phrase" in caplog.text


def test_clarification_request_reprompts(started, llm, metrics):
    llm.queue("NO", "Sure, I mean a real situation from your work. Question 1?")
    session = started.submit_answer("can you clarify the question?")

    assert session.plan.current_index == 0
    assert len(session.transcript) == 3
    assert session.state == OrchestratorState.AWAITING_TURN
    assert metrics.retries == 1


def test_skip_advances_without_classifier_call(started, llm, metrics):
    before = llm.call_count
    llm.queue("No problem. Question 2?")
    session = started.submit_answer("next question please")

    assert session.plan.current_index == 1
    assert llm.call_count == before + 1
    assert metrics.skips == 1


def test_failed_save_still_reaches_feedback(llm, session_config, metrics, event_bus):
    store = FailingSessionStore()
    sequencer = TurnSequencer(llm, session_store=store, event_bus=event_bus)
    llm.queue(make_questions_response(5), "Question 1?", "Understood, thank you.",
              make_feedback_response(overall=6, communication=5, technical=4))
    sequencer.start(session_config)

    session = sequencer.submit_answer("stop the interview")

    assert session.state == OrchestratorState.FEEDBACK_READY
    assert (session.feedback.overall_score, session.feedback.communication_score,
            session.feedback.technical_score) == (6, 5, 4)
    assert store.attempts == 1
    assert metrics.failed_saves == 1


def test_classifier_failure_leaves_session_unchanged(started, llm, metrics):
    before = started.session
    llm.queue(ConnectionError("network down"))

    with pytest.raises(ConnectionError):
        started.submit_answer("My answer")

    assert started.session is before
    assert started.session.state == OrchestratorState.AWAITING_TURN
    assert not started.busy
    assert metrics.errors_occurred == 1

    llm.queue("YES", "Thanks. Question 2?")
    assert len(started.submit_answer("My answer").transcript) == 3


def test_reply_failure_rolls_back_plan(started, llm):
    before = started.session
    llm.queue("YES", RuntimeError("503"))

    with pytest.raises(RuntimeError):
        started.submit_answer("My answer")

    assert started.session is before
    assert started.session.plan.current_index == 0


def test_audio_answer_is_transcribed(llm, session_config, store):
    stt = MockSTTService(["I led the billing migration."])
    sequencer = TurnSequencer(llm, stt_service=stt, session_store=store)
    llm.queue(make_questions_response(5), "Question 1?", "YES", "Thanks. Question 2?")
    sequencer.start(session_config)

    session = sequencer.submit_audio(b"RIFF....")

    assert session.transcript[1].text == "I led the billing migration."
    assert stt.received_audio == [b"RIFF...."]


@pytest.mark.parametrize("scripted", ["", RuntimeError("bad audio")])
def test_transcription_failure_surfaces(llm, session_config, scripted, metrics, event_bus):
    sequencer = TurnSequencer(llm, stt_service=MockSTTService([scripted]), event_bus=event_bus)
    llm.queue(make_questions_response(5), "Question 1?")
    before = sequencer.start(session_config)

    with pytest.raises(TranscriptionError):
        sequencer.submit_audio(b"....")

    assert sequencer.session is before
    assert not sequencer.busy
    assert metrics.errors_occurred == 1


def test_playback_failure_is_swallowed(llm, voice_config):
    tts = MockTTSService(fail=True)
    sequencer = TurnSequencer(llm, tts_service=tts)
    llm.queue(make_questions_response(5), "Question 1?", "YES", "Thanks. Question 2?")

    sequencer.start(voice_config)
    session = sequencer.submit_answer("An answer")

    assert session.state == OrchestratorState.AWAITING_TURN
    assert tts.spoken_messages == ["Question 1?", "Thanks. Question 2?"]


def test_text_sessions_are_not_spoken(started, tts):
    assert tts.spoken_messages == []


def test_feedback_is_produced_once(started, llm, store):
    llm.queue(make_feedback_response(overall=8))
    first = started.generate_feedback()
    calls = llm.call_count

    second = started.generate_feedback()

    assert second is first
    assert llm.call_count == calls
    assert len(store.saved) == 1
    assert started.session.end_reason == EndReason.FINISHED_EARLY


def test_second_turn_while_busy_is_rejected(session_config):
    class ReentrantLLM(MockLLMClient):
        sequencer = None
        rejected = None
        busy_seen = None

        def complete(self, messages, **kwargs):
            if self.sequencer is not None and self.rejected is None:
                self.busy_seen = self.sequencer.busy
                try:
                    self.sequencer.submit_answer("second answer")
                except TurnInProgressError as e:
                    self.rejected = e
            return super().complete(messages, **kwargs)

    llm = ReentrantLLM([make_questions_response(5), "Question 1?", "YES", "Thanks. Question 2?"])
    sequencer = TurnSequencer(llm)
    sequencer.start(session_config)
    llm.sequencer = sequencer

    session = sequencer.submit_answer("first answer")

    assert isinstance(llm.rejected, TurnInProgressError)
    assert llm.busy_seen is True
    assert len(session.transcript) == 3
    assert not sequencer.busy


def test_question_index_only_moves_forward(started, llm):
    script = ["NO", "YES", "NO", "YES", "YES", "NO", "YES"]
    seen = [started.session.plan.current_index]
    for verdict in script:
        if started.session.state != OrchestratorState.AWAITING_TURN:
            break
        llm.queue(verdict, "Interviewer reply")
        before = len(started.session.transcript)
        session = started.submit_answer("some answer")
        assert len(session.transcript) == before + 2
        seen.append(session.plan.current_index)

    assert seen == sorted(seen)
    assert all(0 <= index <= len(started.session.plan) for index in seen)


def test_blank_utterance_is_ignored(started, llm):
    before = started.session
    calls = llm.call_count
    assert started.submit_answer("   ") is before
    assert llm.call_count == calls


def test_answer_before_start_is_rejected(sequencer):
    with pytest.raises(InvalidTransitionError):
        sequencer.submit_answer("hello")


def test_answer_after_feedback_is_rejected(started, llm):
    llm.queue("Goodbye.", make_feedback_response())
    started.submit_answer("I'm done")
    with pytest.raises(InvalidTransitionError):
        started.submit_answer("one more thing")


def test_start_failure_restores_previous_snapshot(llm):
    sequencer = TurnSequencer(llm)
    llm.queue(make_questions_response(5), ConnectionError("down"))

    with pytest.raises(ConnectionError):
        sequencer.start(make_session_config())

    assert sequencer.session is None
    assert not sequencer.busy
