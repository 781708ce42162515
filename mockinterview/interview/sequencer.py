"""
Turn-taking sequencer.

Runs one interview turn at a time: candidate input -> classification ->
interviewer reply -> optional speech -> updated snapshot. It performs every
side effect the orchestrator describes and owns the current session snapshot.
"""
import time
import logging
import threading
from contextlib import contextmanager
from typing import Optional

from .models import FeedbackReport, SessionConfig
from .schemas import (
    EndReason, InterviewError, InterviewSession, InvalidTransitionError,
    OrchestratorState, TurnInProgressError
)
from .orchestrator import ChatRequest, InterviewOrchestrator, PendingTurn, is_closing_statement
from .decision_engine import IntentClassifier, QuestionPlanner
from .analysis import FeedbackSynthesizer
from .events import (
    InterviewEventBus, InterviewStartedEvent, QuestionsGeneratedEvent,
    IntentClassifiedEvent, TurnCompletedEvent, InterviewConcludedEvent,
    FeedbackGeneratedEvent, SessionSavedEvent, ErrorOccurredEvent
)
from ..config import HISTORY_WINDOW, QUESTION_COUNT

logger = logging.getLogger("sequencer")


class TurnSequencer:
    """
    Serializes interview turns and executes their side effects.

    Only one call may be in flight at a time; a concurrent call raises
    TurnInProgressError instead of waiting. When a call fails the previous
    snapshot is restored, so the session never stays in processing-turn.
    """

    def __init__(self,
                 llm_client,
                 tts_service=None,
                 stt_service=None,
                 session_store=None,
                 event_bus: Optional[InterviewEventBus] = None,
                 classifier: Optional[IntentClassifier] = None,
                 planner: Optional[QuestionPlanner] = None,
                 synthesizer: Optional[FeedbackSynthesizer] = None,
                 orchestrator: Optional[InterviewOrchestrator] = None,
                 question_count: int = QUESTION_COUNT,
                 history_window: int = HISTORY_WINDOW,
                 user_id: Optional[str] = None):
        self.llm_client = llm_client
        self.tts_service = tts_service
        self.stt_service = stt_service
        self.session_store = session_store
        self.event_bus = event_bus or InterviewEventBus()
        self.classifier = classifier or IntentClassifier(llm_client)
        self.planner = planner or QuestionPlanner(llm_client, question_count)
        self.synthesizer = synthesizer or FeedbackSynthesizer(llm_client)
        self.orchestrator = orchestrator or InterviewOrchestrator(history_window)
        self.user_id = user_id

        self._lock = threading.Lock()
        self._session: Optional[InterviewSession] = None

    @property
    def session(self) -> Optional[InterviewSession]:
        """Current immutable snapshot (None before start)."""
        return self._session

    @property
    def busy(self) -> bool:
        """True while a turn is in flight; input controls should be disabled."""
        return self._lock.locked()

    @contextmanager
    def _single_flight(self):
        if not self._lock.acquire(blocking=False):
            raise TurnInProgressError("Another turn is still being processed")
        try:
            yield
        finally:
            self._lock.release()

    def start(self, session_config: SessionConfig) -> InterviewSession:
        """
        Generate the question plan and obtain the interviewer's opening line.

        Returns:
            Snapshot in awaiting-turn holding exactly one interviewer turn
        """
        with self._single_flight():
            previous = self._session
            session = self.orchestrator.new_session(session_config)
            self._session = session

            try:
                plan = self.planner.generate(session_config)
                self._emit(QuestionsGeneratedEvent(session.session_id, time.time(), list(plan.questions)))

                pending = self.orchestrator.begin(session, plan)
                started = self._run_turn(pending)
            except Exception as e:
                self._session = previous
                self._emit_error(session, e, "start")
                raise

            self._emit(InterviewStartedEvent(
                session_id=started.session_id,
                timestamp=time.time(),
                job_role=session_config.job_role,
                interview_type=session_config.interview_type.value,
                question_count=len(started.plan),
            ))
            self._speak(started)
            return started

    def submit_answer(self, utterance: str) -> InterviewSession:
        """
        Process one candidate answer.

        Blank input is ignored. Classification and chat failures propagate with
        the snapshot left exactly as it was before the call.
        """
        with self._single_flight():
            return self._submit_answer(utterance)

    def submit_audio(self, audio_bytes: bytes) -> InterviewSession:
        """
        Transcribe a recorded answer and process it like typed text.

        Raises:
            TranscriptionError: If the recording cannot be transcribed; nothing changes
        """
        with self._single_flight():
            session = self._require_state("submit audio", OrchestratorState.AWAITING_TURN)
            if self.stt_service is None:
                raise InterviewError("Speech-to-text is not configured")

            try:
                utterance = self.stt_service.transcribe(audio_bytes)
            except Exception as e:
                self._emit_error(session, e, "speech_to_text")
                raise

            return self._submit_answer(utterance)

    def generate_feedback(self) -> FeedbackReport:
        """
        Conclude the interview and return its feedback report.

        Calling this again after the report exists returns the same report
        without scoring or saving a second time.
        """
        with self._single_flight():
            session = self._require_state(
                "generate feedback",
                OrchestratorState.AWAITING_TURN,
                OrchestratorState.CONCLUDING,
                OrchestratorState.FEEDBACK_READY,
            )
            if session.feedback is not None:
                logger.info(f"Feedback for session {session.session_id} already generated, reusing it")
                return session.feedback

            return self._conclude(session).feedback

    def _submit_answer(self, utterance: str) -> InterviewSession:
        session = self._require_state("submit answer", OrchestratorState.AWAITING_TURN)

        utterance = utterance.strip()
        if not utterance:
            logger.debug("Ignoring blank utterance")
            return session

        try:
            intent = self.classifier.classify(session.plan.current(), utterance)
            self._emit(IntentClassifiedEvent(
                session_id=session.session_id,
                timestamp=time.time(),
                intent=intent.value,
                question_index=session.plan.current_index,
                utterance=utterance,
            ))

            pending = self.orchestrator.plan_answer(session, utterance, intent)
            updated = self._run_turn(pending)
        except Exception as e:
            self._session = session
            self._emit_error(session, e, "turn")
            raise

        self._speak(updated)

        if updated.state == OrchestratorState.CONCLUDING:
            if (updated.end_reason == EndReason.QUESTIONS_EXHAUSTED
                    and not is_closing_statement(updated.last_interviewer_line)):
                logger.warning("Closing reply did not contain the closing phrase, concluding anyway")
            updated = self._conclude(updated)
        return updated

    def _run_turn(self, pending: PendingTurn) -> InterviewSession:
        """Send the pending chat request and fold the reply into a new snapshot."""
        self._session = pending.session
        reply_text = self._send(pending.request)
        updated = self.orchestrator.complete_turn(pending, reply_text)
        self._session = updated

        self._emit(TurnCompletedEvent(
            session_id=updated.session_id,
            timestamp=time.time(),
            transcript_length=len(updated.transcript),
            question_index=updated.plan.current_index,
            interviewer_text=reply_text,
            state=updated.state.value,
        ))
        return updated

    def _send(self, request: ChatRequest) -> str:
        reply = self.llm_client.complete(
            list(request.messages),
            system_prompt=request.system_prompt,
            max_tokens=request.max_tokens,
            temperature=request.temperature,
        )
        return reply.strip()

    def _conclude(self, session: InterviewSession) -> InterviewSession:
        """Score the transcript, attach the report and persist it."""
        report = self.synthesizer.synthesize(session.config, session.transcript)
        self._emit(FeedbackGeneratedEvent(
            session_id=session.session_id,
            timestamp=time.time(),
            overall_score=report.overall_score,
            degraded=report.degraded,
        ))

        concluded = self.orchestrator.conclude(session, report)
        self._session = concluded
        self._emit(InterviewConcludedEvent(
            session_id=concluded.session_id,
            timestamp=time.time(),
            end_reason=concluded.end_reason.value if concluded.end_reason else None,
            question_count=concluded.question_count,
            turn_count=len(concluded.transcript),
        ))

        self._persist(concluded)
        return concluded

    def _persist(self, session: InterviewSession) -> None:
        """Best-effort save; failures are logged and reported on the event bus."""
        if self.session_store is None:
            return

        try:
            self.session_store.save(
                session.config,
                session.transcript,
                session.feedback,
                session.question_count,
                user_id=self.user_id,
                session_id=session.session_id,
            )
        except Exception as e:
            logger.error(f"Failed to save session {session.session_id}: {e}")
            self._emit(SessionSavedEvent(session.session_id, time.time(), success=False, error_message=str(e)))
            return

        self._emit(SessionSavedEvent(session.session_id, time.time(), success=True))

    def _speak(self, session: InterviewSession) -> None:
        """Play the latest interviewer line when the session uses voice."""
        if self.tts_service is None or not session.config.use_voice:
            return

        text = session.last_interviewer_line
        if not text:
            return
        try:
            self.tts_service.speak(text)
        except Exception as e:
            logger.warning(f"Audio playback failed, continuing in text: {e}")

    def _require_state(self, operation: str, *allowed: OrchestratorState) -> InterviewSession:
        session = self._session
        if session is None:
            raise InvalidTransitionError(f"Cannot {operation} before the interview has started")
        if session.state not in allowed:
            raise InvalidTransitionError(f"Cannot {operation} in state '{session.state.value}'")
        return session

    def _emit(self, event) -> None:
        self.event_bus.emit(event)

    def _emit_error(self, session: InterviewSession, error: Exception, component: str) -> None:
        logger.error(f"{component} failed for session {session.session_id}: {error}")
        self._emit(ErrorOccurredEvent(
            session_id=session.session_id,
            timestamp=time.time(),
            error_type=type(error).__name__,
            error_message=str(error),
            component=component,
        ))
