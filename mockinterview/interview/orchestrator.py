"""
Interview state machine.

Transitions are pure: every operation takes an InterviewSession snapshot and
returns a new one, together with a description of the chat call to make.
Network calls, audio and persistence are carried out by the TurnSequencer.
"""
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from .models import FeedbackReport, SessionConfig, Speaker, Turn
from .schemas import (
    EndReason, InterviewSession, InvalidTransitionError, OrchestratorState,
    QuestionPlan, TurnIntent
)
from .prompts import OPENING_MESSAGE
from .decision_engine import PromptEngine, QuestionPlanner
from ..config import HISTORY_WINDOW, REPLY_MAX_TOKENS, REPLY_TEMPERATURE

logger = logging.getLogger("orchestrator")

# Lower-cased sentinel that marks an interviewer line as the closing statement
CLOSING_MARKER = "concludes our interview"


def is_closing_statement(text: Optional[str]) -> bool:
    """True if an interviewer line announces the end of the interview."""
    if not text:
        return False
    return CLOSING_MARKER in text.lower()


@dataclass(frozen=True)
class ChatRequest:
    """One chat-completion call the sequencer must perform."""
    system_prompt: str
    messages: Tuple[Dict[str, str], ...]
    max_tokens: int = REPLY_MAX_TOKENS
    temperature: float = REPLY_TEMPERATURE


@dataclass(frozen=True)
class PendingTurn:
    """A turn in flight: the processing snapshot plus what to do to finish it."""
    session: InterviewSession
    request: ChatRequest
    next_state: OrchestratorState
    candidate_turn: Optional[Turn] = None
    intent: Optional[TurnIntent] = None
    end_reason: Optional[EndReason] = None


class InterviewOrchestrator:
    """
    Pure transition functions over InterviewSession.

    State flow:
        collecting-setup -> processing-turn -> awaiting-turn
        awaiting-turn -> processing-turn -> awaiting-turn | concluding
        concluding | awaiting-turn -> feedback-ready
    """

    def __init__(self, history_window: int = HISTORY_WINDOW):
        self.history_window = history_window

    def new_session(self, session_config: SessionConfig) -> InterviewSession:
        return InterviewSession(config=session_config)

    def begin(self, session: InterviewSession, plan: QuestionPlan) -> PendingTurn:
        """
        Start the interview with a generated plan.
        The chat call asks the interviewer to pose the first question as its opening line.
        """
        self._require_state(session, "begin", OrchestratorState.COLLECTING_SETUP)

        if len(plan) == 0:
            logger.warning("Empty question plan supplied, substituting fallback questions")
            plan = QuestionPlan(questions=tuple(QuestionPlanner.fallback_questions()))

        processing = replace(session, plan=plan, state=OrchestratorState.PROCESSING_TURN)
        prompt_engine = PromptEngine(session.config)
        request = ChatRequest(
            system_prompt=prompt_engine.build_opening_prompt(plan.current()),
            messages=({"role": "user", "content": OPENING_MESSAGE},),
        )

        logger.info(f"Beginning interview {session.session_id} with {len(plan)} questions")
        return PendingTurn(
            session=processing,
            request=request,
            next_state=OrchestratorState.AWAITING_TURN,
        )

    def plan_answer(self, session: InterviewSession, utterance: str, intent: TurnIntent) -> PendingTurn:
        """
        Choose the branch for a classified candidate answer.

        end-now closes the interview at the candidate's request. advance and skip
        move to the next question, or close the interview once the plan runs out.
        retry asks the same question again.
        """
        self._require_state(session, "answer", OrchestratorState.AWAITING_TURN)

        candidate_turn = Turn(speaker=Speaker.CANDIDATE, text=utterance)
        prompt_engine = PromptEngine(session.config)
        plan = session.plan
        next_state = OrchestratorState.AWAITING_TURN
        end_reason = None

        if intent == TurnIntent.END_NOW:
            system_prompt = prompt_engine.build_end_request_prompt()
            messages = self._full_history(session, candidate_turn)
            next_state = OrchestratorState.CONCLUDING
            end_reason = EndReason.CANDIDATE_REQUEST

        elif intent in (TurnIntent.ADVANCE, TurnIntent.SKIP):
            plan = plan.advance()
            if plan.is_exhausted():
                system_prompt = prompt_engine.build_questions_exhausted_prompt()
                messages = self._full_history(session, candidate_turn)
                next_state = OrchestratorState.CONCLUDING
                end_reason = EndReason.QUESTIONS_EXHAUSTED
            else:
                system_prompt = prompt_engine.build_next_question_prompt(plan.current())
                messages = self._recent_history(session, candidate_turn)

        else:
            system_prompt = prompt_engine.build_reprompt_prompt(plan.current())
            messages = self._recent_history(session, candidate_turn)

        logger.info(
            f"Turn plan: intent={intent.value} index={session.plan.current_index}->{plan.current_index} "
            f"next_state={next_state.value}"
        )

        processing = replace(session, plan=plan, state=OrchestratorState.PROCESSING_TURN)
        return PendingTurn(
            session=processing,
            request=ChatRequest(system_prompt=system_prompt, messages=messages),
            next_state=next_state,
            candidate_turn=candidate_turn,
            intent=intent,
            end_reason=end_reason,
        )

    def complete_turn(self, pending: PendingTurn, reply_text: str) -> InterviewSession:
        """Append the candidate turn (if any) and the interviewer's reply in one step."""
        self._require_state(pending.session, "complete turn", OrchestratorState.PROCESSING_TURN)

        turns: List[Turn] = []
        if pending.candidate_turn is not None:
            turns.append(pending.candidate_turn)
        turns.append(Turn(speaker=Speaker.INTERVIEWER, text=reply_text))

        updated = pending.session.with_turns(*turns)
        return replace(updated, state=pending.next_state, end_reason=pending.end_reason)

    def conclude(self, session: InterviewSession, report: FeedbackReport) -> InterviewSession:
        """Attach the feedback report. Concluding from awaiting-turn counts as finishing early."""
        self._require_state(
            session, "conclude",
            OrchestratorState.CONCLUDING, OrchestratorState.AWAITING_TURN
        )
        end_reason = session.end_reason or EndReason.FINISHED_EARLY
        return replace(
            session,
            feedback=report,
            end_reason=end_reason,
            state=OrchestratorState.FEEDBACK_READY,
        )

    def _recent_history(self, session: InterviewSession, candidate_turn: Turn) -> Tuple[Dict[str, str], ...]:
        """Last few transcript turns plus the new utterance."""
        transcript = session.transcript
        recent = transcript[max(len(transcript) - self.history_window, 0):]
        return tuple(turn.to_message() for turn in recent + (candidate_turn,))

    @staticmethod
    def _full_history(session: InterviewSession, candidate_turn: Turn) -> Tuple[Dict[str, str], ...]:
        return tuple(turn.to_message() for turn in session.transcript + (candidate_turn,))

    @staticmethod
    def _require_state(session: InterviewSession, operation: str, *allowed: OrchestratorState) -> None:
        if session.state not in allowed:
            expected = ", ".join(state.value for state in allowed)
            raise InvalidTransitionError(
                f"Cannot {operation} in state '{session.state.value}' (expected {expected})"
            )
