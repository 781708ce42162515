"""
Structured state, schemas and response parsers for the interview system.
"""
import json
import re
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .models import FeedbackReport, SessionConfig, Speaker, Transcript, Turn


class InterviewError(RuntimeError):
    """Base class for interview flow errors."""


class InvalidTransitionError(InterviewError):
    """Operation is not allowed in the session's current state."""


class TurnInProgressError(InterviewError):
    """Another turn is still being processed."""


class TranscriptionError(InterviewError):
    """Recorded audio could not be turned into text."""


class OrchestratorState(str, Enum):
    """Lifecycle states of an interview session."""
    COLLECTING_SETUP = "collecting-setup"
    AWAITING_TURN = "awaiting-turn"
    PROCESSING_TURN = "processing-turn"
    CONCLUDING = "concluding"
    FEEDBACK_READY = "feedback-ready"


class TurnIntent(str, Enum):
    """What a candidate utterance asks the interview to do."""
    ADVANCE = "advance"
    RETRY = "retry"
    SKIP = "skip"
    END_NOW = "end-now"


class EndReason(str, Enum):
    """Why an interview concluded."""
    CANDIDATE_REQUEST = "candidate-request"
    QUESTIONS_EXHAUSTED = "questions-exhausted"
    FINISHED_EARLY = "finished-early"


@dataclass(frozen=True)
class QuestionPlan:
    """Ordered interview questions with a progress cursor."""
    questions: Tuple[str, ...] = ()
    current_index: int = 0

    def __post_init__(self):
        object.__setattr__(self, "questions", tuple(self.questions))
        if not 0 <= self.current_index <= len(self.questions):
            raise ValueError(
                f"current_index {self.current_index} outside 0..{len(self.questions)}"
            )

    def __len__(self) -> int:
        return len(self.questions)

    def advance(self) -> "QuestionPlan":
        """Return a new plan moved to the next question."""
        return replace(self, current_index=self.current_index + 1)

    def is_exhausted(self) -> bool:
        return self.current_index >= len(self.questions)

    def current(self) -> Optional[str]:
        """Question under the cursor, clamped to the last one; None for an empty plan."""
        if not self.questions:
            return None
        return self.questions[min(self.current_index, len(self.questions) - 1)]


def advance(plan: QuestionPlan) -> QuestionPlan:
    return plan.advance()


def is_exhausted(plan: QuestionPlan) -> bool:
    return plan.is_exhausted()


def current(plan: QuestionPlan) -> Optional[str]:
    return plan.current()


@dataclass(frozen=True)
class InterviewSession:
    """Immutable snapshot of one interview session handed between turns."""
    config: SessionConfig
    plan: QuestionPlan = field(default_factory=QuestionPlan)
    transcript: Transcript = ()
    state: OrchestratorState = OrchestratorState.COLLECTING_SETUP
    feedback: Optional[FeedbackReport] = None
    end_reason: Optional[EndReason] = None
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def question_count(self) -> int:
        """Number of plan questions the candidate has been asked."""
        if not self.plan.questions:
            return 0
        return min(self.plan.current_index + 1, len(self.plan))

    @property
    def is_ending(self) -> bool:
        return self.state in (OrchestratorState.CONCLUDING, OrchestratorState.FEEDBACK_READY)

    @property
    def last_interviewer_line(self) -> Optional[str]:
        for turn in reversed(self.transcript):
            if turn.speaker == Speaker.INTERVIEWER:
                return turn.text
        return None

    def with_turns(self, *turns: Turn) -> "InterviewSession":
        """New snapshot with turns appended; the current transcript is left untouched."""
        return replace(self, transcript=self.transcript + tuple(turns))


# =============================================================================
# LLM RESPONSE PARSERS
# =============================================================================

# Only an opening fence at the start and a closing fence at the end
_FENCE_PATTERN = re.compile(r"^\s*```(?:json)?|```\s*$", re.IGNORECASE)

FEEDBACK_LIST_FIELDS = {
    "strengths": "strengths",
    "areasForImprovement": "areas_for_improvement",
    "recommendations": "recommendations",
}
FEEDBACK_SCORE_FIELDS = {
    "overallScore": "overall_score",
    "communicationScore": "communication_score",
    "technicalScore": "technical_score",
}


def strip_code_fences(raw_response: str) -> str:
    """Remove a Markdown ```json ... ``` wrapper around the whole response."""
    return _FENCE_PATTERN.sub("", raw_response).strip()


def parse_question_list(raw_response: str) -> List[str]:
    """
    Parse a generated question set.

    Raises:
        ValueError: If the response is not a non-empty JSON array of strings
    """
    try:
        data = json.loads(strip_code_fences(raw_response))
    except json.JSONDecodeError as e:
        raise ValueError(f"Question list is not JSON: {raw_response!r}") from e

    if not isinstance(data, list) or not data:
        raise ValueError(f"Question list must be a non-empty array: {raw_response!r}")

    questions = []
    for item in data:
        if not isinstance(item, str) or not item.strip():
            raise ValueError(f"Question list contains a non-string entry: {item!r}")
        questions.append(item.strip())
    return questions


def _coerce_score(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"Score is not numeric: {value!r}")
    score = int(round(float(value)))
    return max(1, min(10, score))


def _coerce_string_list(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Expected an array of strings, got: {value!r}")
    return tuple(str(item) for item in value)


def parse_feedback_report(raw_response: str) -> FeedbackReport:
    """
    Parse the scorer's JSON reply into a FeedbackReport.

    Raises:
        ValueError: If the response is not JSON or misses required fields
    """
    try:
        data = json.loads(strip_code_fences(raw_response))
    except json.JSONDecodeError as e:
        raise ValueError(f"Feedback is not JSON: {raw_response!r}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Feedback must be a JSON object: {raw_response!r}")

    values: Dict[str, Any] = {}
    try:
        for key, attr in FEEDBACK_SCORE_FIELDS.items():
            values[attr] = _coerce_score(data[key])
        for key, attr in FEEDBACK_LIST_FIELDS.items():
            values[attr] = _coerce_string_list(data[key])
        detailed = data["detailedFeedback"]
    except KeyError as e:
        raise ValueError(f"Feedback is missing field {e}") from e

    if not isinstance(detailed, str):
        raise ValueError(f"detailedFeedback must be a string: {detailed!r}")

    return FeedbackReport(detailed_feedback=detailed, **values)
