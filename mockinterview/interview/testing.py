"""
Testing infrastructure with mock services for the interview system.
"""
import json
from typing import Any, Dict, List, Optional, Union

from .models import ExperienceLevel, FeedbackReport, InterviewType, SessionConfig, Speaker, Turn
from .services import SpeechToTextService, TTSService
from ..infrastructure.data import SessionRecord, SessionStore

ScriptedResponse = Union[str, Exception]

DEFAULT_REPLY = "Thank you. Let's continue."


class MockLLMClient:
    """Completion client that replays scripted responses in order."""

    def __init__(self, mock_responses: Optional[List[ScriptedResponse]] = None,
                 default_response: str = DEFAULT_REPLY):
        self.mock_responses = list(mock_responses or [])
        self.default_response = default_response
        self.current_response_idx = 0
        self.request_history: List[Dict[str, Any]] = []

    def complete(self, messages, system_prompt: Optional[str] = None,
                 max_tokens: Optional[int] = None, temperature: float = 0.0) -> str:
        """Return the next scripted response; scripted exceptions are raised."""
        self.request_history.append({
            "messages": [dict(message) for message in messages],
            "system_prompt": system_prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })

        if self.current_response_idx >= len(self.mock_responses):
            return self.default_response

        response = self.mock_responses[self.current_response_idx]
        self.current_response_idx += 1
        if isinstance(response, Exception):
            raise response
        return response

    def queue(self, *responses: ScriptedResponse) -> None:
        self.mock_responses.extend(responses)

    @property
    def call_count(self) -> int:
        return len(self.request_history)


class MockTTSService(TTSService):
    """TTS service that records lines instead of playing them."""

    def __init__(self, fail: bool = False):
        # Don't call super().__init__ to avoid touching real TTS settings
        self.use_tts = True
        self.fail = fail
        self.spoken_messages: List[str] = []

    def speak(self, text: str) -> bool:
        self.spoken_messages.append(text)
        if self.fail:
            raise RuntimeError("Mock playback device unavailable")
        return True


class MockSTTService(SpeechToTextService):
    """Speech-to-text service that returns scripted transcripts."""

    def __init__(self, transcripts: Optional[List[ScriptedResponse]] = None):
        super().__init__()
        self.transcripts = list(transcripts or [])
        self.received_audio: List[bytes] = []

    def _recognize(self, audio_bytes: bytes) -> str:
        self.received_audio.append(audio_bytes)
        if not self.transcripts:
            return ""
        transcript = self.transcripts.pop(0)
        if isinstance(transcript, Exception):
            raise transcript
        return transcript


class InMemorySessionStore:
    """Session store that keeps records in a list."""

    def __init__(self):
        self.saved: List[SessionRecord] = []

    def save(self, session_config, transcript, feedback_report, question_count: int,
             user_id: Optional[str] = None, session_id: Optional[str] = None) -> SessionRecord:
        feedback = feedback_report.to_dict()
        record = SessionRecord(
            session_id=session_id or f"mock-{len(self.saved) + 1}",
            job_role=session_config.job_role,
            experience_level=session_config.experience_level.value,
            interview_type=session_config.interview_type.value,
            conversation=[turn.to_dict() for turn in transcript],
            feedback=feedback,
            overall_score=feedback_report.overall_score,
            communication_score=feedback_report.communication_score,
            technical_score=feedback_report.technical_score,
            question_count=question_count,
            user_id=user_id,
        )
        self.saved.append(record)
        return record


class FailingSessionStore(SessionStore):
    """Session store whose writes always fail."""

    def __init__(self, error: Optional[Exception] = None):
        # Don't call super().__init__ to avoid creating a directory
        self.error = error or OSError("Mock disk full")
        self.attempts = 0

    def save(self, *args, **kwargs) -> SessionRecord:
        self.attempts += 1
        raise self.error


def make_session_config(**overrides) -> SessionConfig:
    values = {
        "job_role": "Backend Engineer",
        "experience_level": ExperienceLevel.MID_LEVEL,
        "interview_type": InterviewType.BEHAVIORAL,
        "use_voice": False,
    }
    values.update(overrides)
    return SessionConfig(**values)


def make_questions_response(count: int = 5) -> str:
    """JSON payload a question generator would return."""
    return json.dumps([f"Question {i + 1}?" for i in range(count)])


def make_feedback_response(overall: int = 8, communication: int = 9, technical: int = 6,
                           fenced: bool = False) -> str:
    """JSON payload a feedback scorer would return."""
    payload = json.dumps({
        "overallScore": overall,
        "strengths": ["Clear structure", "Concrete examples", "Calm delivery"],
        "areasForImprovement": ["Quantify impact", "Shorter answers", "Ask questions"],
        "communicationScore": communication,
        "technicalScore": technical,
        "detailedFeedback": "Solid answers with room to show measurable results.",
        "recommendations": ["Use STAR", "Prepare metrics", "Research the team"],
    })
    if fenced:
        return f"```json\n{payload}\n```"
    return payload


def create_test_transcript() -> List[Turn]:
    """Short interview used by feedback tests."""
    return [
        Turn(Speaker.INTERVIEWER, "Welcome! Tell me about a project you are proud of."),
        Turn(Speaker.CANDIDATE, "I led the migration of our billing service to a queue-based design."),
        Turn(Speaker.INTERVIEWER, "Thanks. How did you handle a disagreement within your team?"),
        Turn(Speaker.CANDIDATE, "We ran a short spike on both options and compared the results."),
    ]


def assert_valid_report(report: FeedbackReport) -> None:
    """Assert that a feedback report is well formed, raising AssertionError if not."""
    issues = []
    for name in ("overall_score", "communication_score", "technical_score"):
        score = getattr(report, name)
        if not isinstance(score, int) or not 1 <= score <= 10:
            issues.append(f"{name} out of range: {score!r}")
    if not report.detailed_feedback:
        issues.append("Missing detailed feedback")
    if issues:
        raise AssertionError(f"Invalid feedback report: {'; '.join(issues)}")
