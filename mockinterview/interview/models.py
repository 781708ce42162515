"""
Data models for the interview system.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class ExperienceLevel(str, Enum):
    """Candidate seniority the questions are tailored to."""
    ENTRY_LEVEL = "entry-level"
    MID_LEVEL = "mid-level"
    SENIOR = "senior"
    LEAD = "lead"

    @classmethod
    def from_value(cls, value: str) -> "ExperienceLevel":
        return _enum_from_value(cls, value)


class InterviewType(str, Enum):
    """Kind of interview being rehearsed."""
    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    HR_SCREENING = "hr-screening"
    CASE_STUDY = "case-study"

    @classmethod
    def from_value(cls, value: str) -> "InterviewType":
        return _enum_from_value(cls, value)


def _enum_from_value(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    normalized = str(value).strip().lower().replace(" ", "-").replace("_", "-")
    for member in enum_cls:
        if member.value == normalized:
            return member
    choices = ", ".join(member.value for member in enum_cls)
    raise ValueError(f"Unknown {enum_cls.__name__} '{value}' (expected one of: {choices})")


class Speaker(str, Enum):
    """Who produced a transcript turn."""
    CANDIDATE = "candidate"
    INTERVIEWER = "interviewer"


@dataclass(frozen=True)
class SessionConfig:
    """Setup choices for one interview session. Read-only once the session starts."""
    job_role: str
    experience_level: ExperienceLevel = ExperienceLevel.MID_LEVEL
    interview_type: InterviewType = InterviewType.BEHAVIORAL
    use_voice: bool = False

    def __post_init__(self):
        if not self.job_role or not self.job_role.strip():
            raise ValueError("job_role must not be blank")
        # Accept plain strings from forms and the command line
        object.__setattr__(self, "experience_level", ExperienceLevel.from_value(self.experience_level))
        object.__setattr__(self, "interview_type", InterviewType.from_value(self.interview_type))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jobRole": self.job_role,
            "experienceLevel": self.experience_level.value,
            "interviewType": self.interview_type.value,
            "useVoice": self.use_voice,
        }


@dataclass(frozen=True)
class Turn:
    """Represents a single conversation turn."""
    speaker: Speaker
    text: str

    def to_message(self) -> Dict[str, str]:
        """Chat-completion message for this turn."""
        role = "assistant" if self.speaker == Speaker.INTERVIEWER else "user"
        return {"role": role, "content": self.text}

    def to_dict(self) -> Dict[str, str]:
        return {"speaker": self.speaker.value, "text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "Turn":
        return cls(speaker=Speaker(data["speaker"]), text=data["text"])


Transcript = Tuple[Turn, ...]


@dataclass(frozen=True)
class FeedbackReport:
    """Final scored feedback for a session."""
    overall_score: int
    communication_score: int
    technical_score: int
    strengths: Tuple[str, ...] = field(default_factory=tuple)
    areas_for_improvement: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
    detailed_feedback: str = ""
    # True when the scorer's reply could not be used and defaults were substituted
    degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Persistence payload shape."""
        return {
            "overallScore": self.overall_score,
            "communicationScore": self.communication_score,
            "technicalScore": self.technical_score,
            "strengths": list(self.strengths),
            "areasForImprovement": list(self.areas_for_improvement),
            "recommendations": list(self.recommendations),
            "detailedFeedback": self.detailed_feedback,
            "degraded": self.degraded,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedbackReport":
        return cls(
            overall_score=int(data["overallScore"]),
            communication_score=int(data["communicationScore"]),
            technical_score=int(data["technicalScore"]),
            strengths=tuple(data.get("strengths", [])),
            areas_for_improvement=tuple(data.get("areasForImprovement", [])),
            recommendations=tuple(data.get("recommendations", [])),
            detailed_feedback=data.get("detailedFeedback", ""),
            degraded=bool(data.get("degraded", False)),
        )
