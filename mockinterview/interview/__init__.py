"""Interview system components.

This module contains the business logic for running mock interviews:
question planning, turn classification, the interview state machine,
turn sequencing and feedback synthesis.
"""

# State machine and turn sequencing
from .orchestrator import InterviewOrchestrator, ChatRequest, PendingTurn, is_closing_statement
from .sequencer import TurnSequencer

# Data models
from .models import (
    ExperienceLevel, InterviewType, Speaker, SessionConfig,
    Turn, Transcript, FeedbackReport
)

# Structured schemas and state management
from .schemas import (
    QuestionPlan, InterviewSession, OrchestratorState, TurnIntent, EndReason,
    InterviewError, InvalidTransitionError, TurnInProgressError, TranscriptionError,
    advance, is_exhausted, current, parse_question_list, parse_feedback_report
)

# Decision engine and feedback
from .decision_engine import IntentClassifier, QuestionPlanner, PromptEngine
from .analysis import FeedbackSynthesizer, fallback_report

# Service classes
from .services import TTSService, SpeechToTextService

# Event system
from .events import (
    InterviewEventBus, EventLogger, InterviewMetrics,
    EventType, InterviewEvent, InterviewStartedEvent,
    QuestionsGeneratedEvent, IntentClassifiedEvent, TurnCompletedEvent,
    InterviewConcludedEvent, FeedbackGeneratedEvent, SessionSavedEvent,
    ErrorOccurredEvent
)

__all__ = [
    # Orchestration
    "InterviewOrchestrator", "ChatRequest", "PendingTurn", "is_closing_statement",
    "TurnSequencer",

    # Data models
    "ExperienceLevel", "InterviewType", "Speaker", "SessionConfig",
    "Turn", "Transcript", "FeedbackReport",

    # Schemas and state
    "QuestionPlan", "InterviewSession", "OrchestratorState", "TurnIntent", "EndReason",
    "InterviewError", "InvalidTransitionError", "TurnInProgressError", "TranscriptionError",
    "advance", "is_exhausted", "current", "parse_question_list", "parse_feedback_report",

    # Decision engine and feedback
    "IntentClassifier", "QuestionPlanner", "PromptEngine",
    "FeedbackSynthesizer", "fallback_report",

    # Services
    "TTSService", "SpeechToTextService",

    # Events
    "InterviewEventBus", "EventLogger", "InterviewMetrics",
    "EventType", "InterviewEvent", "InterviewStartedEvent",
    "QuestionsGeneratedEvent", "IntentClassifiedEvent", "TurnCompletedEvent",
    "InterviewConcludedEvent", "FeedbackGeneratedEvent", "SessionSavedEvent",
    "ErrorOccurredEvent",
]
