"""
Event-driven architecture for the interview system.
"""
import logging
from abc import ABC
from typing import Dict, Any, List, Callable, Optional
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("events")


class EventType(str, Enum):
    """Types of interview events."""
    INTERVIEW_STARTED = "interview_started"
    QUESTIONS_GENERATED = "questions_generated"
    INTENT_CLASSIFIED = "intent_classified"
    TURN_COMPLETED = "turn_completed"
    INTERVIEW_CONCLUDED = "interview_concluded"
    FEEDBACK_GENERATED = "feedback_generated"
    SESSION_SAVED = "session_saved"
    ERROR_OCCURRED = "error_occurred"


@dataclass
class InterviewEvent(ABC):
    """Base class for all interview events."""
    event_type: EventType
    session_id: str
    timestamp: float
    data: Dict[str, Any]


@dataclass
class InterviewStartedEvent(InterviewEvent):
    """Event fired when the opening question has been asked."""
    def __init__(self, session_id: str, timestamp: float, job_role: str,
                 interview_type: str, question_count: int):
        super().__init__(
            event_type=EventType.INTERVIEW_STARTED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "job_role": job_role,
                "interview_type": interview_type,
                "question_count": question_count
            }
        )


@dataclass
class QuestionsGeneratedEvent(InterviewEvent):
    """Event fired when the question plan is ready."""
    def __init__(self, session_id: str, timestamp: float, questions: List[str]):
        super().__init__(
            event_type=EventType.QUESTIONS_GENERATED,
            session_id=session_id,
            timestamp=timestamp,
            data={"questions": list(questions), "count": len(questions)}
        )


@dataclass
class IntentClassifiedEvent(InterviewEvent):
    """Event fired when a candidate utterance has been classified."""
    def __init__(self, session_id: str, timestamp: float, intent: str,
                 question_index: int, utterance: str):
        super().__init__(
            event_type=EventType.INTENT_CLASSIFIED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "intent": intent,
                "question_index": question_index,
                "utterance": utterance
            }
        )


@dataclass
class TurnCompletedEvent(InterviewEvent):
    """Event fired when the interviewer's reply has been appended."""
    def __init__(self, session_id: str, timestamp: float, transcript_length: int,
                 question_index: int, interviewer_text: str, state: str):
        super().__init__(
            event_type=EventType.TURN_COMPLETED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "transcript_length": transcript_length,
                "question_index": question_index,
                "interviewer_text": interviewer_text,
                "state": state
            }
        )


@dataclass
class InterviewConcludedEvent(InterviewEvent):
    """Event fired when a session reaches feedback-ready."""
    def __init__(self, session_id: str, timestamp: float, end_reason: Optional[str],
                 question_count: int, turn_count: int):
        super().__init__(
            event_type=EventType.INTERVIEW_CONCLUDED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "end_reason": end_reason,
                "question_count": question_count,
                "turn_count": turn_count
            }
        )


@dataclass
class FeedbackGeneratedEvent(InterviewEvent):
    """Event fired when the feedback report is computed."""
    def __init__(self, session_id: str, timestamp: float, overall_score: int, degraded: bool):
        super().__init__(
            event_type=EventType.FEEDBACK_GENERATED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "overall_score": overall_score,
                "degraded": degraded
            }
        )


@dataclass
class SessionSavedEvent(InterviewEvent):
    """Event fired after a persistence attempt."""
    def __init__(self, session_id: str, timestamp: float, success: bool,
                 error_message: Optional[str] = None):
        super().__init__(
            event_type=EventType.SESSION_SAVED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "success": success,
                "error_message": error_message
            }
        )


@dataclass
class ErrorOccurredEvent(InterviewEvent):
    """Event fired when an error occurs."""
    def __init__(self, session_id: str, timestamp: float, error_type: str,
                 error_message: str, component: str):
        super().__init__(
            event_type=EventType.ERROR_OCCURRED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "error_type": error_type,
                "error_message": error_message,
                "component": component
            }
        )


EventHandler = Callable[[InterviewEvent], None]


class InterviewEventBus:
    """Event bus for interview system communication."""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to specific event type.

        Args:
            event_type: Type of event to listen for
            handler: Function to call when event occurs
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to {event_type}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self._global_handlers.append(handler)
        logger.debug("Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from specific event type."""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Unsubscribed handler from {event_type}")
            except ValueError:
                logger.warning(f"Handler not found for {event_type}")

    def emit(self, event: InterviewEvent) -> None:
        """
        Emit an event to all subscribers.
        Handler errors are logged and never reach the emitter.
        """
        logger.debug(f"Emitting event: {event.event_type} for session {event.session_id}")

        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.event_type}: {e}")

        for handler in self._global_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in global event handler: {e}")

    def clear_handlers(self) -> None:
        """Clear all event handlers."""
        self._handlers.clear()
        self._global_handlers.clear()
        logger.debug("Cleared all event handlers")


class EventLogger:
    """Logs all events for debugging and analysis."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("event_logger")
        self.logger.setLevel(log_level)

    def handle_event(self, event: InterviewEvent) -> None:
        """Log event details."""
        self.logger.info(f"Event: {event.event_type.value} | Session: {event.session_id} | Data: {event.data}")


class InterviewMetrics:
    """Collects metrics from interview events."""

    def __init__(self):
        self.reset()

    def handle_event(self, event: InterviewEvent) -> None:
        """Update metrics based on event."""
        if event.event_type == EventType.INTERVIEW_STARTED:
            self.interviews_started += 1
        elif event.event_type == EventType.INTERVIEW_CONCLUDED:
            self.interviews_concluded += 1
        elif event.event_type == EventType.TURN_COMPLETED:
            self.total_turns += 1
        elif event.event_type == EventType.INTENT_CLASSIFIED:
            intent = event.data.get("intent")
            if intent == "retry":
                self.retries += 1
            elif intent == "skip":
                self.skips += 1
            elif intent == "end-now":
                self.end_requests += 1
        elif event.event_type == EventType.FEEDBACK_GENERATED:
            if event.data.get("degraded"):
                self.degraded_feedback += 1
        elif event.event_type == EventType.SESSION_SAVED:
            if not event.data.get("success"):
                self.failed_saves += 1
        elif event.event_type == EventType.ERROR_OCCURRED:
            self.errors_occurred += 1

    def get_metrics(self) -> Dict[str, int]:
        """Get current metrics snapshot."""
        return {
            "interviews_started": self.interviews_started,
            "interviews_concluded": self.interviews_concluded,
            "total_turns": self.total_turns,
            "retries": self.retries,
            "skips": self.skips,
            "end_requests": self.end_requests,
            "degraded_feedback": self.degraded_feedback,
            "failed_saves": self.failed_saves,
            "errors_occurred": self.errors_occurred
        }

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self.interviews_started = 0
        self.interviews_concluded = 0
        self.total_turns = 0
        self.retries = 0
        self.skips = 0
        self.end_requests = 0
        self.degraded_feedback = 0
        self.failed_saves = 0
        self.errors_occurred = 0
