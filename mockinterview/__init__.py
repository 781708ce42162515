"""
mockinterview: LLM-driven mock job interviews with spoken or typed answers.

Generates a question plan for the target role, runs the interview turn by
turn, and finishes with a scored feedback report.
"""

__version__ = "1.0.0"

# Main entry points
from .interview.sequencer import TurnSequencer
from .interview.orchestrator import InterviewOrchestrator
from .interview.models import SessionConfig, Turn, FeedbackReport

__all__ = ["TurnSequencer", "InterviewOrchestrator", "SessionConfig", "Turn", "FeedbackReport"]
