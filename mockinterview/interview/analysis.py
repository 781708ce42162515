"""
Feedback synthesis for finished interviews.
Turns the full transcript into a scored FeedbackReport.
"""
import logging
from typing import Dict, List

from .models import FeedbackReport, SessionConfig, Speaker, Transcript
from .schemas import parse_feedback_report
from .prompts import InterviewPrompts, PromptFormatter
from ..config import FEEDBACK_MAX_TOKENS, FEEDBACK_TEMPERATURE

logger = logging.getLogger("interview_analysis")

SPEAKER_LABELS = {
    Speaker.INTERVIEWER: "Interviewer",
    Speaker.CANDIDATE: "Candidate",
}


def format_transcript(transcript: Transcript) -> str:
    """Render a transcript as a labeled dialogue."""
    labeled_turns: List[Dict[str, str]] = [
        {"label": SPEAKER_LABELS[turn.speaker], "text": turn.text}
        for turn in transcript
    ]
    return PromptFormatter.format_dialogue(labeled_turns)


def fallback_report() -> FeedbackReport:
    """Fixed report used whenever the scorer's reply cannot be used."""
    defaults = InterviewPrompts.fallback_messages()["feedback"]
    return FeedbackReport(
        overall_score=defaults["overallScore"],
        communication_score=defaults["communicationScore"],
        technical_score=defaults["technicalScore"],
        strengths=tuple(defaults["strengths"]),
        areas_for_improvement=tuple(defaults["areasForImprovement"]),
        recommendations=tuple(defaults["recommendations"]),
        detailed_feedback=defaults["detailedFeedback"],
        degraded=True,
    )


class FeedbackSynthesizer:
    """Scores a finished interview through the completion collaborator."""

    def __init__(self, llm_client):
        self.llm_client = llm_client

    def synthesize(self, session_config: SessionConfig, transcript: Transcript) -> FeedbackReport:
        """
        Request a structured feedback report for the transcript.

        Args:
            session_config: Setup of the interview being scored
            transcript: Full chronological transcript

        Returns:
            Parsed FeedbackReport, or the fallback report (degraded=True) on any failure
        """
        session_details = {
            "Job role": session_config.job_role,
            "Experience level": session_config.experience_level.value,
            "Interview type": session_config.interview_type.value,
        }
        prompt = InterviewPrompts.feedback(format_transcript(transcript), session_details)

        try:
            raw_response = self.llm_client.complete(
                [{"role": "user", "content": prompt}],
                max_tokens=FEEDBACK_MAX_TOKENS,
                temperature=FEEDBACK_TEMPERATURE,
            )
            report = parse_feedback_report(raw_response)
        except Exception as e:
            logger.error(f"Feedback generation failed: {e}, using fallback report")
            return fallback_report()

        logger.info(
            f"Feedback generated: overall={report.overall_score} "
            f"communication={report.communication_score} technical={report.technical_score}"
        )
        return report
