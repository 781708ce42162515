"""
Interview decision engine: question planning, turn intent classification and prompt building.
"""
import re
import logging
from typing import List, Optional

from .models import SessionConfig
from .schemas import QuestionPlan, TurnIntent, parse_question_list
from .prompts import InterviewPrompts
from ..config import (
    QUESTION_COUNT, CLASSIFIER_MAX_TOKENS, CLASSIFIER_TEMPERATURE,
    QUESTION_PLAN_MAX_TOKENS, QUESTION_PLAN_TEMPERATURE
)

logger = logging.getLogger("decision_engine")


# An end or skip request must make up the whole utterance, give or take fillers and
# a polite lead-in or tail. Answers that merely mention these phrases go to the LLM check.
_FILLER = (
    r"(?:(?:ok(?:ay)?|alright|right|well|so|sorry|actually|honestly|yeah|yes|no"
    r"|um+|uh+|hmm+|thanks|thank\s+you)\b\W*)*"
)
_LEAD_IN = (
    r"(?:(?:can|could|may)\s+(?:we|i|you)\s+"
    r"|(?:i'?d|i\s+would)\s+(?:like|prefer|rather)\s+(?:to\s+)?"
    r"|i\s+(?:want|need|wish)\s+to\s+"
    r"|i\s+think\s+"
    r"|let'?s\s+|let\s+us\s+"
    r"|please\s+|just\s+"
    r"|i'?ll\s+|i\s+will\s+)*"
)
_TAIL = (
    r"(?:\W+(?:now|please|here|early|today|then|thanks|thank\s+you|for\s+now"
    r"|if\s+possible|if\s+that'?s\s+(?:ok(?:ay)?|alright|fine)))*\W*"
)


def _whole_request(phrases: str):
    return re.compile(rf"\W*{_FILLER}{_LEAD_IN}(?:{phrases}){_TAIL}", re.IGNORECASE)


# Requests to stop the interview altogether. Checked before anything else.
END_NOW_PATTERN = _whole_request(
    r"(?:end|stop|finish|wrap\s+up|wrap\s+it\s+up|terminate|quit|conclude)"
    r"(?:\s+(?:(?:the|this|our|my)\s+)?(?:interview|session)|\s+it|\s+here)?"
    r"|(?:skip|go|jump|move)\s+(?:straight\s+|right\s+)?(?:on\s+)?to\s+(?:the\s+|my\s+)?feedback"
    r"|(?:get|see|have|hear)\s+(?:my\s+|the\s+|some\s+)?feedback"
    r"|(?:give|show)\s+me\s+(?:my\s+|the\s+|some\s+)?feedback"
    r"|(?:my\s+)?feedback"
    r"|i\s*'?\s*a?m\s+done|i\s+quit"
    r"|that\s*'?\s*i?s\s+enough|enough"
    r"|no\s+more\s+questions"
    r"|i\s+(?:don'?t|do\s+not)\s+want\s+to\s+(?:answer|continue)"
    r"(?:\s+(?:this|that|it|any\s*more|the\s+question|these\s+questions|questions?))*"
)

# Explicit requests to move past the current question
SKIP_PATTERN = _whole_request(
    r"skip(?:\s+(?:(?:this|that|the)\s+)?(?:question|one)|\s+(?:this|that|it))?"
    r"|(?:(?:go\s+to|ask\s+(?:me\s+)?)\s+)?(?:the\s+)?next\s+(?:question|one)"
    r"|move\s+on(?:\s+to\s+the\s+next(?:\s+(?:question|one))?)?"
    r"|pass(?:\s+on\s+(?:this|that|it)(?:\s+one)?)?"
)


def _normalize(utterance: str) -> str:
    return utterance.strip().replace("’", "'")


def is_end_request(utterance: str) -> bool:
    return bool(END_NOW_PATTERN.fullmatch(_normalize(utterance)))


def is_skip_request(utterance: str) -> bool:
    return bool(SKIP_PATTERN.fullmatch(_normalize(utterance)))


def parse_verdict(raw_response: str) -> bool:
    """
    Read a YES/NO verdict. Returns True for YES.

    A leading YES or NO token decides; otherwise any YES substring counts as YES.
    """
    text = raw_response.strip().upper()
    first_token = re.match(r"[A-Z]+", text)
    if first_token:
        if first_token.group(0) == "YES":
            return True
        if first_token.group(0) == "NO":
            return False
    return "YES" in text


class PromptEngine:
    """Builds the per-turn system prompts for one session configuration."""

    def __init__(self, session_config: SessionConfig):
        self.session_config = session_config

    def _interviewer_context(self) -> str:
        config = self.session_config
        return InterviewPrompts.interviewer_context(
            job_role=config.job_role,
            experience_level=config.experience_level.value,
            interview_type=config.interview_type.value,
        )

    def build_opening_prompt(self, first_question: str) -> str:
        return InterviewPrompts.opening_system(self._interviewer_context(), first_question)

    def build_next_question_prompt(self, next_question: str) -> str:
        return InterviewPrompts.next_question_system(self._interviewer_context(), next_question)

    def build_reprompt_prompt(self, current_question: str) -> str:
        return InterviewPrompts.reprompt_system(self._interviewer_context(), current_question)

    def build_end_request_prompt(self) -> str:
        return InterviewPrompts.end_request_system(self._interviewer_context())

    def build_questions_exhausted_prompt(self) -> str:
        return InterviewPrompts.questions_exhausted_system(self._interviewer_context())


class IntentClassifier:
    """Decides whether a candidate utterance advances, retries, skips or ends the interview."""

    def __init__(self, llm_client):
        self.llm_client = llm_client

    def classify(self, question: Optional[str], utterance: str) -> TurnIntent:
        """
        Classify a candidate utterance against the current question.

        Args:
            question: The question currently being asked
            utterance: The candidate's raw reply

        Returns:
            TurnIntent for this turn

        Raises:
            Exception: Any failure from the completion client is propagated unchanged
        """
        if is_end_request(utterance):
            logger.info(f"End-of-interview request detected: {utterance!r}")
            return TurnIntent.END_NOW

        if is_skip_request(utterance):
            logger.info(f"Skip request detected: {utterance!r}")
            return TurnIntent.SKIP

        prompt = InterviewPrompts.intent_check(question or "", utterance)
        raw_response = self.llm_client.complete(
            [{"role": "user", "content": prompt}],
            max_tokens=CLASSIFIER_MAX_TOKENS,
            temperature=CLASSIFIER_TEMPERATURE,
        )
        logger.info(f"Raw intent verdict: {raw_response!r}")

        return TurnIntent.ADVANCE if parse_verdict(raw_response) else TurnIntent.RETRY


class QuestionPlanner:
    """Generates the ordered question set for a session."""

    def __init__(self, llm_client, question_count: int = QUESTION_COUNT):
        self.llm_client = llm_client
        self.question_count = question_count

    def generate(self, session_config: SessionConfig) -> QuestionPlan:
        """
        Build a question plan tailored to the session.
        Any unusable response is replaced by the built-in question list.
        """
        prompt = InterviewPrompts.question_generation(
            job_role=session_config.job_role,
            experience_level=session_config.experience_level.value,
            interview_type=session_config.interview_type.value,
            count=self.question_count,
        )

        try:
            raw_response = self.llm_client.complete(
                [{"role": "user", "content": prompt}],
                max_tokens=QUESTION_PLAN_MAX_TOKENS,
                temperature=QUESTION_PLAN_TEMPERATURE,
            )
            questions = parse_question_list(raw_response)
            logger.info(f"Generated {len(questions)} questions for {session_config.job_role}")
        except Exception as e:
            logger.warning(f"Question generation failed: {e}, using fallback questions")
            questions = self.fallback_questions()

        return QuestionPlan(questions=tuple(questions))

    @staticmethod
    def fallback_questions() -> List[str]:
        return list(InterviewPrompts.fallback_messages()["questions"])
