"""
Interview prompt templates and generation.

This module contains all the prompt templates used throughout the interview system,
keeping them separate from the business logic for easier maintenance and editing.
"""

from typing import Dict, List, Any


# The closing turn must contain this sentence; is_closing_statement() looks for it
CLOSING_PHRASE = "That concludes our interview. I will now generate your feedback."

# Fixed first user message that opens every interview
OPENING_MESSAGE = "Hello, I'm ready for the interview."


class InterviewPrompts:
    """Collection of all interview-related prompts."""

    @staticmethod
    def interviewer_context(job_role: str, experience_level: str, interview_type: str) -> str:
        """Shared persona preamble for every interviewer system prompt."""
        return f"""
You are a professional interviewer conducting a {interview_type} interview for a {job_role} position. The candidate has {experience_level} experience.
Be encouraging but professional. Keep responses concise and conversational (2-3 sentences max per turn).
        """.strip()

    @staticmethod
    def question_generation(job_role: str, experience_level: str, interview_type: str, count: int) -> str:
        """Prompt for generating the session's question plan."""
        return f"""
Generate exactly {count} interview questions for a {interview_type} interview for a {job_role} position.
The candidate has {experience_level} experience, so tailor the difficulty accordingly.
Order them from warm-up to most demanding.

Respond ONLY with a JSON array of strings, for example: ["question 1", "question 2"]
No numbering, no explanations, no code fences.
        """.strip()

    @staticmethod
    def opening_system(interviewer_context: str, first_question: str) -> str:
        """System prompt for the interviewer's first line."""
        return f"""
{interviewer_context}

Greet the candidate in one short sentence, then ask this first question exactly as written:
"{first_question}"

Do not add any other commentary.
        """.strip()

    @staticmethod
    def next_question_system(interviewer_context: str, next_question: str) -> str:
        """System prompt for acknowledging an answer and moving on."""
        return f"""
{interviewer_context}

Briefly acknowledge the candidate's last answer in one sentence, then ask the next question exactly as written:
"{next_question}"

Do not evaluate the answer and do not ask anything else.
        """.strip()

    @staticmethod
    def reprompt_system(interviewer_context: str, current_question: str) -> str:
        """System prompt for asking the candidate to answer the same question again."""
        return f"""
{interviewer_context}

The candidate has not yet answered the current question:
"{current_question}"

Politely clarify the question if they asked for clarification, then ask them to answer it.
If they seem reluctant to answer, let them know they can say they want to end the interview at any time.
Do not move on to a different question.
        """.strip()

    @staticmethod
    def end_request_system(interviewer_context: str) -> str:
        """System prompt for closing the interview at the candidate's request."""
        return f"""
{interviewer_context}

The candidate has asked to end the interview now.
Acknowledge their request, thank them for their time, and tell them their feedback is being prepared.
Do not ask any further questions.
        """.strip()

    @staticmethod
    def questions_exhausted_system(interviewer_context: str) -> str:
        """System prompt for closing the interview after the last question."""
        return f"""
{interviewer_context}

The candidate has just answered the final question.
Briefly acknowledge their answer, then end your reply with this sentence exactly as written:
"{CLOSING_PHRASE}"

Do not ask any further questions.
        """.strip()

    @staticmethod
    def intent_check(question: str, utterance: str) -> str:
        """Prompt asking whether an utterance is an attempt to answer the question."""
        return f"""
You are checking a mock interview transcript.

Interview question: "{question}"
Candidate's reply: "{utterance}"

Did the candidate attempt to answer the question (even partially or poorly)?
Answer NO if the reply is a request for clarification, a request to repeat the question, or unrelated to the question.

Respond with exactly one word: YES or NO.
        """.strip()

    @staticmethod
    def feedback(conversation: str, session_details: Dict[str, Any]) -> str:
        """Prompt for the final scored feedback report."""
        details = "\n".join(f"- {key}: {value}" for key, value in session_details.items())
        return f"""
You are an expert interview coach. Review this job interview conversation and provide detailed feedback.

Interview details:
{details}

Interview Conversation:
{conversation}

Provide feedback in the following JSON format (respond ONLY with valid JSON, no other text):
{{
  "overallScore": <number 1-10>,
  "strengths": ["strength1", "strength2", "strength3"],
  "areasForImprovement": ["area1", "area2", "area3"],
  "communicationScore": <number 1-10>,
  "technicalScore": <number 1-10>,
  "detailedFeedback": "A paragraph of specific, actionable feedback",
  "recommendations": ["recommendation1", "recommendation2", "recommendation3"]
}}

Be encouraging but honest. Focus on specific examples from the conversation.
        """.strip()

    @staticmethod
    def fallback_messages() -> Dict[str, Any]:
        """Fallback content for when LLM output cannot be used."""
        return {
            "questions": [
                "Tell me about yourself and your background.",
                "What interests you most about this role?",
                "Describe a challenging situation you faced at work and how you handled it.",
                "What are your greatest strengths, and how have they helped you succeed?",
                "Where do you see yourself in five years?",
            ],
            "feedback": {
                "overallScore": 7,
                "strengths": [
                    "Good communication",
                    "Professional demeanor",
                    "Clear responses",
                ],
                "areasForImprovement": [
                    "Provide more specific examples",
                    "Ask clarifying questions",
                    "Show more enthusiasm",
                ],
                "communicationScore": 7,
                "technicalScore": 7,
                "detailedFeedback": "You did well overall. Continue practicing to improve your interview skills.",
                "recommendations": [
                    "Practice STAR method",
                    "Research the company",
                    "Prepare questions to ask",
                ],
            },
        }


class PromptFormatter:
    """Helper class for formatting conversation material into prompts."""

    @staticmethod
    def format_dialogue(labeled_turns: List[Dict[str, str]]) -> str:
        """Render turns as 'Label: text' paragraphs separated by blank lines."""
        return "\n\n".join(f"{turn['label']}: {turn['text']}" for turn in labeled_turns)
