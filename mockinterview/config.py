"""
Mock Interview Configuration
============================

This file contains ALL configuration for the mock interview system.
- User settings at the top (things users might want to change)
- Internal constants at the bottom (technical defaults)
"""
import os
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# USER SETTINGS - Edit these to customize the interviewer
# =============================================================================

# REQUIRED: Set your Google Cloud project
GOOGLE_CLOUD_PROJECT = "your-project-id"  # Change this!
GOOGLE_APPLICATION_CREDENTIALS = None  # Optional: path to credentials JSON

# Interview settings
QUESTION_COUNT = 5
HISTORY_WINDOW = 4
DEFAULT_JOB_ROLE = "Software Engineer"
DEFAULT_EXPERIENCE_LEVEL = "mid-level"
DEFAULT_INTERVIEW_TYPE = "behavioral"

# Speech settings
ENABLE_TTS = False
TTS_VOICE = "en-US-Neural2-F"
LANGUAGE_CODE = "en-US"

# Persistence
SESSIONS_DIR = "./_sessions"

# Logging
LOG_FILE = "./_sessions/interview.log"
LOG_LEVEL = "INFO"


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

# LLM
VERTEX_LOCATION = "us-central1"
MODEL_NAME = "gemini-2.5-flash-lite"
LLM_TIMEOUT = 60
MAX_OUTPUT_TOKENS = 512

# Token budgets per call kind
REPLY_MAX_TOKENS = 300
CLASSIFIER_MAX_TOKENS = 5
QUESTION_PLAN_MAX_TOKENS = MAX_OUTPUT_TOKENS
FEEDBACK_MAX_TOKENS = 1500

# Sampling temperatures per call kind
REPLY_TEMPERATURE = 0.7
CLASSIFIER_TEMPERATURE = 0.0
QUESTION_PLAN_TEMPERATURE = 0.7
FEEDBACK_TEMPERATURE = 0.2

# Speech-to-text
STT_SAMPLE_RATE = 16000
STT_ENCODING = "LINEAR16"

# Text-to-speech
TTS_SAMPLE_RATE = 16000
PLAYBACK_COMMAND = ("aplay", "-q")


# =============================================================================
# MAIN CONFIG OBJECT
# =============================================================================

@dataclass
class Config:
    """Main configuration object."""
    google_cloud_project: str
    google_application_credentials: Optional[str] = None
    vertex_location: str = VERTEX_LOCATION
    model_name: str = MODEL_NAME
    llm_timeout: int = LLM_TIMEOUT
    question_count: int = QUESTION_COUNT
    history_window: int = HISTORY_WINDOW
    enable_tts: bool = ENABLE_TTS
    tts_voice: str = TTS_VOICE
    language_code: str = LANGUAGE_CODE
    stt_sample_rate: int = STT_SAMPLE_RATE
    stt_encoding: str = STT_ENCODING
    sessions_dir: str = SESSIONS_DIR
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL


def get_config() -> Config:
    """Load configuration, letting environment variables override the settings above."""
    project = os.getenv("GOOGLE_CLOUD_PROJECT") or GOOGLE_CLOUD_PROJECT
    credentials = os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or GOOGLE_APPLICATION_CREDENTIALS

    if project == "your-project-id":
        raise ValueError("Please set GOOGLE_CLOUD_PROJECT in config.py or as environment variable")

    return Config(
        google_cloud_project=project,
        google_application_credentials=credentials,
        model_name=os.getenv("MOCKINTERVIEW_MODEL") or MODEL_NAME,
        sessions_dir=os.getenv("MOCKINTERVIEW_SESSIONS_DIR") or SESSIONS_DIR,
        log_file=os.getenv("MOCKINTERVIEW_LOG_FILE") or LOG_FILE,
        log_level=(os.getenv("MOCKINTERVIEW_LOG_LEVEL") or LOG_LEVEL).upper(),
    )
