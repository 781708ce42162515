"""Infrastructure components for the mock interview system.

This module contains the adapters for the external collaborators the
interview core depends on: text completion, speech, and persistence.
"""

# Speech infrastructure
from .speech import synthesize_speech, play_audio, recognize_google_sync

# LLM infrastructure
from .llm import LLMClientError, VertexRestClient

# Persistence
from .data import SessionRecord, SessionStore

__all__ = [
    # Speech services
    "synthesize_speech", "play_audio", "recognize_google_sync",

    # LLM client
    "LLMClientError", "VertexRestClient",

    # Persistence
    "SessionRecord", "SessionStore",
]
