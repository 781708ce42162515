"""Speech-to-text and text-to-speech modules."""

from .tts import synthesize_speech, play_audio
from .stt import recognize_google_sync

__all__ = ["synthesize_speech", "play_audio", "recognize_google_sync"]
