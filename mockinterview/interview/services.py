"""
Service classes for the interview system's audio edges.
"""
import logging

from .schemas import TranscriptionError
from ..infrastructure.speech import synthesize_speech, play_audio, recognize_google_sync
from ..config import TTS_VOICE, LANGUAGE_CODE, STT_SAMPLE_RATE, STT_ENCODING

logger = logging.getLogger("services")


class TTSService:
    """Speaks interviewer lines. Failures never interrupt the conversation."""

    def __init__(self,
                 use_tts: bool = True,
                 voice: str = TTS_VOICE,
                 language_code: str = LANGUAGE_CODE):
        self.use_tts = use_tts
        self.voice = voice
        self.language_code = language_code

    def speak(self, text: str) -> bool:
        """
        Synthesize and play a line of interviewer speech.

        Returns:
            True if the line was played, False if TTS is off or playback failed
        """
        if not self.use_tts or not text.strip():
            return False

        try:
            audio = synthesize_speech(text, voice=self.voice, language_code=self.language_code)
            play_audio(audio)
        except Exception as e:
            logger.warning(f"TTS playback failed: {e}")
            return False
        return True


class SpeechToTextService:
    """Transcribes recorded candidate answers."""

    def __init__(self,
                 sample_rate: int = STT_SAMPLE_RATE,
                 language_code: str = LANGUAGE_CODE,
                 encoding: str = STT_ENCODING):
        self.sample_rate = sample_rate
        self.language_code = language_code
        self.encoding = encoding

    def transcribe(self, audio_bytes: bytes) -> str:
        """
        Turn recorded audio into text.

        Raises:
            TranscriptionError: If recognition fails or hears nothing
        """
        try:
            text = self._recognize(audio_bytes)
        except Exception as e:
            logger.error(f"Speech recognition failed: {e}")
            raise TranscriptionError(f"Speech recognition failed: {e}") from e

        text = (text or "").strip()
        logger.info(f"Speech recognition result: {text or '(empty)'}")
        if not text:
            raise TranscriptionError("No speech detected in the recording")
        return text

    def _recognize(self, audio_bytes: bytes) -> str:
        return recognize_google_sync(
            audio_bytes,
            sr_hz=self.sample_rate,
            language=self.language_code,
            encoding=self.encoding,
        )
