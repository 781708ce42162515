"""
Speech-to-text functionality using Google Cloud Speech.
"""
import logging

from google.cloud import speech
from ...config import LANGUAGE_CODE, STT_SAMPLE_RATE, STT_ENCODING

logger = logging.getLogger("speech_stt")


def recognize_google_sync(audio_bytes: bytes,
                          sr_hz: int = STT_SAMPLE_RATE,
                          language: str = LANGUAGE_CODE,
                          encoding: str = STT_ENCODING) -> str:
    """
    Synchronous Google Cloud Speech-to-Text recognition.
    Returns transcribed text, or an empty string if no speech was detected.

    Raises:
        google.api_core.exceptions.GoogleAPIError: If the recognition request fails
    """
    client = speech.SpeechClient()
    audio = speech.RecognitionAudio(content=audio_bytes)
    config = speech.RecognitionConfig(
        encoding=getattr(speech.RecognitionConfig.AudioEncoding, encoding),
        sample_rate_hertz=sr_hz,
        language_code=language,
        enable_automatic_punctuation=True,
    )

    resp = client.recognize(config=config, audio=audio)
    texts = [r.alternatives[0].transcript for r in resp.results if r.alternatives]
    transcript = " ".join(texts).strip()
    logger.info(f"Speech recognition result: {transcript or '(empty)'}")
    return transcript
