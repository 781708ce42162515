"""
Text-to-speech functionality using Google Cloud TTS.
"""
import os
import subprocess
import tempfile
import logging
from typing import Sequence

from ...config import TTS_VOICE, LANGUAGE_CODE, TTS_SAMPLE_RATE, PLAYBACK_COMMAND

logger = logging.getLogger("speech_tts")


def synthesize_speech(text: str,
                      voice: str = TTS_VOICE,
                      language_code: str = LANGUAGE_CODE,
                      sample_rate: int = TTS_SAMPLE_RATE) -> bytes:
    """
    Synthesize text with Google Cloud Text-to-Speech.

    Returns:
        WAV (LINEAR16) audio bytes, empty for blank text
    """
    if not text.strip():
        return b""

    from google.cloud import texttospeech

    client = texttospeech.TextToSpeechClient()
    synthesis_input = texttospeech.SynthesisInput(text=text)
    voice_params = texttospeech.VoiceSelectionParams(
        language_code=language_code,
        name=voice
    )
    audio_config = texttospeech.AudioConfig(
        audio_encoding=texttospeech.AudioEncoding.LINEAR16,
        sample_rate_hertz=sample_rate
    )

    response = client.synthesize_speech(
        input=synthesis_input, voice=voice_params, audio_config=audio_config
    )
    logger.debug(f"Synthesized {len(response.audio_content)} bytes with voice {voice}")
    return response.audio_content


def play_audio(wav_bytes: bytes, command: Sequence[str] = PLAYBACK_COMMAND) -> None:
    """
    Play WAV bytes through the system player and wait until playback finishes.

    Raises:
        OSError: If the player cannot be started
        subprocess.CalledProcessError: If the player exits with an error
    """
    if not wav_bytes:
        return

    with tempfile.NamedTemporaryFile(suffix='.wav', delete=False) as tmp_file:
        wav_path = tmp_file.name
        tmp_file.write(wav_bytes)

    try:
        subprocess.run([*command, wav_path], capture_output=True, check=True)
    finally:
        try:
            os.unlink(wav_path)
        except OSError:
            logger.debug(f"Could not remove temporary audio file {wav_path}")
