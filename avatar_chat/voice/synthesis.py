"""
Voice Synthesis - Turns reply text into base64 audio for the chat client.
Supports OpenAI TTS and Google Cloud Text-to-Speech.
"""

import asyncio
import base64
import os
from abc import ABC, abstractmethod
from typing import Optional

import openai

# Optional cloud TTS imports
try:
    from google.cloud import texttospeech
except ImportError:
    texttospeech = None

from ..core.config import AIConfig, VoiceConfig
from ..core.errors import SynthesisFailure
from ..utils.logger import get_logger

logger = get_logger(__name__)

class SpeechSynthesizer(ABC):
    """Best-effort text-to-speech; failures never reach the caller."""

    engine: str = "tts"

    def __init__(self, timeout_s: float):
        self.timeout_s = timeout_s

    @abstractmethod
    async def _synthesize_bytes(self, text: str) -> bytes:
        """Return encoded audio for ``text``; raise on failure."""

    async def synthesize(self, text: str) -> Optional[str]:
        """Synthesize ``text`` and return base64 audio, or None if unavailable."""
        if not text.strip():
            return None

        try:
            audio = await self._synthesize_with_timeout(text)
        except SynthesisFailure as e:
            logger.warning(f"{self.engine} TTS unavailable for this reply: {e}")
            return None

        return base64.b64encode(audio).decode("ascii")

    async def _synthesize_with_timeout(self, text: str) -> bytes:
        try:
            audio = await asyncio.wait_for(self._synthesize_bytes(text), timeout=self.timeout_s)
        except asyncio.TimeoutError as e:
            raise SynthesisFailure(f"timed out after {self.timeout_s}s") from e
        except Exception as e:
            raise SynthesisFailure(str(e)) from e

        if not audio:
            raise SynthesisFailure("empty audio payload")
        return audio

class OpenAISpeechSynthesizer(SpeechSynthesizer):
    """Synthesize speech using OpenAI."""

    engine = "openai"

    def __init__(self, client, config: VoiceConfig):
        super().__init__(config.timeout_s)
        self.client = client
        self.model = config.tts_model
        self.voice = config.tts_voice
        self.speed = self._clamp_speed(config.tts_speed)

    @staticmethod
    def _clamp_speed(speed: float) -> float:
        """OpenAI accepts speeds between 0.25 and 4.0."""
        return max(0.25, min(4.0, speed))

    async def _synthesize_bytes(self, text: str) -> bytes:
        response = await self.client.audio.speech.create(
            model=self.model,
            voice=self.voice,
            input=text,
            speed=self.speed
        )
        return response.content

class GoogleSpeechSynthesizer(SpeechSynthesizer):
    """Synthesize speech using Google Cloud TTS."""

    engine = "google"

    def __init__(self, client, config: VoiceConfig):
        super().__init__(config.timeout_s)
        self.client = client
        self.language_code = config.language_code
        self.voice_name = config.google_voice_name
        self.speaking_rate = config.tts_speed

    async def _synthesize_bytes(self, text: str) -> bytes:
        synthesis_input = texttospeech.SynthesisInput(text=text)
        voice = texttospeech.VoiceSelectionParams(
            language_code=self.language_code,
            name=self.voice_name
        )
        audio_config = texttospeech.AudioConfig(
            audio_encoding=texttospeech.AudioEncoding.MP3,
            speaking_rate=self.speaking_rate
        )

        # The client is blocking
        response = await asyncio.to_thread(
            self.client.synthesize_speech,
            input=synthesis_input,
            voice=voice,
            audio_config=audio_config
        )
        return response.audio_content

def _create_openai_synthesizer(voice: VoiceConfig, ai: AIConfig) -> Optional[SpeechSynthesizer]:
    if not ai.openai_api_key:
        logger.info("OpenAI not configured, skipping TTS")
        return None

    client = openai.AsyncOpenAI(
        api_key=ai.openai_api_key,
        timeout=voice.timeout_s,
        max_retries=0
    )
    logger.info(f"OpenAI TTS initialized with voice: {voice.tts_voice}")
    return OpenAISpeechSynthesizer(client, voice)

def _create_google_synthesizer(voice: VoiceConfig) -> Optional[SpeechSynthesizer]:
    if texttospeech is None:
        logger.warning("Google TTS not available - google-cloud-texttospeech package not installed")
        return None

    # Set up credentials if provided
    if voice.google_credentials_path:
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = voice.google_credentials_path

    try:
        client = texttospeech.TextToSpeechClient()
    except Exception as e:
        logger.error(f"Failed to initialize Google TTS client: {e}")
        return None

    logger.info(f"Google TTS initialized with voice: {voice.google_voice_name}")
    return GoogleSpeechSynthesizer(client, voice)

def create_synthesizer(voice: VoiceConfig, ai: AIConfig) -> Optional[SpeechSynthesizer]:
    """Create the configured TTS engine, or None when synthesis is unavailable."""
    engine = voice.tts_engine.lower()

    if engine == "openai":
        return _create_openai_synthesizer(voice, ai)
    if engine == "google":
        return _create_google_synthesizer(voice)
    if engine != "none":
        logger.warning(f"Unknown TTS engine: {voice.tts_engine}")
    return None
