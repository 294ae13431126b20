"""Unit tests for speech synthesis backends."""

import asyncio
import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from avatar_chat.core.config import AIConfig, VoiceConfig
from avatar_chat.voice import synthesis
from avatar_chat.voice.synthesis import (
    GoogleSpeechSynthesizer,
    OpenAISpeechSynthesizer,
    create_synthesizer,
)

from conftest import SlowSynthesizer


def _openai_synthesizer(create, **voice_overrides):
    client = MagicMock()
    client.audio.speech.create = create
    return OpenAISpeechSynthesizer(client, VoiceConfig(**voice_overrides))


class TestOpenAISpeechSynthesizer:
    """Tests for OpenAI TTS."""

    async def test_returns_base64_audio(self):
        create = AsyncMock(return_value=SimpleNamespace(content=b"ID3-mp3-bytes"))
        synthesizer = _openai_synthesizer(create)

        audio = await synthesizer.synthesize("你好")

        assert base64.b64decode(audio) == b"ID3-mp3-bytes"
        kwargs = create.await_args.kwargs
        assert kwargs == {"model": "tts-1", "voice": "echo", "input": "你好", "speed": 1.0}

    async def test_failure_returns_none(self):
        synthesizer = _openai_synthesizer(AsyncMock(side_effect=RuntimeError("tts outage")))

        assert await synthesizer.synthesize("hello") is None

    async def test_empty_audio_returns_none(self):
        synthesizer = _openai_synthesizer(AsyncMock(return_value=SimpleNamespace(content=b"")))

        assert await synthesizer.synthesize("hello") is None

    async def test_blank_text_is_not_sent(self):
        create = AsyncMock()
        synthesizer = _openai_synthesizer(create)

        assert await synthesizer.synthesize("   ") is None
        create.assert_not_awaited()

    def test_speed_is_clamped(self):
        synthesizer = _openai_synthesizer(AsyncMock(), tts_speed=9.0)

        assert synthesizer.speed == 4.0


class TestGoogleSpeechSynthesizer:
    """Tests for Google Cloud TTS with the SDK module stubbed."""

    async def test_returns_base64_audio(self, monkeypatch):
        monkeypatch.setattr(synthesis, "texttospeech", MagicMock())
        client = MagicMock()
        client.synthesize_speech.return_value = SimpleNamespace(audio_content=b"google-mp3")
        synthesizer = GoogleSpeechSynthesizer(client, VoiceConfig(tts_engine="google"))

        audio = await synthesizer.synthesize("你好")

        assert base64.b64decode(audio) == b"google-mp3"
        client.synthesize_speech.assert_called_once()

    async def test_failure_returns_none(self, monkeypatch):
        monkeypatch.setattr(synthesis, "texttospeech", MagicMock())
        client = MagicMock()
        client.synthesize_speech.side_effect = RuntimeError("permission denied")
        synthesizer = GoogleSpeechSynthesizer(client, VoiceConfig(tts_engine="google"))

        assert await synthesizer.synthesize("你好") is None


class TestSynthesisTimeout:
    """Tests for the per-call synthesis deadline."""

    async def test_slow_engine_returns_none(self):
        synthesizer = SlowSynthesizer(delay=1.0, timeout_s=0.01)

        assert await synthesizer.synthesize("hello") is None
        assert synthesizer.calls == ["hello"]

    async def test_slow_openai_call_returns_none(self):
        async def slow_create(**kwargs):
            await asyncio.sleep(1.0)
            return SimpleNamespace(content=b"late")

        synthesizer = _openai_synthesizer(AsyncMock(side_effect=slow_create), timeout_s=0.01)

        assert synthesizer.timeout_s == 0.01
        assert await synthesizer.synthesize("hello") is None


class TestCreateSynthesizer:
    """Tests for engine selection."""

    def test_openai_without_key_is_unavailable(self):
        assert create_synthesizer(VoiceConfig(tts_engine="openai"), AIConfig()) is None

    def test_openai_with_key(self):
        synthesizer = create_synthesizer(VoiceConfig(tts_engine="openai"), AIConfig(openai_api_key="sk-test"))

        assert isinstance(synthesizer, OpenAISpeechSynthesizer)

    def test_disabled_engine(self):
        config = AIConfig(openai_api_key="sk-test")

        assert create_synthesizer(VoiceConfig(tts_engine="none"), config) is None

    def test_unknown_engine(self):
        config = AIConfig(openai_api_key="sk-test")

        assert create_synthesizer(VoiceConfig(tts_engine="espeak"), config) is None

    def test_google_without_sdk_is_unavailable(self, monkeypatch):
        monkeypatch.setattr(synthesis, "texttospeech", None)

        assert create_synthesizer(VoiceConfig(tts_engine="google"), AIConfig()) is None

    def test_google_with_sdk(self, monkeypatch):
        monkeypatch.setattr(synthesis, "texttospeech", MagicMock())

        synthesizer = create_synthesizer(VoiceConfig(tts_engine="GOOGLE"), AIConfig())

        assert isinstance(synthesizer, GoogleSpeechSynthesizer)
