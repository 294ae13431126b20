"""Shared pytest fixtures for Avatar Chat tests."""

import asyncio

import pytest

from avatar_chat.ai.conversation import ResponseOrchestrator
from avatar_chat.ai.providers import CompletionOptions, ProviderClient, ProviderSet
from avatar_chat.core.config import PersonaConfig
from avatar_chat.core.errors import SynthesisFailure
from avatar_chat.voice.synthesis import SpeechSynthesizer


class FakeProvider(ProviderClient):
    """Provider that returns a canned reply or raises a canned error."""

    def __init__(self, name="fake", reply=None, error=None):
        super().__init__(CompletionOptions(model=f"{name}-model"), timeout_s=1.0)
        self.name = name
        self.reply = reply
        self.error = error
        self.calls = []

    async def _create_completion(self, system_prompt, user_message, options):
        self.calls.append({"system": system_prompt, "user": user_message, "options": options})
        if self.error is not None:
            raise self.error
        return self.reply


class FakeSynthesizer(SpeechSynthesizer):
    """Synthesizer that returns fixed bytes or raises."""

    engine = "fake"

    def __init__(self, audio=b"fake-mp3", error=None):
        super().__init__(timeout_s=1.0)
        self.audio = audio
        self.error = error
        self.calls = []

    async def _synthesize_bytes(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.audio


class RaisingSynthesizer(SpeechSynthesizer):
    """Synthesizer whose public method itself raises SynthesisFailure."""

    engine = "raising"

    def __init__(self):
        super().__init__(timeout_s=1.0)

    async def _synthesize_bytes(self, text):
        return b""

    async def synthesize(self, text):
        raise SynthesisFailure("speaker unplugged")


class SlowSynthesizer(SpeechSynthesizer):
    """Synthesizer that outlasts its own timeout."""

    engine = "slow"

    def __init__(self, delay=1.0, timeout_s=0.01):
        super().__init__(timeout_s=timeout_s)
        self.delay = delay
        self.calls = []

    async def _synthesize_bytes(self, text):
        self.calls.append(text)
        await asyncio.sleep(self.delay)
        return b"late-mp3"


FIXED_TIME = "12:34"


@pytest.fixture
def persona():
    return PersonaConfig()


@pytest.fixture
def make_orchestrator(persona):
    """Factory building an orchestrator around fake collaborators."""

    def _make(primary=None, secondary=None, synthesizer=None):
        return ResponseOrchestrator(
            providers=ProviderSet(primary=primary, secondary=secondary),
            synthesizer=synthesizer,
            persona=persona,
            clock=lambda: FIXED_TIME,
        )

    return _make
