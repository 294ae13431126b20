"""
Chat data contracts - emotion vocabulary, request/reply shapes and provider outcomes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

class EmotionTag(str, Enum):
    """Avatar states shared with the rendering client.

    Adding a value requires the client to learn it too.
    """
    IDLE = "idle"
    TALKING = "talking"
    THINKING = "thinking"
    ANGRY = "angry"
    CELEBRATING = "celebrating"
    CRAZY_DANCE = "crazy_dance"
    CONFUSED = "confused"

# The only tags the classifier may emit; the rest are driven client-side.
CLASSIFIABLE_EMOTIONS = frozenset({
    EmotionTag.TALKING,
    EmotionTag.THINKING,
    EmotionTag.ANGRY,
    EmotionTag.CELEBRATING,
})

class ChatRequest(BaseModel):
    """Inbound chat request body."""
    message: Optional[str] = None

class ChatReply(BaseModel):
    """Reply produced once per request and flattened into the response body."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    message: str
    emotion: EmotionTag = EmotionTag.TALKING
    audio_base64: Optional[str] = Field(default=None, alias="audioBase64")
    timestamp: str

    def to_response(self) -> dict:
        """Wire representation; ``audioBase64`` is omitted when there is no audio."""
        return self.model_dump(by_alias=True, exclude_none=True)

@dataclass(frozen=True)
class Success:
    """Provider returned usable text."""
    text: str
    provider: str

@dataclass(frozen=True)
class Failure:
    """Provider was called and did not return usable text."""
    cause: BaseException
    provider: str

ProviderOutcome = Union[Success, Failure]
