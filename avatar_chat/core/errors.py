"""
Error taxonomy for Avatar Chat.

Only ``MessageValidationError`` and ``InternalFault`` ever reach the caller.
Provider and synthesis errors are absorbed by the orchestrator and turned into
a degraded but successful reply.
"""

from typing import Optional

class ChatError(Exception):
    """Base class for all Avatar Chat errors."""

class MessageValidationError(ChatError):
    """The inbound request is missing a usable message."""

class ProviderUnavailable(ChatError):
    """A provider variant is not configured."""

    def __init__(self, provider: str):
        super().__init__(f"{provider} provider is not configured")
        self.provider = provider

class ProviderFailure(ChatError):
    """A configured provider was called and the call failed."""

    def __init__(self, provider: str, cause: Optional[BaseException] = None, reason: str = ""):
        detail = reason or (str(cause) if cause is not None else "unknown error")
        super().__init__(f"{provider} completion failed: {detail}")
        self.provider = provider
        self.cause = cause

class SynthesisFailure(ChatError):
    """Speech synthesis was attempted and failed."""

class InternalFault(ChatError):
    """Unexpected fault in request handling; reported to the caller without detail."""
