"""
Language model providers for Avatar Chat.
Wraps OpenAI and Anthropic behind one ``complete`` contract.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import anthropic
import openai

from ..core.config import AIConfig
from ..core.errors import ProviderFailure, ProviderUnavailable
from ..models.chat import Failure, ProviderOutcome, Success
from ..utils.logger import get_logger

logger = get_logger(__name__)

@dataclass(frozen=True)
class CompletionOptions:
    """Per-call generation settings."""
    model: str
    max_tokens: int = 200
    temperature: float = 0.8

class ProviderClient(ABC):
    """A generative-text provider reachable through a single round trip."""

    name: str = "provider"

    def __init__(self, default_options: CompletionOptions, timeout_s: float):
        self.default_options = default_options
        self.timeout_s = timeout_s

    @abstractmethod
    async def _create_completion(self, system_prompt: str, user_message: str,
                                 options: CompletionOptions) -> Optional[str]:
        """Issue the provider request and return the generated text."""

    async def complete(self, system_prompt: str, user_message: str,
                       options: Optional[CompletionOptions] = None) -> str:
        """Generate a reply; raises ProviderFailure on any error or empty output."""
        options = options or self.default_options
        try:
            text = await asyncio.wait_for(
                self._create_completion(system_prompt, user_message, options),
                timeout=self.timeout_s
            )
        except asyncio.TimeoutError as e:
            raise ProviderFailure(self.name, e, reason=f"timed out after {self.timeout_s}s") from e
        except ProviderFailure:
            raise
        except Exception as e:
            raise ProviderFailure(self.name, e) from e

        text = (text or "").strip()
        if not text:
            raise ProviderFailure(self.name, reason="empty completion")

        logger.info(f"Generated {self.name} response: {len(text)} characters")
        return text

    async def attempt(self, system_prompt: str, user_message: str,
                      options: Optional[CompletionOptions] = None) -> ProviderOutcome:
        """Like ``complete`` but reports the result as an outcome instead of raising."""
        try:
            text = await self.complete(system_prompt, user_message, options)
        except ProviderFailure as e:
            return Failure(cause=e, provider=self.name)
        return Success(text=text, provider=self.name)

class OpenAIChatProvider(ProviderClient):
    """OpenAI chat completions."""

    name = "openai"

    def __init__(self, client, default_options: CompletionOptions, timeout_s: float):
        super().__init__(default_options, timeout_s)
        self.client = client

    async def _create_completion(self, system_prompt, user_message, options):
        completion = await self.client.chat.completions.create(
            model=options.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            temperature=options.temperature,
            max_tokens=options.max_tokens,
        )
        if not completion.choices:
            return None
        return completion.choices[0].message.content

class AnthropicChatProvider(ProviderClient):
    """Anthropic messages API."""

    name = "anthropic"

    def __init__(self, client, default_options: CompletionOptions, timeout_s: float):
        super().__init__(default_options, timeout_s)
        self.client = client

    async def _create_completion(self, system_prompt, user_message, options):
        message = await self.client.messages.create(
            model=options.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_message}],
        )
        # First text block wins; tool/other blocks are ignored
        for block in message.content or []:
            if getattr(block, "type", None) == "text":
                return block.text
        return None

@dataclass(frozen=True)
class ProviderSet:
    """Providers in fallback order; ``None`` means the variant is not configured."""
    primary: Optional[ProviderClient] = None
    secondary: Optional[ProviderClient] = None

    SLOTS = ("primary", "secondary")

    @property
    def configured(self) -> bool:
        return self.primary is not None or self.secondary is not None

    def require(self, slot: str) -> ProviderClient:
        """Return the provider in ``slot``; raises ProviderUnavailable if it is disabled."""
        provider = getattr(self, slot)
        if provider is None:
            raise ProviderUnavailable(slot)
        return provider

def create_openai_provider(config: AIConfig) -> Optional[OpenAIChatProvider]:
    """Create the OpenAI provider, or None when no API key is configured."""
    if not config.openai_api_key:
        logger.info("OpenAI API key not provided - OpenAI provider disabled")
        return None

    client = openai.AsyncOpenAI(
        api_key=config.openai_api_key,
        timeout=config.timeout_s,
        max_retries=0
    )
    options = CompletionOptions(
        model=config.openai_model,
        max_tokens=config.max_tokens,
        temperature=config.temperature
    )
    logger.info(f"OpenAI provider initialized with model: {config.openai_model}")
    return OpenAIChatProvider(client, options, config.timeout_s)

def create_anthropic_provider(config: AIConfig) -> Optional[AnthropicChatProvider]:
    """Create the Anthropic provider, or None when no API key is configured."""
    if not config.anthropic_api_key:
        logger.info("Anthropic API key not provided - Anthropic provider disabled")
        return None

    client = anthropic.AsyncAnthropic(
        api_key=config.anthropic_api_key,
        timeout=config.timeout_s,
        max_retries=0
    )
    options = CompletionOptions(
        model=config.anthropic_model,
        max_tokens=config.max_tokens,
        temperature=config.temperature
    )
    logger.info(f"Anthropic provider initialized with model: {config.anthropic_model}")
    return AnthropicChatProvider(client, options, config.timeout_s)

def build_providers(config: AIConfig) -> ProviderSet:
    """Build the provider pair once at start-up: OpenAI first, Anthropic second."""
    return ProviderSet(
        primary=create_openai_provider(config),
        secondary=create_anthropic_provider(config)
    )
