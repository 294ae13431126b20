"""
Response Orchestrator - Turns one user message into one chat reply.
Tries the primary provider, then the secondary, then a static fallback.
"""

from datetime import datetime
from typing import Callable, Optional

from ..core.config import PersonaConfig
from ..core.errors import ProviderUnavailable, SynthesisFailure
from ..models.chat import ChatReply, EmotionTag, ProviderOutcome, Success
from ..voice.synthesis import SpeechSynthesizer
from ..utils.logger import get_logger
from .emotion import classify
from .providers import ProviderClient, ProviderSet

logger = get_logger(__name__)

def build_system_prompt(persona: PersonaConfig) -> str:
    """Generate the system prompt for the configured persona."""
    facts = "\n".join(f"- {fact}" for fact in persona.project_facts)
    restrictions = "\n".join(f"- {rule}" for rule in persona.restrictions)

    prompt = f"""你是{persona.name}的官方AI助手！你专注于{persona.name}项目和社区。

关于{persona.name}：
{facts}

严格限制：
{restrictions}

你的性格：{persona.personality}
{persona.language_instruction}
{persona.length_instruction}"""

    return prompt.strip()

def current_timestamp() -> str:
    """Local wall-clock time as HH:MM."""
    return datetime.now().strftime("%H:%M")

class ResponseOrchestrator:
    """Produces a ChatReply for a single stateless request."""

    def __init__(self,
                 providers: ProviderSet,
                 synthesizer: Optional[SpeechSynthesizer],
                 persona: PersonaConfig,
                 clock: Callable[[], str] = current_timestamp):
        self.providers = providers
        self.synthesizer = synthesizer
        self.persona = persona
        self.system_prompt = build_system_prompt(persona)
        self.clock = clock

        primary = providers.primary.name if providers.primary else "disabled"
        secondary = providers.secondary.name if providers.secondary else "disabled"
        tts = synthesizer.engine if synthesizer else "disabled"
        logger.info(f"Response orchestrator ready (primary={primary}, secondary={secondary}, tts={tts})")

    async def respond(self, message: str) -> ChatReply:
        """Generate the reply for ``message``; never raises for upstream failures."""
        outcome = await self._generate(message)

        if isinstance(outcome, Success):
            return await self._build_reply(outcome.text)

        if outcome is None:
            fallback = self.persona.unconfigured_message
        else:
            fallback = self.persona.failure_message
        return ChatReply(message=fallback, emotion=EmotionTag.TALKING, timestamp=self.clock())

    async def _generate(self, message: str) -> Optional[ProviderOutcome]:
        """Run the fallback chain; None means no provider is configured at all."""
        last_outcome: Optional[ProviderOutcome] = None

        for slot in ProviderSet.SLOTS:
            try:
                provider = self.providers.require(slot)
            except ProviderUnavailable as e:
                logger.info(f"Skipping {slot} slot: {e}")
                continue

            outcome = await self._attempt(provider, message)
            if isinstance(outcome, Success):
                return outcome

            logger.warning(f"{slot.capitalize()} provider failed, falling back: {outcome.cause}")
            last_outcome = outcome

        return last_outcome

    async def _attempt(self, provider: ProviderClient, message: str) -> ProviderOutcome:
        return await provider.attempt(self.system_prompt, message)

    async def _build_reply(self, text: str) -> ChatReply:
        emotion = classify(text)
        audio = await self._synthesize(text)
        return ChatReply(
            message=text,
            emotion=emotion,
            audio_base64=audio,
            timestamp=self.clock()
        )

    async def _synthesize(self, text: str) -> Optional[str]:
        if self.synthesizer is None:
            return None
        try:
            return await self.synthesizer.synthesize(text)
        except SynthesisFailure as e:
            logger.warning(f"Speech synthesis failed, replying without audio: {e}")
            return None
