"""
Conversational Pipeline.

Free-form replies for UX suggestions and normal chat. The raw message goes to
the conversational provider as-is.
"""
import logging
from typing import Optional

from spear.agents.artifact import TextResult
from spear.agents.exceptions import TransportError
from spear.core.config import Settings, settings as default_settings
from spear.services.completion import CompletionOptions, CompletionProvider

logger = logging.getLogger(__name__)

APOLOGY_REPLY = "Sorry, I couldn't reach the assistant right now. Please try again in a moment."
EMPTY_REPLY = "I don't have a response for that. Could you rephrase your message?"


class Conversation:
    """Answers chat messages with the conversational provider."""

    def __init__(self, provider: CompletionProvider, settings: Optional[Settings] = None):
        settings = settings or default_settings
        self.provider = provider
        self.options = CompletionOptions(
            max_tokens=settings.conversation_max_tokens,
            temperature=settings.conversation_temperature,
            request_type="conversation",
        )

    async def converse(self, message: str) -> TextResult:
        try:
            reply = await self.provider.complete(message, self.options)
        except TransportError as e:
            logger.error(f"[CONVERSATION] Provider unavailable: {e.message}")
            return TextResult(reply=APOLOGY_REPLY)

        if not reply or not reply.strip():
            logger.warning("[CONVERSATION] Provider returned no text")
            return TextResult(reply=EMPTY_REPLY)

        return TextResult(reply=reply)
