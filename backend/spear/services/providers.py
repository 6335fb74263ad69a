"""
Provider construction from settings.
"""
import logging
from enum import Enum

from spear.core.config import ProviderConfig, Settings
from spear.services.claude import ClaudeProvider
from spear.services.completion import CompletionProvider
from spear.services.gemini import GeminiProvider
from spear.services.openai_chat import OpenAIChatProvider

logger = logging.getLogger(__name__)


class StructuredBackend(str, Enum):
    """Backends that can serve as the structured provider."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


def create_structured_provider(settings: Settings, config: ProviderConfig) -> CompletionProvider:
    try:
        backend = StructuredBackend(settings.structured_provider.lower())
    except ValueError:
        raise ValueError(
            f"Unknown structured provider '{settings.structured_provider}'. "
            f"Expected one of: {', '.join(b.value for b in StructuredBackend)}"
        ) from None

    if backend == StructuredBackend.ANTHROPIC:
        provider = ClaudeProvider(config)
    else:
        provider = OpenAIChatProvider(config)

    logger.info(f"[PROVIDERS] Structured provider: {provider.name} ({provider.model})")
    return provider


def create_conversational_provider(config: ProviderConfig) -> CompletionProvider:
    provider = GeminiProvider(config)
    logger.info(f"[PROVIDERS] Conversational provider: {provider.name} ({provider.model})")
    return provider
