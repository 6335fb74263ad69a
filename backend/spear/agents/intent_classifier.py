"""
Intent Classifier.

Asks the structured provider which of three closed labels a chat message
belongs to. Model output is untrusted text: anything that is not exactly one
of the labels (after trimming and upper-casing) is treated as ambiguous and
routed to normal chat, never to a code update.
"""
import logging
import time
from enum import Enum
from typing import Optional

from spear.agents.prompt_builder import render
from spear.core.config import Settings, settings as default_settings
from spear.services.completion import CompletionOptions, CompletionProvider

logger = logging.getLogger(__name__)


class ClassificationLabel(str, Enum):
    """What a chat message asks for."""
    CODE_UPDATE = "CODE_UPDATE"
    UX_SUGGESTION = "UX_SUGGESTION"
    NORMAL_CHAT = "NORMAL_CHAT"


# Label used when the provider's answer matches nothing
FALLBACK_LABEL = ClassificationLabel.NORMAL_CHAT


def label_list() -> str:
    """Render the closed label set for the classification prompt."""
    quoted = [f'"{label.value}"' for label in ClassificationLabel]
    return ", ".join(quoted[:-1]) + f", or {quoted[-1]}"


def parse_label(raw: Optional[str]) -> Optional[ClassificationLabel]:
    """Match provider output exactly against the label set, or return None."""
    if raw is None:
        return None
    try:
        return ClassificationLabel(raw.strip().upper())
    except ValueError:
        return None


class IntentClassifier:
    """Classifies chat messages with the structured provider."""

    def __init__(self, provider: CompletionProvider, settings: Optional[Settings] = None):
        settings = settings or default_settings
        self.provider = provider
        self.options = CompletionOptions(
            max_tokens=settings.classification_max_tokens,
            temperature=settings.classification_temperature,
            request_type="classification",
        )

    async def classify(self, message: str) -> ClassificationLabel:
        """
        Classify a chat message.

        Raises:
            TransportError: The provider could not be reached
        """
        start_time = time.time()
        prompt = render("classification", {"message": message, "labels": label_list()})

        raw = await self.provider.complete(prompt, self.options)
        label = parse_label(raw)
        elapsed_ms = int((time.time() - start_time) * 1000)

        if label is None:
            logger.warning(
                f"[CLASSIFIER] Unrecognized label {raw!r} - falling back to {FALLBACK_LABEL.value}",
                extra={"label": FALLBACK_LABEL.value},
            )
            return FALLBACK_LABEL

        logger.info(
            f"[CLASSIFIER] Classified as {label.value} in {elapsed_ms}ms",
            extra={"label": label.value},
        )
        return label
