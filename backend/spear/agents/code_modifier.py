"""
Code Modification Pipeline.

Applies a natural-language edit to the caller's current artifact. Failures
come back as text notices; the prior artifact is returned to the caller
untouched in every case.
"""
import logging
from typing import Optional

from spear.agents.artifact import CodeArtifact, CodeResult, FragmentKind, OrchestrationResult, TextResult
from spear.agents.exceptions import MalformedResponseError, TransportError
from spear.agents.prompt_builder import render
from spear.agents.response_parser import StructuredResponseParser
from spear.core.config import Settings, settings as default_settings
from spear.services.completion import CompletionOptions, CompletionProvider

logger = logging.getLogger(__name__)

MALFORMED_NOTICE = "Error processing code modification request."
UNAVAILABLE_NOTICE = (
    "The code service is unavailable right now, so your code was left unchanged. "
    "Please try again in a moment."
)


class CodeModifier:
    """Edits an existing artifact through the structured provider."""

    def __init__(
        self,
        provider: CompletionProvider,
        parser: Optional[StructuredResponseParser] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or default_settings
        self.provider = provider
        self.parser = parser or StructuredResponseParser()
        self.options = CompletionOptions(
            max_tokens=settings.modification_max_tokens,
            temperature=settings.modification_temperature,
            request_type="modification",
        )

    async def modify(self, message: str, prior_artifact: CodeArtifact) -> OrchestrationResult:
        """
        Apply the user's requested change.

        Fields the provider omits keep their prior value.

        Returns:
            CodeResult with the new artifact, or a TextResult failure notice
        """
        logger.info(f"[MODIFIER] Modifying code: {message[:100]}")

        prompt = render("modification", {
            "html_code": prior_artifact.get(FragmentKind.MARKUP),
            "css_code": prior_artifact.get(FragmentKind.STYLE),
            "js_code": prior_artifact.get(FragmentKind.BEHAVIOR),
            "message": message,
        })

        try:
            raw_text = await self.provider.complete(prompt, self.options)
        except TransportError as e:
            logger.error(f"[MODIFIER] Provider unavailable: {e.message}")
            return TextResult(reply=UNAVAILABLE_NOTICE, failure_notice=True)

        try:
            artifact = self.parser.parse(raw_text, defaults=prior_artifact)
        except MalformedResponseError as e:
            logger.warning(f"[MODIFIER] {e.message}", extra={"provider": self.provider.name})
            return TextResult(reply=MALFORMED_NOTICE, failure_notice=True)

        changed = [kind.value for kind in FragmentKind if artifact.get(kind) != prior_artifact.get(kind)]
        logger.info(f"[MODIFIER] Modification complete - changed: {', '.join(changed) or 'nothing'}")
        return CodeResult(artifact=artifact, raw_model_text=raw_text)
