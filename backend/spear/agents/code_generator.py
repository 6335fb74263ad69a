"""
Code Generation Pipeline.

Turns a free-text prompt into a new CodeArtifact with one structured
provider call.
"""
import logging
import time
from typing import Optional

from spear.agents.artifact import CodeArtifact, CodeResult
from spear.agents.exceptions import GenerationError, MalformedResponseError, TemplateError, TransportError
from spear.agents.prompt_builder import render
from spear.agents.response_parser import StructuredResponseParser
from spear.core.config import Settings, settings as default_settings
from spear.services.completion import CompletionOptions, CompletionProvider

logger = logging.getLogger(__name__)


class CodeGenerator:
    """Generates HTML, CSS and JavaScript from a user prompt."""

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
            max_tokens=settings.generation_max_tokens,
            temperature=settings.generation_temperature,
            request_type="generation",
        )

    async def generate(self, user_prompt: str) -> CodeResult:
        """
        Generate a new artifact.

        Fields the provider leaves out come back as empty strings. Only a
        response with no recoverable JSON object counts as a failure.

        Args:
            user_prompt: What the user wants built

        Returns:
            CodeResult with the formatted artifact and the raw provider text

        Raises:
            GenerationError: Wraps the TransportError, MalformedResponseError
                or TemplateError that stopped generation
        """
        start_time = time.time()
        logger.info(f"[GENERATOR] Generating code for: {user_prompt[:100]}")

        try:
            prompt = render("generation", {"user_prompt": user_prompt})
            raw_text = await self.provider.complete(prompt, self.options)
            artifact = self.parser.parse(raw_text, defaults=CodeArtifact())
        except (TransportError, MalformedResponseError, TemplateError) as e:
            logger.error(f"[GENERATOR] Generation failed: {e.message}")
            raise GenerationError(e) from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"[GENERATOR] Generated artifact in {elapsed_ms}ms - "
            f"html={len(artifact.markup)}, css={len(artifact.style)}, js={len(artifact.behavior)} chars"
        )
        return CodeResult(artifact=artifact, raw_model_text=raw_text)
