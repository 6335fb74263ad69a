"""
Claude API provider for Anthropic's Claude models.

Alternative structured provider, selected with ``STRUCTURED_PROVIDER=anthropic``.
"""
import logging
from typing import Optional

import anthropic
from anthropic import AsyncAnthropic

from spear.agents.exceptions import TransportError
from spear.core.config import ProviderConfig
from spear.services.completion import CompletionOptions, CompletionProvider, is_retryable_status

logger = logging.getLogger(__name__)


class ClaudeProvider(CompletionProvider):
    """Wrapper for Anthropic's async messages API."""

    name = "claude"

    def __init__(
        self,
        config: ProviderConfig,
        client: Optional[AsyncAnthropic] = None,
        model: Optional[str] = None,
    ):
        super().__init__(config)
        self.model = model or config.claude_model
        self._client = client

    def _get_client(self) -> AsyncAnthropic:
        if self._client is None:
            if not self.config.anthropic_api_key:
                raise TransportError(
                    "No API key configured for claude. Set ANTHROPIC_API_KEY in your environment.",
                    provider=self.name,
                    retryable=False,
                )
            # Retries and timeouts are handled by CompletionProvider.complete
            self._client = AsyncAnthropic(
                api_key=self.config.anthropic_api_key,
                max_retries=0,
                timeout=self.config.timeout_seconds,
            )
        return self._client

    async def _complete_once(self, prompt: str, options: CompletionOptions) -> str:
        client = self._get_client()
        logger.debug(f"[CLAUDE] Request - model={self.model}, type={options.request_type}")

        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=options.max_tokens,
                temperature=options.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            raise TransportError(
                f"claude API error ({e.status_code}): {e.message}",
                provider=self.name,
                status_code=e.status_code,
                retryable=is_retryable_status(e.status_code),
            )
        except anthropic.APIError as e:
            # Connection and timeout errors
            raise TransportError(f"Network error calling claude: {e}", provider=self.name)

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return text.strip()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
