"""
OpenAI chat completions provider (structured provider).
"""
from typing import Optional

import httpx

from spear.agents.exceptions import TransportError
from spear.core.config import ProviderConfig
from spear.services.completion import CompletionOptions, HTTPCompletionProvider


class OpenAIChatProvider(HTTPCompletionProvider):
    """Calls ``POST {base_url}/chat/completions`` with a single user message."""

    name = "openai"

    def __init__(
        self,
        config: ProviderConfig,
        client: Optional[httpx.AsyncClient] = None,
        model: Optional[str] = None,
    ):
        super().__init__(config, client)
        self.model = model or config.openai_model

    async def _complete_once(self, prompt: str, options: CompletionOptions) -> str:
        if not self.config.openai_api_key:
            raise TransportError(
                "No API key configured for openai. Set OPENAI_API_KEY in your environment.",
                provider=self.name,
                retryable=False,
            )

        data = await self._post_json(
            f"{self.config.openai_base_url}/chat/completions",
            payload={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": options.max_tokens,
                "temperature": options.temperature,
            },
            headers={
                "Authorization": f"Bearer {self.config.openai_api_key}",
                "Content-Type": "application/json",
            },
        )

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise TransportError("openai response has no message content", provider=self.name)

        return (content or "").strip()
