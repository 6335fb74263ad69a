"""
Google Gemini provider (conversational provider).
"""
from typing import Optional

import httpx

from spear.agents.exceptions import TransportError
from spear.core.config import ProviderConfig
from spear.services.completion import CompletionOptions, HTTPCompletionProvider


class GeminiProvider(HTTPCompletionProvider):
    """Calls ``POST {base_url}/models/{model}:generateContent``."""

    name = "gemini"

    def __init__(
        self,
        config: ProviderConfig,
        client: Optional[httpx.AsyncClient] = None,
        model: Optional[str] = None,
    ):
        super().__init__(config, client)
        self.model = model or config.gemini_model

    async def _complete_once(self, prompt: str, options: CompletionOptions) -> str:
        if not self.config.gemini_api_key:
            raise TransportError(
                "No API key configured for gemini. Set GEMINI_API_KEY in your environment.",
                provider=self.name,
                retryable=False,
            )

        data = await self._post_json(
            f"{self.config.gemini_base_url}/models/{self.model}:generateContent",
            payload={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "maxOutputTokens": options.max_tokens,
                    "temperature": options.temperature,
                },
            },
            headers={
                "x-goog-api-key": self.config.gemini_api_key,
                "Content-Type": "application/json",
            },
        )

        return extract_candidate_text(data)


def extract_candidate_text(data: dict) -> str:
    """
    Return the text of the first candidate, or "" when the model produced none.

    Blocked prompts come back as 200 with no candidates; that is an empty
    answer, not a transport failure. A body of any other shape is.

    Raises:
        TransportError: The response envelope is not the generateContent shape
    """
    try:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text") or "" for part in parts)
    except (AttributeError, KeyError, TypeError):
        raise TransportError("gemini response has no candidate text", provider=GeminiProvider.name)
    return text.strip()
