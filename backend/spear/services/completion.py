"""
Completion provider base.

A provider turns a prompt into text. Subclasses implement a single remote
attempt in ``_complete_once``; the base class adds the per-call timeout and
bounded retry with exponential backoff, and reports exhaustion as a
TransportError.
"""
import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from spear.agents.exceptions import TransportError
from spear.core.config import ProviderConfig

logger = logging.getLogger(__name__)

# 4xx statuses worth retrying; every other 4xx is final
RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


def is_retryable_status(status_code: Optional[int]) -> bool:
    if status_code is None:
        return True
    return status_code >= 500 or status_code in RETRYABLE_CLIENT_STATUSES


@dataclass(frozen=True)
class CompletionOptions:
    """Sampling options for one completion call."""
    max_tokens: int = 1024
    temperature: float = 0.7
    request_type: str = "chat"


class CompletionProvider(ABC):
    """Text-completion capability: ``complete(prompt, options) -> text``."""

    name: str = "provider"

    def __init__(self, config: ProviderConfig):
        self.config = config

    @abstractmethod
    async def _complete_once(self, prompt: str, options: CompletionOptions) -> str:
        """Make one remote attempt. Raise TransportError on failure."""

    async def complete(self, prompt: str, options: Optional[CompletionOptions] = None) -> str:
        """
        Complete a prompt with timeout and retry.

        Args:
            prompt: Fully rendered prompt text
            options: Sampling options (defaults if omitted)

        Returns:
            The provider's response text

        Raises:
            TransportError: All attempts failed, or a non-retryable error occurred
        """
        options = options or CompletionOptions()
        max_attempts = self.config.max_retries + 1
        last_error: Optional[TransportError] = None

        for attempt in range(max_attempts):
            start_time = time.time()
            try:
                text = await asyncio.wait_for(
                    self._complete_once(prompt, options),
                    timeout=self.config.timeout_seconds,
                )
                latency_ms = int((time.time() - start_time) * 1000)
                logger.info(
                    f"[{self.name.upper()}] Response received - type={options.request_type}, "
                    f"chars={len(text)}, latency={latency_ms}ms, attempt={attempt + 1}"
                )
                return text

            except asyncio.TimeoutError:
                last_error = TransportError(
                    f"{self.name} timed out after {self.config.timeout_seconds}s",
                    provider=self.name,
                )
            except TransportError as e:
                last_error = e

            last_error.attempts = attempt + 1
            last_error.details["attempts"] = attempt + 1
            logger.warning(
                f"[{self.name.upper()}] Attempt {attempt + 1}/{max_attempts} failed: {last_error.message}",
                extra={"provider": self.name, "attempt": attempt + 1},
            )

            if not last_error.retryable:
                break

            if attempt < max_attempts - 1:
                delay = self.config.retry_initial_delay * (2 ** attempt)
                logger.info(f"[{self.name.upper()}] Retrying in {delay}s...")
                await asyncio.sleep(delay)

        logger.error(f"[{self.name.upper()}] Giving up: {last_error.message}")
        raise last_error

    async def close(self) -> None:
        """Release network resources."""


class HTTPCompletionProvider(CompletionProvider):
    """Provider reached over a JSON HTTP API with a shared httpx client."""

    def __init__(self, config: ProviderConfig, client: Optional[httpx.AsyncClient] = None):
        super().__init__(config)
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _post_json(self, url: str, payload: dict, headers: dict, params: Optional[dict] = None) -> dict:
        """POST a JSON payload and return the decoded JSON body."""
        client = await self._get_client()

        try:
            response = await client.post(url, json=payload, headers=headers, params=params)
        except httpx.TimeoutException as e:
            raise TransportError(f"Timeout calling {self.name}: {e}", provider=self.name)
        except httpx.RequestError as e:
            raise TransportError(f"Network error calling {self.name}: {e}", provider=self.name)

        if response.status_code != 200:
            raise TransportError(
                f"{self.name} API error ({response.status_code}): {_error_message(response)}",
                provider=self.name,
                status_code=response.status_code,
                retryable=is_retryable_status(response.status_code),
            )

        try:
            return response.json()
        except ValueError:
            raise TransportError(f"{self.name} returned a non-JSON body", provider=self.name)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    error = data.get("error", {}) if isinstance(data, dict) else data
    if isinstance(error, dict):
        return error.get("message") or response.text[:200]
    return str(error)
