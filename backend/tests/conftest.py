"""
Pytest Configuration and Shared Fixtures for All Tests

This conftest.py provides:
- Scripted fake completion providers (no network)
- Orchestrator and TestClient fixtures for API tests
- Sample provider responses
- Test markers configuration
"""
import sys
from pathlib import Path
from typing import List, Optional, Union

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent))

from spear.core.config import ProviderConfig
from spear.services.completion import CompletionOptions, CompletionProvider


# =============================================================================
# Pytest Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (requires real API)"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (mocked, fast)"
    )


# =============================================================================
# Fake Providers
# =============================================================================

# No retries and no backoff sleeps in tests
FAST_CONFIG = ProviderConfig(
    openai_api_key="test-openai-key",
    anthropic_api_key="test-anthropic-key",
    gemini_api_key="test-gemini-key",
    timeout_seconds=5.0,
    max_retries=0,
    retry_initial_delay=0.0,
)


class FakeProvider(CompletionProvider):
    """
    Provider that replays scripted responses in order.

    Each script entry is either the text to return or an exception to raise.
    Every call is recorded as (prompt, options).
    """

    def __init__(self, responses: Optional[List[Union[str, Exception]]] = None, name: str = "fake"):
        super().__init__(FAST_CONFIG)
        self.name = name
        self.responses = list(responses or [])
        self.calls: List[tuple] = []

    async def _complete_once(self, prompt: str, options: CompletionOptions) -> str:
        self.calls.append((prompt, options))
        if not self.responses:
            raise AssertionError(f"{self.name} called more times than scripted")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def prompts(self) -> List[str]:
        return [prompt for prompt, _ in self.calls]


@pytest.fixture
def make_provider():
    """Factory for scripted providers: ``make_provider(["text", TransportError(...)])``."""
    return FakeProvider


@pytest.fixture
def structured_provider():
    """Scripted structured provider; tests append to ``.responses``."""
    return FakeProvider(name="structured")


@pytest.fixture
def conversational_provider():
    """Scripted conversational provider; tests append to ``.responses``."""
    return FakeProvider(name="conversational")


@pytest.fixture
def orchestrator(structured_provider, conversational_provider):
    """Orchestrator wired to the fake providers."""
    from spear.agents.orchestrator import Orchestrator

    return Orchestrator(structured_provider, conversational_provider)


# =============================================================================
# API Test Fixtures - TestClient
# =============================================================================

@pytest.fixture
def client(orchestrator):
    """TestClient whose routes use the fake-provider orchestrator."""
    from main import app
    from spear.api.code import get_orchestrator

    app.dependency_overrides[get_orchestrator] = lambda: orchestrator

    yield TestClient(app)

    # Cleanup
    app.dependency_overrides.clear()


# =============================================================================
# Sample Data
# =============================================================================

@pytest.fixture
def sample_artifact():
    """A small, already formatted artifact."""
    from spear.agents.artifact import CodeArtifact

    return CodeArtifact(
        markup="<button>Hi</button>",
        style="button {\n  color: red;\n}",
        behavior="console.log(1);",
    )
