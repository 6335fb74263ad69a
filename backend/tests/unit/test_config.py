"""
Unit Tests for Settings and ProviderConfig
"""
from dataclasses import FrozenInstanceError

import pytest

from spear.core.config import ProviderConfig, Settings


class TestSettings:
    """Environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "FRONTEND_URL", "OPENAI_MODEL", "STRUCTURED_PROVIDER"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.port == 5000
        assert settings.frontend_url == "https://spear-frontend.vercel.app"
        assert settings.openai_model == "gpt-3.5-turbo"
        assert settings.structured_provider == "openai"
        assert settings.generation_max_tokens == 1500
        assert settings.modification_max_tokens == 1000
        assert settings.classification_max_tokens == 5
        assert settings.classification_temperature == 0.3

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("PORT", "8080")

        settings = Settings(_env_file=None)

        assert settings.openai_api_key == "sk-test"
        assert settings.port == 8080

    def test_allowed_origins_include_frontend_first(self):
        settings = Settings(
            _env_file=None,
            frontend_url="https://app.example.com",
            cors_origins=["http://localhost:3000", "https://app.example.com"],
        )

        assert settings.allowed_origins == ["https://app.example.com", "http://localhost:3000"]


class TestProviderConfig:
    """Frozen provider configuration."""

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            openai_api_key="sk-1",
            gemini_api_key="g-1",
            openai_base_url="https://proxy.example.com/v1/",
            provider_timeout_seconds=12,
            provider_max_retries=4,
        )

        config = ProviderConfig.from_settings(settings)

        assert config.openai_api_key == "sk-1"
        assert config.gemini_api_key == "g-1"
        assert config.openai_base_url == "https://proxy.example.com/v1"
        assert config.timeout_seconds == 12
        assert config.max_retries == 4

    def test_is_immutable(self):
        config = ProviderConfig()

        with pytest.raises(FrozenInstanceError):
            config.openai_api_key = "changed"
