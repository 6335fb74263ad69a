"""
Application configuration using Pydantic Settings.
Loads from environment variables with validation.
"""
from dataclasses import dataclass
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_name: str = "Spear Backend"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # Frontend (CORS)
    frontend_url: str = "https://spear-frontend.vercel.app"
    cors_origins: list = []

    # Structured provider selection: "openai" or "anthropic"
    structured_provider: str = "openai"

    # OpenAI (structured provider)
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    openai_base_url: str = "https://api.openai.com/v1"

    # Anthropic (alternative structured provider)
    anthropic_api_key: str = ""
    claude_model: str = "claude-haiku-4-5-20251001"

    # Gemini (conversational provider)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Provider call policy
    provider_timeout_seconds: float = 60.0
    provider_max_retries: int = 2
    provider_retry_initial_delay: float = 1.0

    # Per-call budgets
    generation_max_tokens: int = 1500
    generation_temperature: float = 0.7
    modification_max_tokens: int = 1000
    modification_temperature: float = 0.7
    classification_max_tokens: int = 5
    classification_temperature: float = 0.3
    conversation_max_tokens: int = 2048
    conversation_temperature: float = 0.7

    # Formatting
    formatter_indent_size: int = 2

    # Logging
    log_level: str = "INFO"
    log_dir: str = ""  # Empty means console only, set to path for file logging
    log_json: bool = False  # Use JSON format for logs (recommended for production)

    @property
    def allowed_origins(self) -> list[str]:
        origins = [self.frontend_url] if self.frontend_url else []
        return origins + [o for o in self.cors_origins if o not in origins]


@dataclass(frozen=True)
class ProviderConfig:
    """
    Credentials and call policy shared by every completion provider.

    Built once at startup and passed explicitly to each provider, so nothing
    reads ambient settings at call time.
    """
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    openai_base_url: str = "https://api.openai.com/v1"
    anthropic_api_key: str = ""
    claude_model: str = "claude-haiku-4-5-20251001"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = 60.0
    max_retries: int = 2
    retry_initial_delay: float = 1.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfig":
        return cls(
            openai_api_key=settings.openai_api_key,
            openai_model=settings.openai_model,
            openai_base_url=settings.openai_base_url.rstrip("/"),
            anthropic_api_key=settings.anthropic_api_key,
            claude_model=settings.claude_model,
            gemini_api_key=settings.gemini_api_key,
            gemini_model=settings.gemini_model,
            gemini_base_url=settings.gemini_base_url.rstrip("/"),
            timeout_seconds=settings.provider_timeout_seconds,
            max_retries=settings.provider_max_retries,
            retry_initial_delay=settings.provider_retry_initial_delay,
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


settings = get_settings()
