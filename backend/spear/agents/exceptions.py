"""
Custom exceptions for the agent system.
"""
from typing import Optional, Dict, Any


class AgentException(Exception):
    """Base exception for all agent errors."""

    def __init__(
            self,
            message: str,
            agent: str,
            recoverable: bool = False,
            details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.agent = agent
        self.recoverable = recoverable
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "agent": self.agent,
            "recoverable": self.recoverable,
            "details": self.details
        }


class TransportError(AgentException):
    """Raised when a provider is unreachable, times out, or answers non-2xx."""

    def __init__(
            self,
            message: str,
            provider: str,
            status_code: Optional[int] = None,
            attempts: int = 1,
            retryable: bool = True,
    ):
        super().__init__(
            message=message,
            agent="provider",
            recoverable=retryable,
            details={
                "provider": provider,
                "status_code": status_code,
                "attempts": attempts,
            }
        )
        self.provider = provider
        self.status_code = status_code
        self.attempts = attempts
        self.retryable = retryable


class MalformedResponseError(AgentException):
    """Raised when provider text cannot be parsed into the expected JSON shape."""

    def __init__(self, raw_text: str, reason: str = "Response is not a JSON object"):
        super().__init__(
            message=f"Malformed provider response: {reason}",
            agent="response_parser",
            recoverable=True,
            details={
                "reason": reason,
                "raw_preview": raw_text[:200],
            }
        )
        self.raw_text = raw_text
        self.reason = reason


class TemplateError(AgentException):
    """Raised when a prompt template is unknown or a variable is missing."""

    def __init__(self, template_name: str, missing: Optional[list] = None):
        if missing:
            message = f"Template '{template_name}' is missing variables: {', '.join(missing)}"
        else:
            message = f"Unknown prompt template '{template_name}'"
        super().__init__(
            message=message,
            agent="prompt_builder",
            recoverable=False,
            details={
                "template": template_name,
                "missing": missing or [],
            }
        )
        self.template_name = template_name
        self.missing = missing or []


class GenerationError(AgentException):
    """Raised when code generation fails; wraps the underlying cause."""

    def __init__(self, cause: AgentException):
        super().__init__(
            message=f"Code generation failed: {cause.message}",
            agent="code_generator",
            recoverable=False,
            details={
                "cause": type(cause).__name__,
                **cause.details,
            }
        )
        self.cause = cause
