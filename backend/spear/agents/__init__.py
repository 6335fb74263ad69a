"""
Agents for classifying chat turns and producing or editing web code.

The Orchestrator (``spear.agents.orchestrator``) routes each request to one
pipeline: code generation, code modification or conversation. This package
root exports only the shared value types and exceptions, which the provider
services also depend on.
"""
from spear.agents.artifact import (
    ChatTurn,
    CodeArtifact,
    CodeResult,
    FragmentKind,
    OrchestrationResult,
    TextResult,
)
from spear.agents.exceptions import (
    AgentException,
    GenerationError,
    MalformedResponseError,
    TemplateError,
    TransportError,
)

__all__ = [
    # Values
    "ChatTurn",
    "CodeArtifact",
    "CodeResult",
    "FragmentKind",
    "OrchestrationResult",
    "TextResult",
    # Exceptions
    "AgentException",
    "GenerationError",
    "MalformedResponseError",
    "TemplateError",
    "TransportError",
]
