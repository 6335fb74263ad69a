"""
Value objects passed between the orchestrator, pipelines and API layer.

A CodeArtifact is never edited in place; a modification produces a new one.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class FragmentKind(str, Enum):
    """The three kinds of source fragment in an artifact."""
    MARKUP = "markup"
    STYLE = "style"
    BEHAVIOR = "behavior"


# Wire names used by the HTTP API for each fragment
WIRE_FIELDS = {
    FragmentKind.MARKUP: "htmlCode",
    FragmentKind.STYLE: "cssCode",
    FragmentKind.BEHAVIOR: "jsCode",
}


@dataclass(frozen=True)
class CodeArtifact:
    """Markup, style and behavior code produced or modified together."""
    markup: str = ""
    style: str = ""
    behavior: str = ""

    def __post_init__(self):
        # None collapses to "", so every field is always a string
        for kind in FragmentKind:
            if getattr(self, kind.value) is None:
                object.__setattr__(self, kind.value, "")

    def get(self, kind: FragmentKind) -> str:
        return getattr(self, kind.value)

    def to_wire(self) -> dict:
        """Convert to the ``{htmlCode, cssCode, jsCode}`` API shape."""
        return {WIRE_FIELDS[kind]: self.get(kind) for kind in FragmentKind}

    @classmethod
    def from_wire(
        cls,
        html_code: Optional[str] = None,
        css_code: Optional[str] = None,
        js_code: Optional[str] = None,
    ) -> "CodeArtifact":
        return cls(markup=html_code or "", style=css_code or "", behavior=js_code or "")


@dataclass(frozen=True)
class ChatTurn:
    """One chat request. The caller resends the artifact every turn."""
    message: str
    prior_artifact: Optional[CodeArtifact] = None


@dataclass(frozen=True)
class CodeResult:
    """Pipeline output carrying a (new) artifact."""
    artifact: CodeArtifact
    raw_model_text: str = field(default="", repr=False)

    kind = "code"
    update_code = True
    is_text_response = False


@dataclass(frozen=True)
class TextResult:
    """
    Pipeline output carrying text for the user.

    ``failure_notice`` marks replies that explain a failed code edit rather
    than conversational text.
    """
    reply: str
    failure_notice: bool = False

    kind = "text"
    update_code = False

    @property
    def is_text_response(self) -> bool:
        return not self.failure_notice


OrchestrationResult = Union[CodeResult, TextResult]
