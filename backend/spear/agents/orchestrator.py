"""
Orchestrator.

Routes each chat turn through classification to exactly one pipeline:

    RECEIVED -> CLASSIFIED -> DISPATCHED -> RESPONDED

Chat always reaches RESPONDED with a result; provider failures become soft
text replies. Code generation skips classification and raises on failure.
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from spear.agents.artifact import ChatTurn, CodeArtifact, CodeResult, OrchestrationResult, TextResult
from spear.agents.code_generator import CodeGenerator
from spear.agents.code_modifier import CodeModifier
from spear.agents.conversation import Conversation
from spear.agents.exceptions import TransportError
from spear.agents.intent_classifier import ClassificationLabel, IntentClassifier
from spear.agents.response_parser import StructuredResponseParser
from spear.core.config import Settings, settings as default_settings
from spear.services.code_formatter import CodeFormatter
from spear.services.completion import CompletionProvider

logger = logging.getLogger(__name__)

CLASSIFICATION_UNAVAILABLE_REPLY = (
    "Sorry, I couldn't process your message right now. Please try again in a moment."
)


class OrchestrationState(str, Enum):
    """States a chat turn moves through."""

    RECEIVED = "received"
    CLASSIFIED = "classified"
    DISPATCHED = "dispatched"
    RESPONDED = "responded"


@dataclass
class OrchestrationTrace:
    """Per-request record of visited states, the label and timing."""

    states: list[OrchestrationState] = field(default_factory=lambda: [OrchestrationState.RECEIVED])
    label: Optional[ClassificationLabel] = None
    started_at: float = field(default_factory=time.time)
    elapsed_ms: int = 0

    @property
    def state(self) -> OrchestrationState:
        return self.states[-1]

    def advance(self, state: OrchestrationState) -> None:
        self.states.append(state)
        if state == OrchestrationState.RESPONDED:
            self.elapsed_ms = int((time.time() - self.started_at) * 1000)

    def to_dict(self) -> dict:
        return {
            "states": [s.value for s in self.states],
            "label": self.label.value if self.label else None,
            "elapsed_ms": self.elapsed_ms,
        }


class Orchestrator:
    """
    Entry point for chat and code generation.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        structured_provider: CompletionProvider,
        conversational_provider: CompletionProvider,
        settings: Optional[Settings] = None,
    ):
        settings = settings or default_settings
        parser = StructuredResponseParser(CodeFormatter(indent_size=settings.formatter_indent_size))

        self.classifier = IntentClassifier(structured_provider, settings)
        self.generator = CodeGenerator(structured_provider, parser, settings)
        self.modifier = CodeModifier(structured_provider, parser, settings)
        self.conversation = Conversation(conversational_provider, settings)

    async def handle_chat(self, turn: ChatTurn) -> tuple[OrchestrationResult, OrchestrationTrace]:
        """
        Process one chat turn.

        Returns:
            The pipeline result and the trace of the turn
        """
        trace = OrchestrationTrace()

        try:
            label = await self.classifier.classify(turn.message)
        except TransportError as e:
            logger.error(f"[ORCHESTRATOR] Classification unavailable: {e.message}")
            result = TextResult(reply=CLASSIFICATION_UNAVAILABLE_REPLY)
            trace.advance(OrchestrationState.RESPONDED)
            self._log_trace(trace, result)
            return result, trace

        trace.label = label
        trace.advance(OrchestrationState.CLASSIFIED)

        if label == ClassificationLabel.CODE_UPDATE:
            prior = turn.prior_artifact or CodeArtifact()
            trace.advance(OrchestrationState.DISPATCHED)
            result = await self.modifier.modify(turn.message, prior)
        else:
            trace.advance(OrchestrationState.DISPATCHED)
            result = await self.conversation.converse(turn.message)

        trace.advance(OrchestrationState.RESPONDED)
        self._log_trace(trace, result)
        return result, trace

    async def generate_code(self, prompt: str) -> CodeResult:
        """
        Generate a new artifact from a prompt.

        Raises:
            GenerationError: The provider failed or returned no JSON object
        """
        return await self.generator.generate(prompt)

    def _log_trace(self, trace: OrchestrationTrace, result: OrchestrationResult) -> None:
        logger.info(
            f"[ORCHESTRATOR] {' -> '.join(s.value for s in trace.states)} "
            f"label={trace.label.value if trace.label else None} result={result.kind} "
            f"in {trace.elapsed_ms}ms",
            extra={"state": trace.state.value},
        )
