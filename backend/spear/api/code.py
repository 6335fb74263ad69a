"""
Code generation and chat routes.

Both endpoints return the frontend's wire shapes. Required fields are checked
here, before any provider is called.
"""
import json
import logging

from fastapi import APIRouter, Depends, Request

from spear.agents.artifact import ChatTurn, CodeArtifact, CodeResult, OrchestrationResult
from spear.agents.exceptions import GenerationError
from spear.agents.orchestrator import Orchestrator
from spear.core.exceptions import AIProcessingError, ErrorCode, ValidationError
from spear.schemas.code import ChatRequest, ChatResponse, GenerateCodeRequest, GenerateCodeResponse

logger = logging.getLogger(__name__)

router = APIRouter()

GENERATION_FAILED = "Failed to generate code"
CHAT_FAILED = "Failed to fetch AI response"


def get_orchestrator(request: Request) -> Orchestrator:
    """Orchestrator created in the application lifespan."""
    return request.app.state.orchestrator


def to_chat_response(result: OrchestrationResult) -> ChatResponse:
    """Map a pipeline result onto the chat wire shape."""
    if isinstance(result, CodeResult):
        reply = json.dumps(result.artifact.to_wire(), indent=2, ensure_ascii=False)
    else:
        reply = result.reply
    return ChatResponse(
        reply=reply,
        updateCode=result.update_code,
        isTextResponse=result.is_text_response,
    )


@router.post("/generate-code", response_model=GenerateCodeResponse)
async def generate_code(
    body: GenerateCodeRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """Generate HTML, CSS and JavaScript from a prompt."""
    if not body.prompt or not body.prompt.strip():
        raise ValidationError("Prompt is required", field="prompt")

    try:
        result = await orchestrator.generate_code(body.prompt)
    except GenerationError as e:
        raise AIProcessingError(GENERATION_FAILED, details=e.to_dict()) from e
    except Exception as e:
        logger.exception(f"[API] Unexpected error generating code: {e}")
        raise AIProcessingError(GENERATION_FAILED) from e

    return GenerateCodeResponse(message=result.raw_model_text, **result.artifact.to_wire())


@router.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """Answer a chat message, editing the supplied code when asked to."""
    if not body.message or not body.message.strip():
        raise ValidationError("Message is required", field="message")

    turn = ChatTurn(
        message=body.message,
        prior_artifact=CodeArtifact.from_wire(body.htmlCode, body.cssCode, body.jsCode),
    )

    try:
        result, trace = await orchestrator.handle_chat(turn)
    except Exception as e:
        logger.exception(f"[API] Unexpected error handling chat: {e}")
        raise AIProcessingError(CHAT_FAILED, code=ErrorCode.AI_CHAT_FAILED) from e

    logger.debug(f"[API] Chat trace: {trace.to_dict()}")
    return to_chat_response(result)
