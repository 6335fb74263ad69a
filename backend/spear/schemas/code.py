"""
Pydantic schemas for the code generation and chat API.

Field names are the wire names the frontend already uses.
"""

from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# REQUEST MODELS
# =============================================================================

class GenerateCodeRequest(BaseModel):
    """Request body for code generation."""

    prompt: Optional[str] = Field(
        None,
        description="What to build (e.g., 'a red button')"
    )


class ChatRequest(BaseModel):
    """Request body for chat. The current code is resent on every turn."""

    message: Optional[str] = Field(None, description="The user's chat message")
    htmlCode: Optional[str] = Field("", description="Current HTML")
    cssCode: Optional[str] = Field("", description="Current CSS")
    jsCode: Optional[str] = Field("", description="Current JavaScript")


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class GenerateCodeResponse(BaseModel):
    """Generated code plus the provider's raw text."""

    message: str = Field(..., description="Raw provider response text")
    htmlCode: str = ""
    cssCode: str = ""
    jsCode: str = ""


class ChatResponse(BaseModel):
    """
    Chat reply.

    For code updates ``reply`` is a JSON string of ``{htmlCode, cssCode,
    jsCode}`` and ``updateCode`` is true.
    """

    reply: str
    updateCode: bool = False
    isTextResponse: bool = True
