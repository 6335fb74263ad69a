"""
Pydantic schemas for API request/response models.
"""

from spear.schemas.code import (
    GenerateCodeRequest,
    GenerateCodeResponse,
    ChatRequest,
    ChatResponse,
)

__all__ = [
    "GenerateCodeRequest",
    "GenerateCodeResponse",
    "ChatRequest",
    "ChatResponse",
]
