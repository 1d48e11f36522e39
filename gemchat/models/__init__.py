"""Pydantic models for conversation state and API payloads.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Turn: One user or model message made of ordered parts
    - TextPart / InlineDataPart: Content fragments sent to Gemini
    - Attachment: A staged upload pending inclusion in a request
    - ChatResponse / ErrorResponse / ResetResponse: Wire payloads
"""

from gemchat.models.schemas import (
    Attachment,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    HistoryResponse,
    InlineData,
    InlineDataPart,
    Part,
    ResetResponse,
    Role,
    TextPart,
    Turn,
    TurnStatus,
)

__all__ = [
    "Attachment",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
    "HistoryResponse",
    "InlineData",
    "InlineDataPart",
    "Part",
    "ResetResponse",
    "Role",
    "TextPart",
    "Turn",
    "TurnStatus",
]
