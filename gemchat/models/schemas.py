from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a turn."""

    USER = "user"
    MODEL = "model"


class TurnStatus(str, Enum):
    """Whether a turn belongs to a completed exchange."""

    COMPLETE = "complete"
    FAILED = "failed"


class TextPart(BaseModel):
    """Plain text fragment."""

    model_config = ConfigDict(extra="forbid")

    text: str


class InlineData(BaseModel):
    """Base64 payload tagged with its MIME type.

    Attributes:
        mime_type: MIME type of the decoded bytes.
        data: Base64 text of the bytes.
    """

    model_config = ConfigDict(extra="forbid")

    mime_type: str
    data: str


class InlineDataPart(BaseModel):
    """Binary fragment sent inline to the model."""

    model_config = ConfigDict(extra="forbid")

    inline_data: InlineData


Part = TextPart | InlineDataPart


class Turn(BaseModel):
    """A single message unit in the conversation.

    Attributes:
        role: Who produced the turn (user or model).
        parts: Ordered, non-empty content fragments.
        status: ``failed`` for user turns whose model call did not complete.
    """

    role: Role
    parts: list[Part] = Field(..., min_length=1)
    status: TurnStatus = TurnStatus.COMPLETE

    @classmethod
    def from_text(cls, role: Role, text: str) -> "Turn":
        """Build a turn holding a single text fragment."""
        return cls(role=role, parts=[TextPart(text=text)])

    @property
    def text(self) -> str:
        """Concatenated text of all text fragments."""
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))


class Attachment(BaseModel):
    """A file received with a chat request.

    Attributes:
        filename: Original filename as sent by the client.
        mime_type: MIME type declared by the upload or guessed from the name.
        content: Raw file bytes.
    """

    filename: str = Field(..., min_length=1)
    mime_type: str
    content: bytes


class ChatResponse(BaseModel):
    """Reply text plus the full updated history."""

    reply: str
    history: list[Turn]


class HistoryResponse(BaseModel):
    history: list[Turn]


class ResetResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Structured error body returned for every failed request."""

    error: str


class HealthResponse(BaseModel):
    status: str
    service: str
