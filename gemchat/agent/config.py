"""Chat configuration with environment variable loading.

Pydantic-based configuration for the Gemini client and the conversation
proxy. Values come from the process environment or a ``.env`` file.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are a direct and concise assistant. Give extremely brief answers."
)


def _optional_int(name: str) -> int | None:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


class ChatConfig(BaseModel):
    """Configuration for the Gemini-backed conversation proxy.

    Attributes:
        api_key: Gemini API key.
        model_name: Gemini model identifier.
        system_instruction: System prompt applied to every call.
        upload_dir: Directory where attachments are staged.
        max_context_turns: Most recent turns sent as context (None = all).
        session_ttl_seconds: Idle time after which a session is evicted.
    """

    # Env-backed defaults go through the same validators as explicit values
    model_config = ConfigDict(validate_default=True)

    api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", os.getenv("GOOGLE_API_KEY", "")),
        description="API key for the Gemini API",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
        description="Model to use",
    )
    system_instruction: str = Field(
        default_factory=lambda: os.getenv("SYSTEM_INSTRUCTION", DEFAULT_SYSTEM_INSTRUCTION),
        description="System instruction given to the model",
    )
    upload_dir: str = Field(
        default_factory=lambda: os.getenv("UPLOAD_DIR", "uploads"),
        description="Staging directory for uploaded files",
    )
    max_context_turns: int | None = Field(
        default_factory=lambda: _optional_int("MAX_CONTEXT_TURNS"),
        ge=1,
        description="Cap on history turns flattened into the prompt",
    )
    session_ttl_seconds: float = Field(
        default_factory=lambda: float(os.getenv("SESSION_TTL_SECONDS", "3600")),
        gt=0,
        description="Idle seconds before a session is evicted",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("GEMINI_API_KEY is required. Set it in the environment or .env")
        return v.strip()


def get_chat_config() -> ChatConfig:
    """Create chat configuration from environment.

    Returns:
        Configured ChatConfig instance.

    Raises:
        ValidationError: If no API key is set.
    """
    return ChatConfig()
