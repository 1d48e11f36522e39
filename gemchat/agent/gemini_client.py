"""Gemini client for the conversation proxy.

Wraps ``google.generativeai`` behind a small ``ModelClient`` protocol so the
conversation service only deals with ordered parts in and text out.
"""

import base64
import logging
from typing import Any, Protocol

import google.generativeai as genai

from gemchat.agent.config import ChatConfig, get_chat_config
from gemchat.errors import ModelError
from gemchat.models.schemas import InlineDataPart, Part, TextPart

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    """Anything that turns an ordered list of parts into reply text."""

    async def generate(self, parts: list[Part]) -> str: ...


def to_sdk_parts(parts: list[Part]) -> list[dict[str, Any]]:
    """Convert parts into the dict form accepted by ``generate_content``.

    Inline data travels base64-encoded inside our models; the SDK wants raw
    bytes, so it is decoded here.
    """
    sdk_parts: list[dict[str, Any]] = []
    for part in parts:
        if isinstance(part, TextPart):
            sdk_parts.append({"text": part.text})
        elif isinstance(part, InlineDataPart):
            sdk_parts.append(
                {
                    "inline_data": {
                        "mime_type": part.inline_data.mime_type,
                        "data": base64.b64decode(part.inline_data.data),
                    }
                }
            )
    return sdk_parts


class GeminiClient:
    """Async Gemini client configured from ``ChatConfig``."""

    def __init__(self, config: ChatConfig | None = None) -> None:
        self._config = config or get_chat_config()
        genai.configure(api_key=self._config.api_key)
        self._model = genai.GenerativeModel(
            self._config.model_name,
            system_instruction=self._config.system_instruction,
        )

    async def generate(self, parts: list[Part]) -> str:
        """Send parts to Gemini and return the reply text.

        Raises:
            ModelError: If the call fails or the response carries no text.
        """
        try:
            response = await self._model.generate_content_async(to_sdk_parts(parts))
            text = response.text
        except Exception as e:
            raise ModelError(str(e) or "Gemini request failed") from e

        if not text:
            raise ModelError("Gemini returned an empty response")
        return text


def list_chat_models(config: ChatConfig | None = None) -> list[str]:
    """Return the names of models that support ``generateContent``."""
    config = config or get_chat_config()
    genai.configure(api_key=config.api_key)
    return [
        model.name.removeprefix("models/")
        for model in genai.list_models()
        if "generateContent" in model.supported_generation_methods
    ]


def check_models() -> None:
    """Print chat-capable models available to the configured key."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    logger.info("Checking available models...")
    try:
        names = list_chat_models()
    except Exception as e:
        logger.error(f"API Error: {e}")
        raise SystemExit(1) from e

    if not names:
        logger.info("No models found. Check your API key permissions.")
        return
    for name in names:
        logger.info(f"Name: {name}")
