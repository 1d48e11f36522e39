"""Gemini orchestration and conversation state.

Handles history accumulation and the model call for the chat proxy.

Responsibilities:
    - Configuration loading and API key validation
    - Gemini client with inline-data support
    - Per-session conversation history and locking
    - Context window policy for the prompt

Maintains clean separation from the HTTP layer.
"""

from gemchat.agent.config import ChatConfig, get_chat_config
from gemchat.agent.conversation import (
    Conversation,
    ConversationService,
    SessionStore,
    get_conversation_service,
)
from gemchat.agent.gemini_client import GeminiClient, ModelClient

__all__ = [
    "ChatConfig",
    "Conversation",
    "ConversationService",
    "GeminiClient",
    "ModelClient",
    "SessionStore",
    "get_chat_config",
    "get_conversation_service",
]
