"""FastAPI endpoints for the chat proxy.

Endpoints:
    - GET /health: Service health status
    - POST /chat: Submit a message and/or file, receive reply and history
    - POST /reset: Clear the conversation history
    - GET /history: Current conversation history
"""

from gemchat.api.app import app, create_app

__all__ = ["app", "create_app"]
