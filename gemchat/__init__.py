"""gemchat - a minimal chat web application over Google Gemini.

Combines FastAPI for the conversation proxy, google-generativeai for the
model call, NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoints for chat, reset and history
    - agent: Gemini client, configuration and conversation state
    - staging: Attachment staging and inline-data encoding
    - ui: Chat page and client-side session
    - models: Turn, part and request/response schemas
"""

__version__ = "0.1.0"
