"""Integration tests for the HTTP surface.

Coverage:
    - POST /chat with text, files and failures
    - POST /reset and GET /history
    - Client API wrapper against the real app over ASGI

Runs the actual FastAPI app with a fake model client in place of Gemini.
"""
