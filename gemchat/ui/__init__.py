"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat bubbles for user and model turns, with failed turns marked
    - Single-file attachment picker with image preview
    - Display-only session state (the server's history is authoritative)
    - New chat / reset

Contains minimal business logic. Delegates all operations to the API.
"""
