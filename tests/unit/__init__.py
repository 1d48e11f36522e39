"""Unit tests for individual components in isolation.

Coverage:
    - models/: Turn and part validation
    - staging/: Attachment staging, cleanup and encoding
    - agent/: Configuration, Gemini client and conversation service
    - ui/: Client session state, API client and markdown rendering
"""
