"""Test package for gemchat.

Structure:
    - unit/: Individual function and class tests
    - integration/: HTTP workflows through the FastAPI app

The Gemini API is never called: tests use a fake model client or patch
the google.generativeai SDK. Leverages pytest with pytest-check for soft
assertions.
"""
