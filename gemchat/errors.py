"""Exception hierarchy for the conversation proxy.

Each error carries the HTTP status the API layer reports it with.
"""

from fastapi import status


class ChatError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR


class EmptySubmissionError(ChatError):
    """Raised when a submission has neither message text nor a file."""

    status_code = status.HTTP_400_BAD_REQUEST


class AttachmentTooLargeError(ChatError):
    """Raised when an uploaded file exceeds the size limit."""

    status_code = status.HTTP_413_CONTENT_TOO_LARGE


class AttachmentError(ChatError):
    """Raised when an attachment cannot be staged or read back."""


class ModelError(ChatError):
    """Raised when the Gemini call fails or returns no usable text."""
