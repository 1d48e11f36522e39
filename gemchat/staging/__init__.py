"""Attachment staging for chat uploads.

Turns uploaded files into inline-data parts for the model call.

Responsibilities:
    - Size and filename validation
    - Writing uploads to a staging directory and deleting them afterwards
    - MIME type resolution
    - Base64 encoding into inline-data parts

Staged files never outlive the request that created them.
"""

from gemchat.staging.attachments import (
    MAX_UPLOAD_SIZE,
    build_attachment,
    resolve_mime_type,
    stage_upload,
    to_inline_part,
    upload_marker,
)

__all__ = [
    "MAX_UPLOAD_SIZE",
    "build_attachment",
    "resolve_mime_type",
    "stage_upload",
    "to_inline_part",
    "upload_marker",
]
