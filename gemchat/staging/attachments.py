"""Attachment staging and inline-data encoding.

Uploads are written to a staging directory, read back for the model call
and deleted on every exit path.
"""

import base64
import logging
import mimetypes
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from gemchat.errors import AttachmentError, AttachmentTooLargeError
from gemchat.models.schemas import Attachment, InlineData, InlineDataPart

logger = logging.getLogger(__name__)

# Constants
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB
DEFAULT_MIME_TYPE = "application/octet-stream"


def resolve_mime_type(filename: str, declared: str | None) -> str:
    """Pick the MIME type for an upload.

    Uses the type declared by the client, then a guess from the filename,
    then ``application/octet-stream``.
    """
    if declared and declared.strip():
        return declared.strip()
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or DEFAULT_MIME_TYPE


def _validate_size(filename: str, content: bytes) -> None:
    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise AttachmentTooLargeError(
            f"File {filename} ({size_mb:.1f}MB) exceeds maximum allowed (10MB)"
        )


def _staged_name(filename: str) -> str:
    # Keep only the basename so a client cannot write outside upload_dir
    return f"{int(time.time() * 1000)}-{Path(filename).name}"


@contextmanager
def stage_upload(upload_dir: str | Path, filename: str, content: bytes) -> Iterator[Path]:
    """Write an upload to the staging directory for the span of a request.

    Args:
        upload_dir: Directory to stage into; created if missing.
        filename: Original filename from the client.
        content: Uploaded bytes.

    Yields:
        Path of the staged file.

    Raises:
        AttachmentTooLargeError: If the content exceeds MAX_UPLOAD_SIZE.
        AttachmentError: If the file cannot be written.
    """
    _validate_size(filename, content)

    directory = Path(upload_dir)
    path = directory / _staged_name(filename)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    except OSError as e:
        logger.error(f"Failed to stage upload {filename}: {e}")
        raise AttachmentError(f"Could not stage file {filename}") from e

    logger.debug(f"Staged upload {filename} at {path}")
    try:
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete staged file {path}: {e}")


def build_attachment(path: Path, filename: str, mime_type: str | None) -> Attachment:
    """Read a staged file back into an Attachment.

    Raises:
        AttachmentError: If the staged file cannot be read.
    """
    try:
        content = path.read_bytes()
    except OSError as e:
        logger.error(f"Failed to read staged file {path}: {e}")
        raise AttachmentError(f"Could not read file {filename}") from e

    return Attachment(
        filename=filename,
        mime_type=resolve_mime_type(filename, mime_type),
        content=content,
    )


def to_inline_part(attachment: Attachment) -> InlineDataPart:
    """Base64-encode an attachment into an inline-data part."""
    return InlineDataPart(
        inline_data=InlineData(
            mime_type=attachment.mime_type,
            data=base64.b64encode(attachment.content).decode("ascii"),
        )
    )


def upload_marker(filename: str) -> str:
    """Text recorded in history in place of the uploaded bytes."""
    return f"[User uploaded file: {filename}]"
