"""Client-side chat session and API client.

The session keeps a display-only copy of the conversation. The server's
history is authoritative; nothing here is sent back to it except the new
message and file.
"""

import base64
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime

import httpx

from gemchat.models.schemas import Attachment, Role, TurnStatus

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


def _now() -> str:
    return datetime.now().strftime("%I:%M %p")


def preview_url(attachment: Attachment | None) -> str | None:
    """Local data URL for image attachments, None for anything else."""
    if attachment is None or not attachment.mime_type.startswith("image/"):
        return None
    encoded = base64.b64encode(attachment.content).decode("ascii")
    return f"data:{attachment.mime_type};base64,{encoded}"


@dataclass
class DisplayTurn:
    """A rendered chat bubble.

    ``file_name`` and ``preview_url`` exist only in the browser session.
    """

    role: Role
    text: str
    file_name: str | None = None
    preview_url: str | None = None
    status: TurnStatus = TurnStatus.COMPLETE
    time: str = field(default_factory=_now)


class ChatSession:
    """Manages displayed chat state for one browser tab."""

    def __init__(self) -> None:
        self.turns: list[DisplayTurn] = []
        self.session_id: str = str(uuid.uuid4())
        self.is_sending: bool = False

    def begin_send(self, text: str, attachment: Attachment | None = None) -> DisplayTurn:
        """Optimistically show the user's turn before the reply arrives."""
        turn = DisplayTurn(
            role=Role.USER,
            text=text,
            file_name=attachment.filename if attachment else None,
            preview_url=preview_url(attachment),
        )
        self.turns.append(turn)
        self.is_sending = True
        return turn

    def complete(self, reply: str) -> DisplayTurn:
        turn = DisplayTurn(role=Role.MODEL, text=reply)
        self.turns.append(turn)
        self.is_sending = False
        return turn

    def fail(self, turn: DisplayTurn) -> None:
        """Mark an optimistic user turn as failed; no model turn is added."""
        turn.status = TurnStatus.FAILED
        self.is_sending = False

    def clear(self) -> None:
        self.turns.clear()
        self.is_sending = False


class ChatApiError(Exception):
    """Raised when the chat API cannot be reached or returns an error."""


class ChatApiClient:
    """Thin httpx wrapper over the chat proxy endpoints."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 120.0,
    ) -> None:
        self._base_url = base_url
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url, transport=self._transport, timeout=self._timeout
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json().get("error") or f"HTTP {response.status_code}"
        except ValueError:
            return f"HTTP {response.status_code}"

    async def send(
        self,
        message: str,
        attachment: Attachment | None = None,
        session_id: str | None = None,
    ) -> str:
        """Post a message and optional file to ``/chat`` and return the reply.

        Raises:
            ChatApiError: On transport failure or a non-2xx response.
        """
        data = {"message": message}
        if session_id:
            data["session_id"] = session_id
        files = None
        if attachment is not None:
            files = {"file": (attachment.filename, attachment.content, attachment.mime_type)}

        async with self._client() as client:
            try:
                response = await client.post("/chat", data=data, files=files)
            except httpx.RequestError as e:
                raise ChatApiError(f"Connection failed: {e}") from e

        if response.is_error:
            raise ChatApiError(self._error_message(response))
        return response.json()["reply"]

    async def reset(self, session_id: str | None = None) -> None:
        """Ask the server to clear its history.

        Raises:
            ChatApiError: On transport failure or a non-2xx response.
        """
        data = {"session_id": session_id} if session_id else None
        async with self._client() as client:
            try:
                response = await client.post("/reset", data=data)
            except httpx.RequestError as e:
                raise ChatApiError(f"Connection failed: {e}") from e

        if response.is_error:
            raise ChatApiError(self._error_message(response))
