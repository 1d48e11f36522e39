"""Conversation state and the submit/reset operations.

Core module for accumulating turns and forwarding them to the model.

Design notes:

1. **Session store** - History lives in a ``Conversation`` keyed by session
   id. Callers that send no id share the ``default`` session, which gives a
   single interactive user the same behaviour as one process-wide history.
   Idle sessions are evicted after ``session_ttl_seconds``.

2. **One call in flight per session** - Each conversation holds an
   ``asyncio.Lock``. Submit and reset acquire it, so concurrent requests on
   the same session queue instead of racing on the history list.

3. **Failed exchanges stay visible** - User turns appended before a failed
   model call are kept and tagged ``failed``; no model turn is added. They
   are still part of the context on later calls.

4. **Context window** - The full history is flattened into the prompt
   unless ``max_context_turns`` caps it to the most recent turns. History
   itself is never truncated.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field

from gemchat.agent.config import ChatConfig, get_chat_config
from gemchat.agent.gemini_client import GeminiClient, ModelClient
from gemchat.errors import EmptySubmissionError, ModelError
from gemchat.models.schemas import (
    Attachment,
    ChatResponse,
    Part,
    ResetResponse,
    Role,
    Turn,
    TurnStatus,
)
from gemchat.staging.attachments import to_inline_part, upload_marker

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


@dataclass
class Conversation:
    """History of one session plus its lock and last activity time."""

    session_id: str
    history: list[Turn] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    last_active: float = field(default_factory=time.monotonic)

    def touch(self) -> None:
        self.last_active = time.monotonic()

    def snapshot(self) -> list[Turn]:
        return [turn.model_copy(deep=True) for turn in self.history]


class SessionStore:
    """In-memory map of session id to Conversation with idle eviction."""

    def __init__(self, ttl_seconds: float = 3600.0) -> None:
        self._ttl = ttl_seconds
        self._sessions: dict[str, Conversation] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def evict_expired(self, now: float | None = None) -> list[str]:
        """Drop sessions idle for longer than the TTL.

        Sessions with a call in flight are kept.

        Returns:
            Ids of the evicted sessions.
        """
        now = time.monotonic() if now is None else now
        expired = [
            sid
            for sid, conv in self._sessions.items()
            if now - conv.last_active > self._ttl and not conv.lock.locked()
        ]
        for sid in expired:
            del self._sessions[sid]
            logger.info(f"Evicted idle session {sid}")
        return expired

    def find(self, session_id: str | None = None) -> Conversation | None:
        """Return an existing conversation without creating or touching it."""
        return self._sessions.get(session_id or DEFAULT_SESSION_ID)

    def get(self, session_id: str | None = None) -> Conversation:
        """Return the conversation for a session, creating it on first contact."""
        self.evict_expired()
        sid = session_id or DEFAULT_SESSION_ID
        conversation = self._sessions.get(sid)
        if conversation is None:
            conversation = Conversation(session_id=sid)
            self._sessions[sid] = conversation
            logger.info(f"Created session {sid}")
        conversation.touch()
        return conversation


class ConversationService:
    """Accumulates turns and forwards them to the model.

    Wraps a ModelClient with:
    - Per-session history via SessionStore
    - Attachment encoding and upload markers
    - Failure tagging instead of silent partial history
    """

    def __init__(
        self,
        model: ModelClient,
        config: ChatConfig | None = None,
        store: SessionStore | None = None,
    ) -> None:
        """Initialize the conversation service.

        Args:
            model: Client used for the model call.
            config: Optional configuration. Loads from environment if not provided.
            store: Optional session store. A new one is created if not provided.
        """
        self._model = model
        self._config = config or get_chat_config()
        self._store = store or SessionStore(ttl_seconds=self._config.session_ttl_seconds)

    @property
    def config(self) -> ChatConfig:
        return self._config

    @property
    def store(self) -> SessionStore:
        return self._store

    def _context_parts(self, history: list[Turn]) -> list[Part]:
        """Flatten the parts of the windowed history in order."""
        window = history
        if self._config.max_context_turns is not None:
            window = history[-self._config.max_context_turns :]
        return [part.model_copy() for turn in window for part in turn.parts]

    async def submit(
        self,
        message: str | None = None,
        attachment: Attachment | None = None,
        session_id: str | None = None,
    ) -> ChatResponse:
        """Record a user submission, call the model and record its reply.

        Args:
            message: Optional user text.
            attachment: Optional file sent inline for this call only.
            session_id: Session to use; the default session when omitted.

        Returns:
            ChatResponse with the reply and the full updated history.

        Raises:
            EmptySubmissionError: If neither message nor attachment is given.
            ModelError: If the model call fails. User turns stay recorded
                with status ``failed``.
        """
        if not (message and message.strip()) and attachment is None:
            raise EmptySubmissionError("Provide a message or a file")

        conversation = self._store.get(session_id)
        async with conversation.lock:
            pending: list[Turn] = []

            if message:
                pending.append(Turn.from_text(Role.USER, message))
                conversation.history.append(pending[-1])

            prompt_parts = self._context_parts(conversation.history)

            if attachment is not None:
                prompt_parts.append(to_inline_part(attachment))
                pending.append(Turn.from_text(Role.USER, upload_marker(attachment.filename)))
                conversation.history.append(pending[-1])

            logger.info(
                f"Submitting to model: session={conversation.session_id} "
                f"parts={len(prompt_parts)} attachment={attachment is not None}"
            )

            try:
                reply = await self._model.generate(prompt_parts)
            except Exception as e:
                for turn in pending:
                    turn.status = TurnStatus.FAILED
                logger.exception(f"Model call failed for session {conversation.session_id}")
                if isinstance(e, ModelError):
                    raise
                raise ModelError(str(e) or "Model request failed") from e
            finally:
                conversation.touch()

            conversation.history.append(Turn.from_text(Role.MODEL, reply))
            return ChatResponse(reply=reply, history=conversation.snapshot())

    async def reset(self, session_id: str | None = None) -> ResetResponse:
        """Clear a session's history. Safe to call repeatedly."""
        conversation = self._store.get(session_id)
        async with conversation.lock:
            conversation.history.clear()
        logger.info(f"Chat history cleared for session {conversation.session_id}")
        return ResetResponse(message="Chat history cleared")

    def history(self, session_id: str | None = None) -> list[Turn]:
        """Return a copy of a session's history."""
        conversation = self._store.find(session_id)
        return conversation.snapshot() if conversation else []


# Module-level singleton instance
_conversation_service: ConversationService | None = None


def get_conversation_service() -> ConversationService:
    """Get or create the global conversation service.

    Builds a GeminiClient from the environment on first use.

    Returns:
        The ConversationService instance.

    Raises:
        ValidationError: If GEMINI_API_KEY is not set.
    """
    global _conversation_service
    if _conversation_service is None:
        config = get_chat_config()
        _conversation_service = ConversationService(GeminiClient(config), config=config)
    return _conversation_service
