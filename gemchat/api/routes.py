"""Chat, reset and history endpoints.

Handles multipart submission, attachment staging and conversion of every
failure into a structured error response.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from gemchat.agent.conversation import ConversationService, get_conversation_service
from gemchat.errors import ChatError
from gemchat.models.schemas import (
    ChatResponse,
    ErrorResponse,
    HistoryResponse,
    ResetResponse,
)
from gemchat.staging.attachments import build_attachment, stage_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Neither message nor file given"},
    413: {"model": ErrorResponse, "description": "File too large"},
    500: {"model": ErrorResponse, "description": "Model or staging failure"},
}


def get_service(request: Request) -> ConversationService:
    """Return the service attached to the app, building it if needed."""
    service = request.app.state.service
    if service is None:
        service = get_conversation_service()
        request.app.state.service = service
    return service


async def _submit(
    service: ConversationService,
    message: str | None,
    file: UploadFile | None,
    session_id: str | None,
) -> ChatResponse:
    if file is None or not file.filename:
        return await service.submit(message=message, session_id=session_id)

    content = await file.read()
    with stage_upload(service.config.upload_dir, file.filename, content) as path:
        attachment = build_attachment(path, file.filename, file.content_type)
        return await service.submit(
            message=message, attachment=attachment, session_id=session_id
        )


@router.post("/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
async def chat(
    service: Annotated[ConversationService, Depends(get_service)],
    message: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File()] = None,
    session_id: Annotated[str | None, Form()] = None,
) -> ChatResponse:
    """Submit a message and/or a file and get the model's reply.

    Args:
        message: Optional user text (multipart field).
        file: Optional single file (multipart field).
        session_id: Optional session; the shared default session if omitted.

    Returns:
        ChatResponse with the reply and the full updated history.

    Raises:
        400: Neither message nor file.
        413: File exceeds 10MB limit.
        500: Model call or staging failure.
    """
    try:
        return await _submit(service, message, file, session_id)
    except ChatError:
        raise
    except Exception as e:
        logger.exception("Unexpected error while handling /chat")
        raise ChatError(str(e) or "Something went wrong") from e


@router.post("/reset", response_model=ResetResponse)
async def reset(
    service: Annotated[ConversationService, Depends(get_service)],
    session_id: Annotated[str | None, Form()] = None,
) -> ResetResponse:
    """Clear the conversation history."""
    return await service.reset(session_id=session_id)


@router.get("/history", response_model=HistoryResponse)
async def history(
    service: Annotated[ConversationService, Depends(get_service)],
    session_id: str | None = None,
) -> HistoryResponse:
    """Return the conversation history without calling the model."""
    return HistoryResponse(history=service.history(session_id=session_id))
