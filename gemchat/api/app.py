"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error handling and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gemchat.agent.conversation import ConversationService, get_conversation_service
from gemchat.api.routes import router as chat_router
from gemchat.errors import ChatError
from gemchat.models.schemas import ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Builds the conversation service on startup so a missing API key stops
    the server before it accepts requests.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting gemchat API...")
    if app.state.service is None:
        app.state.service = get_conversation_service()
    logger.info(f"Using model {app.state.service.config.model_name}")
    yield
    # Shutdown
    logger.info("Shutting down gemchat API...")


async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    """Convert a ChatError into the structured ``{error}`` body."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc) or "Something went wrong").model_dump(),
    )


def create_app(service: ConversationService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        service: Optional conversation service. Built from the environment
                 at startup when not provided.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="gemchat API",
        description=(
            "Minimal chat proxy over Google Gemini. Accumulates conversation "
            "turns, forwards them with optional file attachments and returns "
            "the reply together with the updated history."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.service = service

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(ChatError, chat_error_handler)
    application.include_router(chat_router)

    @application.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Check service health status."""
        return HealthResponse(status="healthy", service="gemchat")

    return application


app = create_app()
