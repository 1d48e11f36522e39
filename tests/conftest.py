"""Pytest fixtures and shared test configuration.

Fixtures:
    - fake_model: Recording stand-in for the Gemini client
    - chat_config: Config with a test key and a temporary upload dir
    - service: ConversationService wired to fake_model
    - async_client: HTTPX client bound to an app using that service
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from gemchat.agent.config import ChatConfig
from gemchat.agent.conversation import ConversationService
from gemchat.api.app import create_app
from gemchat.errors import ModelError
from gemchat.models.schemas import Part


class FakeModelClient:
    """Model client that records every prompt and replies from a script.

    Attributes:
        calls: Prompt parts received, one list per call.
        fail_with: Exception to raise on the next call, then cleared.
    """

    def __init__(self) -> None:
        self.calls: list[list[Part]] = []
        self.fail_with: Exception | None = None

    async def generate(self, parts: list[Part]) -> str:
        self.calls.append(list(parts))
        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            raise error
        return f"reply {len(self.calls)}"


@pytest.fixture
def fake_model() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def chat_config(upload_dir: Path) -> ChatConfig:
    """Return config that never reads a real key from the environment."""
    return ChatConfig(
        api_key="test-key",
        upload_dir=str(upload_dir),
        max_context_turns=None,
    )


@pytest.fixture
def service(fake_model: FakeModelClient, chat_config: ChatConfig) -> ConversationService:
    return ConversationService(fake_model, config=chat_config)


@pytest.fixture
async def async_client(service: ConversationService) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=create_app(service))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def model_error() -> ModelError:
    return ModelError("quota exceeded")
