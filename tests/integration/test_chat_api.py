"""Integration tests for the chat proxy HTTP surface.

Runs the real FastAPI app over httpx ASGITransport with a fake model
client standing in for Gemini.
"""

from pathlib import Path

import pytest
import pytest_check as check
from httpx import ASGITransport, AsyncClient

from gemchat.agent.conversation import ConversationService
from gemchat.api.app import create_app
from gemchat.errors import AttachmentError, ModelError
from gemchat.models.schemas import ChatResponse, InlineDataPart
from gemchat.staging.attachments import MAX_UPLOAD_SIZE
from gemchat.ui.session import ChatApiClient, ChatApiError

from tests.conftest import FakeModelClient

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class TestChatEndpoint:
    """Tests for POST /chat."""

    async def test_text_message(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/chat", data={"message": "Hi"})

        assert response.status_code == 200
        body = ChatResponse.model_validate(response.json())
        check.equal(body.reply, "reply 1")
        check.equal([t.role.value for t in body.history], ["user", "model"])
        check.equal(body.history[0].text, "Hi")
        check.equal(body.history[1].text, "reply 1")

    async def test_file_only(
        self,
        async_client: AsyncClient,
        fake_model: FakeModelClient,
        upload_dir: Path,
    ) -> None:
        response = await async_client.post(
            "/chat", files={"file": ("image.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 200
        history = response.json()["history"]
        assert history[0]["parts"] == [{"text": "[User uploaded file: image.png]"}]
        assert history[1]["role"] == "model"

        inline = [p for p in fake_model.calls[0] if isinstance(p, InlineDataPart)]
        assert len(inline) == 1
        assert inline[0].inline_data.mime_type == "image/png"
        assert list(upload_dir.iterdir()) == []

    async def test_message_and_file(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/chat",
            data={"message": "What is in this file?"},
            files={"file": ("notes.txt", b"remember the milk", "text/plain")},
        )

        assert response.status_code == 200
        texts = [t["parts"][0]["text"] for t in response.json()["history"]]
        assert texts == ["What is in this file?", "[User uploaded file: notes.txt]", "reply 1"]

    async def test_history_accumulates_across_calls(self, async_client: AsyncClient) -> None:
        for message in ["one", "two", "three"]:
            response = await async_client.post("/chat", data={"message": message})

        assert len(response.json()["history"]) == 6

    async def test_empty_submission_returns_400(
        self, async_client: AsyncClient, fake_model: FakeModelClient
    ) -> None:
        response = await async_client.post("/chat", data={"message": "   "})

        assert response.status_code == 400
        assert "error" in response.json()
        assert fake_model.calls == []

    async def test_no_fields_returns_400(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/chat")

        assert response.status_code == 400

    async def test_oversized_file_returns_413(
        self, async_client: AsyncClient, fake_model: FakeModelClient
    ) -> None:
        response = await async_client.post(
            "/chat",
            files={"file": ("big.bin", b"\x00" * (MAX_UPLOAD_SIZE + 1), "application/octet-stream")},
        )

        assert response.status_code == 413
        assert "exceeds maximum" in response.json()["error"]
        assert fake_model.calls == []

    async def test_model_failure_returns_500_and_keeps_user_turn(
        self, async_client: AsyncClient, fake_model: FakeModelClient
    ) -> None:
        fake_model.fail_with = ModelError("quota exceeded")

        failed = await async_client.post("/chat", data={"message": "X"})

        assert failed.status_code == 500
        assert failed.json() == {"error": "quota exceeded"}

        response = await async_client.post("/chat", data={"message": "Y"})
        history = response.json()["history"]
        check.equal([t["parts"][0]["text"] for t in history], ["X", "Y", "reply 2"])
        check.equal(
            [t["role"] for t in history],
            ["user", "user", "model"],
        )
        check.equal(history[0]["status"], "failed")

    async def test_staged_file_deleted_when_model_fails(
        self,
        async_client: AsyncClient,
        fake_model: FakeModelClient,
        upload_dir: Path,
    ) -> None:
        fake_model.fail_with = ModelError("boom")

        response = await async_client.post(
            "/chat", files={"file": ("image.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 500
        assert list(upload_dir.iterdir()) == []

    async def test_staging_failure_returns_500(
        self,
        async_client: AsyncClient,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def broken(*args, **kwargs):
            raise AttachmentError("Could not read file image.png")

        monkeypatch.setattr("gemchat.api.routes.build_attachment", broken)

        response = await async_client.post(
            "/chat", files={"file": ("image.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Could not read file image.png"}

    async def test_unexpected_error_is_structured(
        self,
        async_client: AsyncClient,
        service: ConversationService,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def explode(**kwargs):
            raise KeyError("history")

        monkeypatch.setattr(service, "submit", explode)

        response = await async_client.post("/chat", data={"message": "Hi"})

        assert response.status_code == 500
        assert "error" in response.json()

    async def test_sessions_are_separate(self, async_client: AsyncClient) -> None:
        await async_client.post("/chat", data={"message": "Hi", "session_id": "a"})
        response = await async_client.post("/chat", data={"message": "Hi", "session_id": "b"})

        assert len(response.json()["history"]) == 2


class TestResetAndHistory:
    """Tests for POST /reset and GET /history."""

    async def test_reset_clears_history(self, async_client: AsyncClient) -> None:
        await async_client.post("/chat", data={"message": "Hi"})

        response = await async_client.post("/reset")

        assert response.status_code == 200
        assert response.json() == {"message": "Chat history cleared"}
        history = await async_client.get("/history")
        assert history.json() == {"history": []}

    async def test_reset_is_idempotent(self, async_client: AsyncClient) -> None:
        first = await async_client.post("/reset")
        second = await async_client.post("/reset")

        assert first.status_code == second.status_code == 200

    async def test_history_for_session(self, async_client: AsyncClient) -> None:
        await async_client.post("/chat", data={"message": "Hi", "session_id": "s1"})

        response = await async_client.get("/history", params={"session_id": "s1"})

        assert len(response.json()["history"]) == 2
        default = await async_client.get("/history")
        assert default.json()["history"] == []


class TestAppSurface:
    async def test_health(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/health")

        assert response.json() == {"status": "healthy", "service": "gemchat"}

    async def test_cors_headers_present(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/reset", headers={"Origin": "http://localhost:3000"}
        )

        assert "access-control-allow-origin" in response.headers

    async def test_wrong_http_method_returns_405(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/chat")

        assert response.status_code == 405


class TestClientAgainstApp:
    """The UI's API client talking to the real app."""

    @pytest.fixture
    def api(self, service: ConversationService) -> ChatApiClient:
        transport = ASGITransport(app=create_app(service))
        return ChatApiClient("http://test", transport=transport)

    async def test_send_and_reset(self, api: ChatApiClient, service: ConversationService) -> None:
        reply = await api.send("Hi", session_id="tab-1")
        await api.reset(session_id="tab-1")

        assert reply == "reply 1"
        assert service.history("tab-1") == []

    async def test_failure_surfaces_error(
        self, api: ChatApiClient, fake_model: FakeModelClient
    ) -> None:
        fake_model.fail_with = ModelError("quota exceeded")

        with pytest.raises(ChatApiError, match="quota exceeded"):
            await api.send("Hi")


async def test_history_lookup_does_not_create_sessions(
    async_client: AsyncClient, service: ConversationService
) -> None:
    response = await async_client.get("/history", params={"session_id": "random-id"})

    assert response.json() == {"history": []}
    assert "random-id" not in service.store
