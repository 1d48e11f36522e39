"""NiceGUI chat interface over the /chat and /reset endpoints."""

from nicegui import events, ui

from gemchat.models.schemas import Attachment, Role, TurnStatus
from gemchat.staging.attachments import MAX_UPLOAD_SIZE, resolve_mime_type
from gemchat.ui.render import markdown_to_html, user_text_to_html
from gemchat.ui.session import (
    ChatApiClient,
    ChatApiError,
    ChatSession,
    DisplayTurn,
    preview_url,
)

ACCEPTED_FILES = ".pdf,.txt,.png,.jpg,.jpeg"

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }
    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }
    .header { background: linear-gradient(135deg, #4b90ff 0%, #ff5546 100%); }

    .message-user {
        background: linear-gradient(135deg, #4b90ff 0%, #6f7dff 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-failed { opacity: 0.6; border: 1px dashed #ef4444; }
    .message-model {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #4b90ff;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }
    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
    }
    .input-box:focus-within { border-color: #4b90ff; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()
    api = ChatApiClient()
    staged: dict[str, Attachment | None] = {"file": None}

    messages_container: ui.column
    preview_row: ui.row
    input_field: ui.input
    send_btn: ui.button
    upload: ui.upload

    def render_turn(turn: DisplayTurn) -> None:
        is_user = turn.role == Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-model"
        if turn.status == TurnStatus.FAILED:
            bubble += " message-failed"

        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if turn.preview_url:
                        ui.image(turn.preview_url).classes("w-48 rounded-lg mb-2")
                    elif turn.file_name:
                        ui.label(f"📄 {turn.file_name}").classes("text-xs mb-1")
                    if turn.text:
                        content = (
                            user_text_to_html(turn.text) if is_user else markdown_to_html(turn.text)
                        )
                        ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                footer = turn.time
                if turn.status == TurnStatus.FAILED:
                    footer += " · not delivered"
                ui.label(footer).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.turns:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.label("Hello").classes("text-3xl font-semibold text-gray-400")
                    ui.label("How can I assist you?").classes("text-lg text-gray-400")
            else:
                for turn in session.turns:
                    render_turn(turn)

    def render_typing() -> ui.row:
        with ui.row().classes("w-full justify-start") as row:
            with ui.element("div").classes("message-model px-4 py-3"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")
        return row

    def refresh_preview() -> None:
        preview_row.clear()
        attachment = staged["file"]
        preview_row.set_visibility(attachment is not None)
        if attachment is None:
            return
        with preview_row:
            if attachment.mime_type.startswith("image/"):
                ui.image(preview_url(attachment)).classes("w-12 h-12 rounded")
            else:
                ui.label("📄")
            ui.label(attachment.filename).classes("text-xs text-gray-600")
            ui.button(icon="close", on_click=remove_file).props("flat round dense size=sm")

    def remove_file() -> None:
        staged["file"] = None
        upload.reset()
        refresh_preview()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        if len(content) > MAX_UPLOAD_SIZE:
            ui.notify("File exceeds maximum allowed (10MB)", type="warning")
            upload.reset()
            return
        staged["file"] = Attachment(
            filename=e.file.name,
            mime_type=resolve_mime_type(e.file.name, e.file.content_type),
            content=content,
        )
        refresh_preview()

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        attachment = staged["file"]
        if (not text and attachment is None) or session.is_sending:
            return

        turn = session.begin_send(text, attachment)
        input_field.value = ""
        staged["file"] = None
        upload.reset()
        refresh_preview()
        send_btn.disable()
        refresh_messages()
        with messages_container:
            typing_row = render_typing()

        try:
            reply = await api.send(text, attachment, session_id=session.session_id)
        except ChatApiError as err:
            typing_row.delete()
            session.fail(turn)
            ui.notify(f"Failed to send message: {err}", type="negative")
        else:
            session.complete(reply)
        finally:
            send_btn.enable()
            refresh_messages()

    async def new_chat() -> None:
        session.clear()
        refresh_messages()
        try:
            await api.reset(session_id=session.session_id)
        except ChatApiError as err:
            ui.notify(f"Error resetting: {err}", type="warning")

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            ui.label("My Chatbot").classes("text-lg font-semibold text-white")
            ui.button("New chat", on_click=new_chat).props("flat color=white")

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")
            refresh_messages()

        # Input
        with ui.column().classes("w-full p-4 gap-2 bg-white border-t"):
            preview_row = ui.row().classes("items-center gap-2")
            with ui.row().classes("w-full gap-3 items-center"):
                upload = (
                    ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1)
                    .props(f'accept="{ACCEPTED_FILES}" flat dense')
                    .classes("w-40")
                )
                with ui.element("div").classes("flex-grow input-box px-3 py-1"):
                    input_field = (
                        ui.input(placeholder="Ask My Chatbot")
                        .props("borderless dense")
                        .classes("w-full")
                        .on("keydown.enter", send_message)
                    )
                send_btn = ui.button(icon="send", on_click=send_message).props(
                    "round unelevated color=primary"
                )
            refresh_preview()


def main() -> None:
    ui.run(title="My Chatbot", port=8080, reload=False)


if __name__ == "__main__":
    main()
