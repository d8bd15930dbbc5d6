"""NiceGUI chat interface for the companion session."""

import logging
from collections.abc import Awaitable, Callable

from nicegui import app, events, ui
from nicegui.client import Client

from companion.api.client import ConversationClient
from companion.app import AVATAR_ROUTE, IMAGE_CACHE_ROUTE
from companion.config import get_client_config
from companion.session import Alert, ChatSession, DisplayMessage, ExchangeStatus, ResolvedAvatar
from companion.storage.image_cache import ImageCacheError

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<style>
    .chat-shell {
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.15);
        overflow: hidden;
    }

    .bubble-user {
        background: #7c5cff;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .bubble-assistant {
        background: rgba(127, 127, 127, 0.15);
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-frame {
        width: 220px;
        height: 220px;
        border-radius: 16px;
        overflow: hidden;
    }

    .bubble-image { max-width: 240px; border-radius: 12px; }
</style>
"""


@ui.page("/")
async def chat_page(client: Client) -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    messages_container: ui.column
    scroll_area: ui.scroll_area
    avatar_frame: ui.element
    attachment_chip: ui.label
    input_field: ui.textarea
    send_btn: ui.button
    upload: ui.upload

    def show_alert(alert: Alert) -> None:
        with messages_container:
            ui.notify(alert.message, type="negative")

    def render_avatar(avatar: ResolvedAvatar) -> None:
        src = f"{AVATAR_ROUTE}/{avatar.filename}"
        avatar_frame.clear()
        with avatar_frame:
            if avatar.is_animated:
                ui.video(src, controls=False, autoplay=True, muted=True, loop=True).classes(
                    "w-full h-full"
                )
            else:
                ui.image(src).classes("w-full h-full")

    config = get_client_config()
    session = ChatSession(
        ConversationClient(config),
        preferences=app.storage.general,
        on_alert=show_alert,
        on_avatar=render_avatar,
    )
    dark = ui.dark_mode(value=not session.theme.is_light)

    def render_message(msg: DisplayMessage) -> None:
        is_user = msg.role == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "bubble-user" if is_user else "bubble-assistant"

        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes(f"max-w-[70%] gap-2 px-4 py-3 {bubble}"):
                if msg.image_path:
                    try:
                        session.image_cache.resolve(msg.image_path)
                    except ImageCacheError:
                        ui.label(f"[image: {msg.image_path}]").classes("text-xs italic")
                    else:
                        ui.image(f"{IMAGE_CACHE_ROUTE}/{msg.image_path}").classes(
                            "bubble-image"
                        )
                if is_user:
                    ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
                else:
                    ui.markdown(msg.content).classes("text-sm")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not len(session.timeline):
                with ui.column().classes("w-full h-64 items-center justify-center"):
                    ui.icon("forum").classes("text-5xl text-gray-400")
                    ui.label("Say hello").classes("text-lg text-gray-400")
            for msg in session.timeline.messages:
                render_message(msg)
        scroll_area.scroll_to(percent=1.0)

    def refresh_attachment() -> None:
        pending = session.attachments.peek_for_send()
        attachment_chip.set_text(f"Attached: {pending.filename}" if pending else "")
        attachment_chip.set_visibility(pending is not None)

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or session.state.busy:
            return

        input_field.value = ""
        send_btn.disable()
        upload.disable()
        try:
            status = await session.send(text)
        finally:
            send_btn.enable()
            upload.enable()
            refresh_attachment()

        if status is ExchangeStatus.FAILED:
            input_field.value = text

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        try:
            session.attach_image(e.file.name, content)
        except ImageCacheError as err:
            logger.error(f"Failed to attach image: {err}")
            ui.notify("Failed to attach image.", type="negative")
        refresh_attachment()

    def clear_attachment() -> None:
        session.attachments.clear()
        refresh_attachment()

    def toggle_theme() -> None:
        dark.set_value(not session.theme.toggle())

    async def run_action(action: Callable[[], Awaitable[object]]) -> None:
        if session.state.busy:
            ui.notify("Please wait for the current action to finish.")
            return
        await action()

    # === UI Layout ===
    with ui.row().classes("w-full h-screen p-4 gap-4 no-wrap"):
        with ui.column().classes("items-center gap-3"):
            avatar_frame = ui.element("div").classes("avatar-frame")
            with ui.row().classes("gap-1"):
                ui.button(icon="contrast", on_click=toggle_theme).props("flat round")
                with ui.button(icon="more_vert").props("flat round"):
                    with ui.menu():
                        ui.menu_item(
                            "Proactive message",
                            on_click=lambda: run_action(session.send_proactive),
                        )
                        ui.menu_item("Web search", on_click=lambda: run_action(session.web_search))
                        ui.menu_item("Reminisce", on_click=lambda: run_action(session.reminisce))
                        ui.menu_item("Summarize", on_click=lambda: run_action(session.summarize))

        with ui.column().classes("flex-grow h-full chat-shell"):
            with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
                messages_container = ui.column().classes("w-full gap-3 p-4")

            with ui.row().classes("w-full p-3 gap-2 items-end border-t"):
                upload = ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1).props(
                    "accept=image/* flat dense"
                ).classes("w-48")
                with ui.column().classes("flex-grow gap-1"):
                    with ui.row().classes("items-center gap-1"):
                        attachment_chip = ui.label().classes("text-xs text-gray-500")
                        ui.button(icon="close", on_click=clear_attachment).props(
                            "flat round dense size=sm"
                        ).bind_visibility_from(attachment_chip, "visible")
                    input_field = (
                        ui.textarea(placeholder="Type a message...")
                        .props("autogrow borderless dense rows=1")
                        .classes("w-full")
                        .on("keydown.enter.prevent", send_message)
                    )
                send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")

    refresh_attachment()
    refresh_messages()
    session.timeline.subscribe(lambda _: refresh_messages())

    # The session lives as long as the page, across websocket reconnects
    client.on_delete(session.close)
    send_btn.disable()
    upload.disable()
    await client.connected()
    try:
        await session.start()
    finally:
        send_btn.enable()
        upload.enable()
