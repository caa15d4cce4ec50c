"""NiceGUI chat page streaming replies from the chat endpoint."""

import logging

from nicegui import ui

from chatline.store import MessageStore
from chatline.ui.client import ChatApiClient, submit_and_stream
from chatline.ui.state import ChatViewState, ViewMessage

logger = logging.getLogger(__name__)

ERROR_HINT = (
    "Ensure the API key and the database connection are configured correctly. "
    "Check server logs for more details."
)

CUSTOM_CSS = """
<style>
    body { background: #111827; min-height: 100vh; }

    .chat-container { background: #1f2937; border: 1px solid #374151; border-radius: 12px; }

    .message-user { background: #2563eb; color: white; border-radius: 18px 18px 4px 18px; }
    .message-assistant { background: #4b5563; color: white; border-radius: 18px 18px 18px 4px; }
    .message-other { background: #eab308; color: black; border-radius: 12px; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #d1d5db;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""

_BUBBLE_CLASSES = {"user": "message-user", "assistant": "message-assistant"}


def register_chat_page(store: MessageStore, api_client: ChatApiClient, path: str = "/") -> None:
    """Register the chat page at ``path``.

    The page loads persisted history from ``store`` on every visit, then
    hands control to a fresh ``ChatViewState`` that talks to the chat
    endpoint through ``api_client``.
    """

    @ui.page(path)
    async def chat_page() -> None:
        ui.add_head_html(CUSTOM_CSS)

        # Degrades to an empty thread when the store is unreachable
        history = await store.fetch_ordered()
        logger.info(f"Chat page loaded with {len(history)} stored messages")
        state = ChatViewState(history)

        messages_container: ui.column
        scroll_area: ui.scroll_area
        rendered: dict[str, ui.element] = {}

        def render_message(message: ViewMessage) -> None:
            is_user = message.role == "user"
            bubble = _BUBBLE_CLASSES.get(message.role, "message-other")
            with ui.row().classes(f"w-full {'justify-end' if is_user else 'justify-start'}"):
                with ui.element("div").classes(f"max-w-[70%] px-4 py-2 {bubble}"):
                    if message.role == "assistant":
                        rendered[message.id] = ui.markdown(message.content)
                    else:
                        rendered[message.id] = ui.label(message.content).classes(
                            "whitespace-pre-wrap"
                        )

        def refresh_messages() -> None:
            rendered.clear()
            messages_container.clear()
            with messages_container:
                if not state.messages:
                    with ui.column().classes("w-full h-64 items-center justify-center"):
                        ui.label(
                            "No messages yet. Start chatting or try refreshing "
                            "if history isn't loading."
                        ).classes("text-gray-400")
                for message in state.messages:
                    render_message(message)

        def on_messages_changed() -> None:
            last = state.messages[-1] if state.messages else None
            if last is not None and last.id in rendered and len(rendered) == len(state.messages):
                element = rendered[last.id]
                if isinstance(element, ui.markdown):
                    element.set_content(last.content)
                else:
                    element.set_text(last.content)
            else:
                refresh_messages()
            scroll_area.scroll_to(percent=1.0)

        state.on_change(on_messages_changed)

        async def send_message() -> None:
            await submit_and_stream(state, api_client)

        # === UI Layout ===
        with ui.column().classes("w-full max-w-2xl mx-auto chat-container").style(
            "height: calc(100vh - 4rem)"
        ):
            with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
                messages_container = ui.column().classes("w-full gap-4 p-4")
                refresh_messages()

                # Waiting for the model's first token
                with ui.row().classes("w-full justify-start").bind_visibility_from(
                    state, "is_waiting"
                ):
                    with ui.element("div").classes("message-assistant px-4 py-2"):
                        with ui.row().classes("items-center gap-2"):
                            ui.label("AI is typing").classes("text-sm")
                            with ui.row().classes("gap-1"):
                                for _ in range(3):
                                    ui.element("div").classes("typing-dot")

            with ui.column().classes("w-full p-3 bg-red-900/30 text-red-400").bind_visibility_from(
                state, "error", backward=bool
            ):
                ui.label("Error:").classes("font-semibold")
                ui.label().bind_text_from(
                    state, "error", backward=lambda error: f"{error}. {ERROR_HINT}" if error else ""
                ).classes("text-sm")

            with ui.row().classes("w-full p-4 gap-3 items-center border-t border-gray-700"):
                (
                    ui.input(placeholder="Send a message...")
                    .props("dark outlined dense")
                    .classes("flex-grow")
                    .bind_value(state, "input_text")
                    .bind_enabled_from(state, "in_flight", backward=lambda busy: not busy)
                    .on("keydown.enter", send_message)
                )
                (
                    ui.button(on_click=send_message)
                    .bind_text_from(state, "send_label")
                    .bind_enabled_from(state, "can_submit")
                )

        scroll_area.scroll_to(percent=1.0)
