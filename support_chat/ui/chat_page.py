"""NiceGUI support widget: floating launcher, chat window and follow-up suggestions."""

import os

from nicegui import ui

from support_chat.models.schemas import Message
from support_chat.ui.session import ChatSession

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: linear-gradient(135deg, #f9fafb 0%, #eff6ff 100%); min-height: 100vh; }

    .launcher {
        position: fixed; bottom: 1.5rem; right: 1.5rem; z-index: 50;
        background: linear-gradient(135deg, #2563eb 0%, #1d4ed8 100%) !important;
    }

    .widget {
        position: fixed; bottom: 1.5rem; right: 1.5rem; z-index: 50;
        width: 400px; background: white;
        border-radius: 16px;
        box-shadow: 0 20px 40px rgba(0, 0, 0, 0.2);
        overflow: hidden;
        transition: height 0.2s;
    }
    .widget-open { height: 600px; }
    .widget-minimized { height: 60px; }

    .header { background: linear-gradient(90deg, #2563eb 0%, #1d4ed8 100%); }

    .message-user {
        background: #2563eb;
        color: white;
        border-radius: 16px 4px 16px 16px;
    }

    .message-agent {
        background: white;
        color: #1f2937;
        border: 1px solid #e5e7eb;
        border-radius: 4px 16px 16px 16px;
    }

    .avatar-agent { background: linear-gradient(135deg, #3b82f6 0%, #2563eb 100%); }

    .typing-dot {
        width: 8px; height: 8px;
        background: #3b82f6;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.15s; }
    .typing-dot:nth-child(3) { animation-delay: 0.3s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .suggestion {
        color: #2563eb; background: #eff6ff;
        border: 1px solid #bfdbfe; border-radius: 8px;
    }
    .suggestion:hover { background: #dbeafe; }
</style>
"""


def format_confidence(confidence: float) -> str:
    """Render a [0, 1] confidence as a whole percentage, e.g. "90%"."""
    return f"{confidence * 100:.0f}%"


@ui.page("/")
def chat_page() -> None:
    """Support widget page."""
    ui.add_head_html(CUSTOM_CSS)

    state = {"open": False, "minimized": False}

    messages_container: ui.column
    suggestions_container: ui.column
    scroll_area: ui.scroll_area
    input_field: ui.input
    send_btn: ui.button

    def render_avatar() -> None:
        with ui.element("div").classes(
            "w-8 h-8 rounded-full flex items-center justify-center shrink-0 avatar-agent"
        ):
            ui.icon("chat_bubble").classes("text-white text-base")

    def render_message(msg: Message) -> None:
        if msg.role == "user":
            with ui.row().classes("w-full justify-end"):
                with ui.column().classes("max-w-[75%] gap-1 items-end"):
                    with ui.element("div").classes("px-4 py-2 message-user"):
                        ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
                    ui.label(msg.timestamp).classes("text-[10px] text-gray-400")
            return

        with ui.row().classes("w-full justify-start gap-2 no-wrap"):
            render_avatar()
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes("px-4 py-2 message-agent"):
                    ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
                    if msg.confidence is not None:
                        ui.separator().classes("my-2")
                        ui.label(f"Confidence: {format_confidence(msg.confidence)}").classes(
                            "text-xs text-gray-500"
                        )
                ui.label(msg.timestamp).classes("text-[10px] text-gray-400")

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start gap-2 no-wrap"):
            render_avatar()
            with (
                ui.element("div").classes("message-agent px-4 py-3"),
                ui.row().classes("gap-1"),
            ):
                for _ in range(3):
                    ui.element("div").classes("typing-dot")

    def refresh() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full items-center py-8 gap-1"):
                    render_avatar()
                    ui.label("Welcome to Support").classes("font-semibold text-gray-800 mt-2")
                    ui.label("How can we help you today?").classes("text-sm text-gray-500")
            for msg in session.messages:
                render_message(msg)
            if session.loading:
                render_typing_indicator()

        suggestions_container.clear()
        show_suggestions = bool(session.suggestions) and not session.loading
        suggestions_container.set_visibility(show_suggestions)
        if show_suggestions:
            with suggestions_container:
                ui.label("Suggested questions:").classes("text-xs text-gray-500 font-medium")
                for suggestion in session.suggestions:
                    ui.button(
                        suggestion,
                        on_click=lambda s=suggestion: session.select_suggestion(s),
                    ).props("flat no-caps align=left").classes("w-full text-sm suggestion")

        input_field.set_enabled(not session.loading)
        send_btn.set_enabled(not session.loading)
        scroll_area.scroll_to(percent=1.0)

    session = ChatSession(on_change=lambda: refresh())

    async def send() -> None:
        text = input_field.value or ""
        if not text.strip() or session.loading:
            return
        input_field.value = ""
        await session.send_message(text)

    def apply_window_state() -> None:
        launcher.set_visibility(not state["open"])
        window.set_visibility(state["open"])
        window.classes(
            replace="widget "
            + ("widget-minimized" if state["minimized"] else "widget-open")
            + " flex flex-col gap-0"
        )
        body.set_visibility(not state["minimized"])

    def open_widget() -> None:
        state["open"] = True
        apply_window_state()

    def toggle_minimized() -> None:
        state["minimized"] = not state["minimized"]
        apply_window_state()

    def close_widget() -> None:
        state["open"] = False
        state["minimized"] = False
        apply_window_state()

    # === UI Layout ===
    launcher = (
        ui.button(icon="chat_bubble", on_click=open_widget)
        .props("round size=lg color=primary")
        .classes("launcher")
    )

    with ui.column().classes("widget widget-open flex flex-col gap-0") as window:
        # Header
        with ui.row().classes("w-full header px-4 py-3 items-center justify-between no-wrap"):
            with ui.row().classes("items-center gap-2"):
                render_avatar()
                with ui.column().classes("gap-0"):
                    ui.label("Support").classes("text-white font-semibold text-sm")
                    ui.label("We're here to help").classes("text-blue-100 text-xs")
            with ui.row().classes("items-center gap-1"):
                ui.button(icon="remove", on_click=toggle_minimized).props(
                    "flat round dense color=white"
                )
                ui.button(icon="close", on_click=close_widget).props(
                    "flat round dense color=white"
                )

        with ui.column().classes("w-full flex-grow gap-0") as body:
            # Messages
            with ui.scroll_area().classes("flex-grow w-full bg-gray-50") as scroll_area:
                messages_container = ui.column().classes("w-full p-4 gap-4")

            # Follow-up suggestions
            suggestions_container = ui.column().classes(
                "w-full px-4 py-3 gap-2 bg-white border-t"
            )

            # Input
            with ui.row().classes("w-full p-4 gap-2 items-center bg-white border-t no-wrap"):
                input_field = (
                    ui.input(placeholder="Type your message...")
                    .props("outlined dense")
                    .classes("flex-grow")
                    .on("keydown.enter", send)
                )
                send_btn = ui.button(icon="send", on_click=send).props("unelevated color=primary")

    apply_window_state()
    refresh()


def main() -> None:
    """Serve the widget on its own, talking to the API at API_BASE_URL."""
    ui.run(title="Support", port=int(os.getenv("WIDGET_PORT", "8080")), reload=False)


if __name__ == "__main__":
    main()
