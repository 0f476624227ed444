"""Common reusable UI components."""

from collections.abc import Callable

from nicegui import ui

from softdreams.ui.theme import get_text_class
from softdreams.utils.exceptions import SoftDreamsError


def empty_state(
    icon: str,
    title: str,
    description: str,
    action_text: str | None = None,
    on_action: Callable[[], None] | None = None,
) -> None:
    """Create an empty state display.

    Args:
        icon: Material icon name.
        title: Empty state title.
        description: Empty state description.
        action_text: Optional action button text.
        on_action: Optional action callback.
    """
    with ui.column().classes("w-full items-center justify-center gap-4 py-12"):
        ui.icon(icon, size="xl").classes("text-violet-300")
        ui.label(title).classes(f"text-xl {get_text_class('secondary')}")
        ui.label(description).classes(get_text_class("muted"))
        if action_text and on_action:
            ui.button(action_text, on_click=on_action).props("color=primary rounded")


def error_banner(error: SoftDreamsError) -> None:
    """Inline banner for an error surfaced by a view-model."""
    with ui.row().classes("w-full items-center gap-2 p-3 rounded-lg bg-red-50 text-red-700"):
        ui.icon("error_outline")
        ui.label(error.user_message)


def notify_error(error: SoftDreamsError) -> None:
    """Show *error* as a negative toast."""
    ui.notify(error.user_message, type="negative")
