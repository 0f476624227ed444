"""Story card component and its display helpers."""

from collections.abc import Callable
from datetime import date

from nicegui import ui

from softdreams.memory.story import Story
from softdreams.ui.theme import COLORS, get_card_style, get_text_class


def format_story_date(story: Story, today: date) -> str:
    """Relative date label: "Today", "Yesterday", or e.g. "Mar 4, 2026"."""
    created = story.date.date()
    delta = (today - created).days
    if delta == 0:
        return "Today"
    if delta == 1:
        return "Yesterday"
    if 1 < delta < 7:
        return created.strftime("%A")
    return f"{created.strftime('%b')} {created.day}, {created.year}"


def reading_time_label(minutes: int) -> str:
    """Human-readable reading time."""
    return "1 min read" if minutes <= 1 else f"{minutes} min read"


def story_badges(story: Story) -> list[str]:
    """Short labels shown under the title: theme, length and age range."""
    badges = [story.theme] if story.theme else []
    badges.append(story.length.value.capitalize())
    badges.append(story.age_range.display_name)
    return badges


def app_card(dark_mode: bool = False):
    """Card with the soft gradient background used across the app.

    Returns:
        The card element, for use as a context manager.
    """
    return ui.card().classes("w-full shadow-md").style(get_card_style(dark_mode))


class StoryCard:
    """Library and home list entry for one story."""

    def __init__(
        self,
        story: Story,
        today: date,
        on_favorite: Callable[[str], None] | None = None,
        on_delete: Callable[[str], None] | None = None,
        dark_mode: bool = False,
    ):
        self.story = story
        self.today = today
        self.on_favorite = on_favorite
        self.on_delete = on_delete
        self.dark_mode = dark_mode

    def build(self) -> None:
        """Build the card UI."""
        story = self.story
        with app_card(self.dark_mode):
            with ui.row().classes("w-full items-start gap-2"):
                with ui.link(target=f"/story/{story.story_id}").classes("flex-grow no-underline"):
                    ui.label(story.title).classes(f"text-lg font-semibold {get_text_class()}")
                    ui.label(story.excerpt()).classes(f"text-sm {get_text_class('secondary')}")
                if self.on_favorite:
                    icon = "favorite" if story.is_favorite else "favorite_border"
                    ui.button(
                        icon=icon,
                        on_click=lambda: self.on_favorite(story.story_id),
                    ).props("flat round dense").style(f"color: {COLORS['favorite']}")
                if self.on_delete:
                    ui.button(
                        icon="delete_outline",
                        on_click=lambda: self.on_delete(story.story_id),
                    ).props("flat round dense color=grey")

            with ui.row().classes("items-center gap-2 mt-1"):
                for badge in story_badges(story):
                    ui.badge(badge).props("outline color=primary")
                ui.label(format_story_date(story, self.today)).classes(
                    f"text-xs {get_text_class('muted')}"
                )
                ui.label(reading_time_label(story.reading_time)).classes(
                    f"text-xs {get_text_class('muted')}"
                )
