"""Story reader page - full text of one saved story."""

import logging

from nicegui import ui

from softdreams.services import ServiceContainer
from softdreams.ui.components.common import empty_state, notify_error
from softdreams.ui.components.story_card import app_card, reading_time_label, story_badges
from softdreams.ui.state import AppState
from softdreams.ui.theme import COLORS, get_text_class
from softdreams.utils.exceptions import AppError

logger = logging.getLogger(__name__)


def split_paragraphs(content: str) -> list[str]:
    """Paragraphs of a story, ignoring blank runs."""
    return [p.strip() for p in content.split("\n\n") if p.strip()]


class StoryReaderPage:
    """Reading view for a single story."""

    def __init__(self, state: AppState, services: ServiceContainer, story_id: str):
        self.state = state
        self.services = services
        self.story_id = story_id

    def build(self) -> None:
        """Build the reader UI."""
        try:
            story = self.services.story.get_story(self.story_id)
        except AppError as e:
            logger.error("Failed to open story %s: %s", self.story_id, e)
            notify_error(e)
            story = None

        with ui.column().classes("w-full max-w-2xl mx-auto gap-4 p-4"):
            if story is None:
                empty_state(
                    icon="search_off",
                    title="Story not found",
                    description="It may have been deleted.",
                    action_text="Back to library",
                    on_action=lambda: ui.navigate.to("/library"),
                )
                return

            with app_card(self.state.dark_mode):
                with ui.row().classes("w-full items-center"):
                    ui.label(story.title).classes(f"text-2xl font-bold {get_text_class()}")
                    ui.space()
                    favorite = ui.button(
                        icon="favorite" if story.is_favorite else "favorite_border",
                    ).props("flat round").style(f"color: {COLORS['favorite']}")
                    favorite.on_click(lambda: self._toggle_favorite(favorite))
                with ui.row().classes("gap-2"):
                    for badge in story_badges(story):
                        ui.badge(badge).props("outline color=primary")
                    ui.label(reading_time_label(story.reading_time)).classes(
                        f"text-xs {get_text_class('muted')}"
                    )
                for paragraph in split_paragraphs(story.content):
                    ui.label(paragraph).classes(f"text-lg leading-relaxed {get_text_class()}")

    def _toggle_favorite(self, button: ui.button) -> None:
        try:
            story = self.services.story.toggle_favorite(self.story_id)
        except AppError as e:
            notify_error(e)
            return
        button.props(f"icon={'favorite' if story.is_favorite else 'favorite_border'}")
        logger.debug("Favorite toggled for %s: %s", self.story_id, story.is_favorite)
