"""Library page - saved stories with search and favorites filter."""

import logging

from nicegui import ui
from nicegui.elements.column import Column

from softdreams.services import ServiceContainer
from softdreams.ui.components.common import empty_state, error_banner
from softdreams.ui.components.story_card import StoryCard
from softdreams.ui.state import AppState
from softdreams.ui.theme import get_text_class
from softdreams.ui.view_models import LibraryViewModel

logger = logging.getLogger(__name__)


class LibraryPage:
    """Story library page."""

    def __init__(self, state: AppState, services: ServiceContainer):
        """Initialize library page.

        Args:
            state: Application state.
            services: Service container.
        """
        self.state = state
        self.services = services
        self.view_model = LibraryViewModel(services=services)
        self._list: Column | None = None

    def build(self) -> None:
        """Build the library page UI."""
        vm = self.view_model
        ui.context.client.on_disconnect(vm.close)

        with ui.column().classes("w-full max-w-3xl mx-auto gap-4 p-4"):
            with ui.row().classes("w-full items-center"):
                ui.label("Story library").classes(f"text-2xl font-bold {get_text_class()}")
                ui.space()
                ui.switch("Favorites only").bind_value(vm, "show_favorites_only")
            ui.input("Search", placeholder="Title, theme or character").bind_value(
                vm, "search_query"
            ).props("clearable").classes("w-full")

            self._list = ui.column().classes("w-full gap-3")

        vm.subscribe(lambda _name, _value: self._render())
        vm.load_stories()

    def _render(self) -> None:
        if self._list is None:
            return
        vm = self.view_model
        self._list.clear()
        with self._list:
            if vm.error is not None:
                error_banner(vm.error)
            stories = vm.visible_stories
            if not stories:
                if vm.stories:
                    empty_state("search_off", "No matching stories", "Try another search.")
                else:
                    empty_state(
                        icon="menu_book",
                        title="Your library is empty",
                        description="Stories you create are saved here.",
                        action_text="Create a story",
                        on_action=lambda: ui.navigate.to("/generate"),
                    )
                return
            today = self.services.clock().date()
            for story in stories:
                StoryCard(
                    story,
                    today,
                    on_favorite=vm.toggle_favorite,
                    on_delete=self._confirm_delete,
                    dark_mode=self.state.dark_mode,
                ).build()

    def _confirm_delete(self, story_id: str) -> None:
        """Ask before deleting a story."""
        with ui.dialog() as dialog, ui.card():
            ui.label("Delete this story?").classes("text-lg font-semibold")
            ui.label("This cannot be undone.").classes(get_text_class("secondary"))
            with ui.row().classes("w-full justify-end gap-2"):
                ui.button("Cancel", on_click=dialog.close).props("flat")

                def delete() -> None:
                    dialog.close()
                    self.view_model.delete_story(story_id)
                    ui.notify("Story deleted", type="info")

                ui.button("Delete", on_click=delete).props("color=negative")
        dialog.open()
