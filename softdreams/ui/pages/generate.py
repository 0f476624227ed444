"""Generate page - story options, quota and the freshly generated story."""

import logging

from nicegui import ui
from nicegui.elements.column import Column

from softdreams.memory.generation_config import GenerationModel
from softdreams.memory.story import StoryLength
from softdreams.services import ServiceContainer
from softdreams.ui.components.common import error_banner, notify_error
from softdreams.ui.components.story_card import app_card, reading_time_label
from softdreams.ui.state import AppState
from softdreams.ui.theme import get_text_class
from softdreams.ui.view_models import StoryGenerationViewModel

logger = logging.getLogger(__name__)


def parse_characters(text: str | None) -> list[str]:
    """Split a comma-separated character list."""
    if not text:
        return []
    return [name.strip() for name in text.split(",") if name.strip()]


def remaining_label(remaining: int) -> str:
    """Quota caption under the generate button."""
    if remaining <= 0:
        return "No stories left today - come back tomorrow"
    if remaining == 1:
        return "1 story left today"
    return f"{remaining} stories left today"


class GeneratePage:
    """Story generation page."""

    def __init__(self, state: AppState, services: ServiceContainer):
        """Initialize generate page.

        Args:
            state: Application state.
            services: Service container.
        """
        self.state = state
        self.services = services
        self.view_model = StoryGenerationViewModel(services=services)
        self._result: Column | None = None

    def build(self) -> None:
        """Build the generate page UI."""
        vm = self.view_model
        vm.load()
        ui.context.client.on_disconnect(vm.close)

        with ui.column().classes("w-full max-w-3xl mx-auto gap-4 p-4"):
            ui.label("Create a bedtime story").classes(f"text-2xl font-bold {get_text_class()}")

            with app_card(self.state.dark_mode):
                themes = vm.suggested_themes or [vm.theme]
                if vm.theme not in themes:
                    vm.theme = themes[0]
                ui.select(themes, label="Theme", new_value_mode="add-unique").bind_value(
                    vm, "theme"
                ).classes("w-full")

                ui.toggle(
                    {length: length.display_name for length in StoryLength},
                ).bind_value(vm, "length")

                ui.input(
                    "Characters",
                    placeholder="e.g. Grandma, Teddy",
                    on_change=lambda e: setattr(vm, "characters", parse_characters(e.value)),
                ).classes("w-full")
                ui.input("Lesson (optional)", placeholder="e.g. sharing").bind_value(
                    vm, "lesson"
                ).classes("w-full")

                ui.select(
                    {model: model.display_name for model in vm.available_models},
                    label="Storyteller",
                    value=vm.config.selected_model if vm.config else GenerationModel.TEMPLATE,
                    on_change=lambda e: self._select_model(e.value),
                ).classes("w-full")

            with ui.row().classes("items-center gap-4"):
                ui.button("Create story", icon="auto_awesome", on_click=self._generate).props(
                    "color=primary rounded"
                ).bind_enabled_from(vm, "is_generating", lambda busy: not busy)
                ui.button("Today's story", icon="today", on_click=self._generate_daily).props(
                    "flat rounded"
                ).bind_enabled_from(vm, "is_generating", lambda busy: not busy)
                ui.spinner(size="md").bind_visibility_from(vm, "is_generating")
            ui.label().bind_text_from(vm, "remaining_generations", remaining_label).classes(
                f"text-sm {get_text_class('muted')}"
            )

            self._result = ui.column().classes("w-full gap-2")

    def _select_model(self, model: GenerationModel) -> None:
        if not self.view_model.select_model(model) and self.view_model.error is not None:
            notify_error(self.view_model.error)

    async def _generate(self) -> None:
        await self.view_model.generate_story()
        self._show_result()

    async def _generate_daily(self) -> None:
        await self.view_model.generate_daily_story()
        self._show_result()

    def _show_result(self) -> None:
        """Render the generated story or the error."""
        if self._result is None:
            return
        vm = self.view_model
        self._result.clear()
        with self._result:
            if vm.error is not None:
                error_banner(vm.error)
                return
            story = vm.generated_story
            if story is None:
                return
            with app_card(self.state.dark_mode):
                ui.label(story.title).classes(f"text-xl font-bold {get_text_class()}")
                ui.label(reading_time_label(story.reading_time)).classes(
                    f"text-xs {get_text_class('muted')}"
                )
                for paragraph in story.content.split("\n\n"):
                    ui.label(paragraph).classes(f"leading-relaxed {get_text_class()}")
                ui.link("Open in library", f"/story/{story.story_id}")
        ui.notify("Your story is ready", type="positive")
