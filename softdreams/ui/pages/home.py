"""Home page - greeting, today's stories and recent stories."""

import logging
from datetime import date

from nicegui import ui
from nicegui.elements.column import Column

from softdreams.memory.user_profile import UserProfile
from softdreams.services import ServiceContainer
from softdreams.ui.components.common import empty_state, error_banner
from softdreams.ui.components.story_card import StoryCard, app_card
from softdreams.ui.state import AppState
from softdreams.ui.theme import get_stage_icon, get_text_class
from softdreams.ui.view_models import HomeViewModel

logger = logging.getLogger(__name__)


def greeting_for(hour: int) -> str:
    """Greeting matching the time of day."""
    if 5 <= hour < 12:
        return "Good morning"
    if 12 <= hour < 18:
        return "Good afternoon"
    return "Good evening"


def profile_caption(profile: UserProfile, today: date) -> str:
    """One-line summary of the profile for the greeting card."""
    if profile.is_pregnancy:
        days = profile.days_until_due(today)
        if days is None:
            return "Expecting"
        if days > 1:
            return f"{days} days until your due date"
        if days == 1:
            return "Your due date is tomorrow"
        return "Your due date is here"
    months = profile.age_in_months(today)
    if months is None:
        return profile.baby_stage.display_name
    if months < 24:
        return f"{profile.baby_stage.display_name} - {months} months old"
    return f"{profile.baby_stage.display_name} - {months // 12} years old"


class HomePage:
    """Home page.

    Shows a greeting for the profile, the stories created today and the
    most recent stories. Building the page triggers a refresh, which also
    runs profile auto-updates and reminder checks in the background.
    """

    def __init__(self, state: AppState, services: ServiceContainer):
        """Initialize home page.

        Args:
            state: Application state.
            services: Service container.
        """
        self.state = state
        self.services = services
        self.view_model = HomeViewModel(services=services)
        self._content: Column | None = None

    def build(self) -> None:
        """Build the home page UI."""
        self._content = ui.column().classes("w-full max-w-3xl mx-auto gap-4 p-4")
        self.view_model.subscribe(lambda _name, _value: self._render())
        ui.context.client.on_disconnect(self.view_model.close)
        self.view_model.refresh()
        self._render()

    def _render(self) -> None:
        """Rebuild the page content from the view-model."""
        if self._content is None:
            return
        vm = self.view_model
        self._content.clear()
        with self._content:
            if vm.error is not None:
                error_banner(vm.error)
            if vm.profile is None:
                empty_state(
                    icon="face",
                    title="Welcome to SoftDreams",
                    description="Tell us about your little one to get started.",
                    action_text="Get started",
                    on_action=lambda: ui.navigate.to("/onboarding"),
                )
                return
            self._build_greeting(vm.profile)
            self._build_today()
            self._build_recent()

    def _build_greeting(self, profile: UserProfile) -> None:
        now = self.services.clock()
        with app_card(self.state.dark_mode):
            with ui.row().classes("w-full items-center gap-4"):
                ui.icon(get_stage_icon(profile.baby_stage.value), size="3rem").classes(
                    "text-violet-500"
                )
                with ui.column().classes("gap-0 flex-grow"):
                    ui.label(f"{greeting_for(now.hour)}!").classes(
                        f"text-2xl font-bold {get_text_class()}"
                    )
                    ui.label(profile_caption(profile, now.date())).classes(
                        get_text_class("secondary")
                    )
                ui.button(
                    "New story", icon="auto_awesome", on_click=lambda: ui.navigate.to("/generate")
                ).props("color=primary rounded")

    def _build_today(self) -> None:
        today_stories = self.view_model.get_stories_created_today()
        total = len(self.view_model.stories)
        with ui.row().classes("w-full gap-4"):
            for value, label in (
                (len(today_stories), "Stories today"),
                (total, "All stories"),
                (len(self.view_model.favorite_stories), "Favorites"),
            ):
                with ui.card().classes("flex-1 items-center"):
                    ui.label(str(value)).classes("text-3xl font-bold text-violet-600")
                    ui.label(label).classes(f"text-sm {get_text_class('muted')}")

    def _build_recent(self) -> None:
        recent = self.view_model.recent_stories
        ui.label("Recent stories").classes(f"text-lg font-semibold {get_text_class()}")
        if not recent:
            empty_state(
                icon="menu_book",
                title="No stories yet",
                description="Create your first bedtime story.",
            )
            return
        today = self.services.clock().date()
        for story in recent:
            StoryCard(story, today, dark_mode=self.state.dark_mode).build()
