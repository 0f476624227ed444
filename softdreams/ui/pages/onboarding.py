"""Onboarding page - create or edit the child's profile."""

import logging
from datetime import date, time

from nicegui import ui
from nicegui.elements.column import Column

from softdreams.memory.user_profile import BabyStage, Gender
from softdreams.services import ServiceContainer
from softdreams.ui.components.common import notify_error
from softdreams.ui.components.story_card import app_card
from softdreams.ui.state import AppState
from softdreams.ui.theme import get_text_class
from softdreams.ui.view_models import AVAILABLE_INTERESTS, OnboardingViewModel

logger = logging.getLogger(__name__)


def parse_iso_date(value: str | None) -> date | None:
    """Parse a ``YYYY-MM-DD`` picker value; blank or malformed input gives None."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        logger.debug("Ignoring malformed date input: %r", value)
        return None


def parse_time_of_day(value: str | None, default: time) -> time:
    """Parse a ``HH:MM`` picker value, falling back to *default*."""
    if not value:
        return default
    try:
        hours, minutes = value.strip().split(":")[:2]
        return time(int(hours), int(minutes))
    except ValueError:
        logger.debug("Ignoring malformed time input: %r", value)
        return default


class OnboardingPage:
    """Profile form used for first-run onboarding and later edits."""

    def __init__(self, state: AppState, services: ServiceContainer):
        """Initialize onboarding page.

        Args:
            state: Application state.
            services: Service container.
        """
        self.state = state
        self.services = services
        self.view_model = OnboardingViewModel(services=services)
        self._stage_fields: Column | None = None
        self._errors: Column | None = None

    def build(self) -> None:
        """Build the onboarding page UI."""
        vm = self.view_model
        is_edit = vm.load_existing()
        ui.context.client.on_disconnect(vm.close)

        with ui.column().classes("w-full max-w-2xl mx-auto gap-4 p-4"):
            title = "Edit profile" if is_edit else "Welcome to SoftDreams"
            ui.label(title).classes(f"text-2xl font-bold {get_text_class()}")
            ui.label("Tell us a little about your child so every story feels like theirs.").classes(
                get_text_class("secondary")
            )

            with app_card(self.state.dark_mode):
                ui.input("Name", placeholder="Your child's name").bind_value(vm, "name").classes(
                    "w-full"
                ).on_value_change(lambda _: self._refresh_errors())

                ui.select(
                    {stage: stage.display_name for stage in BabyStage},
                    label="Stage",
                    on_change=lambda e: self._on_stage_change(e.value),
                ).bind_value(vm, "baby_stage").classes("w-full")

                ui.select(
                    {
                        Gender.NOT_SPECIFIED: "Prefer not to say",
                        Gender.FEMALE: "Girl",
                        Gender.MALE: "Boy",
                    },
                    label="Gender",
                ).bind_value(vm, "gender").classes("w-full")

                self._stage_fields = ui.column().classes("w-full")
                self._build_stage_fields()

                ui.input(
                    "Story time",
                    value=vm.story_time.strftime("%H:%M"),
                    on_change=lambda e: setattr(
                        vm, "story_time", parse_time_of_day(e.value, vm.story_time)
                    ),
                ).props("type=time").classes("w-full")

            with app_card(self.state.dark_mode):
                ui.label("Favourite things").classes(f"font-semibold {get_text_class()}")
                with ui.row().classes("gap-2 flex-wrap"):
                    for interest in AVAILABLE_INTERESTS:
                        ui.checkbox(
                            interest.capitalize(),
                            value=interest in vm.interests,
                            on_change=lambda _e, i=interest: vm.toggle_interest(i),
                        )
                ui.input(
                    "Parent names",
                    placeholder="e.g. Mum, Dad",
                    value=", ".join(vm.parent_names),
                    on_change=lambda e: setattr(
                        vm, "parent_names", [n.strip() for n in (e.value or "").split(",")]
                    ),
                ).classes("w-full")

            self._errors = ui.column().classes("w-full gap-1")
            self._refresh_errors()

            ui.button(
                "Save profile" if is_edit else "Start dreaming",
                icon="check",
                on_click=self._complete,
            ).props("color=primary rounded size=lg").bind_enabled_from(vm, "is_saving", lambda s: not s)

    def _build_stage_fields(self) -> None:
        """Date inputs for the selected stage."""
        if self._stage_fields is None:
            return
        vm = self.view_model
        self._stage_fields.clear()
        with self._stage_fields:
            if vm.baby_stage == BabyStage.PREGNANCY:
                ui.input(
                    "Due date",
                    value=vm.due_date.isoformat() if vm.due_date else "",
                    on_change=lambda e: self._set_date("due_date", e.value),
                ).props("type=date").classes("w-full")
            else:
                ui.input(
                    "Birth date (optional)",
                    value=vm.birth_date.isoformat() if vm.birth_date else "",
                    on_change=lambda e: self._set_date("birth_date", e.value),
                ).props("type=date").classes("w-full")

    def _set_date(self, field: str, value: str | None) -> None:
        setattr(self.view_model, field, parse_iso_date(value))
        self._refresh_errors()

    def _on_stage_change(self, stage: BabyStage) -> None:
        self.view_model.baby_stage = stage
        self._build_stage_fields()
        self._refresh_errors()

    def _refresh_errors(self) -> None:
        if self._errors is None:
            return
        self._errors.clear()
        with self._errors:
            for message in self.view_model.validation_errors:
                ui.label(message).classes("text-sm text-red-500")

    async def _complete(self) -> None:
        """Validate, save and go home."""
        vm = self.view_model
        if not vm.can_complete:
            self._refresh_errors()
            ui.notify("Please fill in the missing details", type="warning")
            return
        profile = await vm.complete_onboarding()
        if profile is None:
            if vm.error is not None:
                notify_error(vm.error)
            return
        self.state.notify_profile_change()
        ui.notify(f"Welcome, {profile.display_name}!", type="positive")
        ui.navigate.to("/")
