"""Header component with navigation and the child's name."""

import logging

from nicegui import ui

from softdreams.services import ServiceContainer
from softdreams.ui.state import AppState
from softdreams.ui.theme import COLORS, get_stage_icon
from softdreams.utils.exceptions import AppError

logger = logging.getLogger(__name__)

# Navigation items: (path, label, icon)
NAV_ITEMS = [
    ("/", "Home", "home"),
    ("/generate", "New Story", "auto_awesome"),
    ("/library", "Library", "menu_book"),
    ("/onboarding", "Profile", "face"),
]


class Header:
    """Application header with navigation and profile badge."""

    def __init__(self, state: AppState, services: ServiceContainer, current_path: str = "/"):
        """Initialize header."""
        self.state = state
        self.services = services
        self.current_path = current_path

    def build(self) -> None:
        """Build the header UI."""
        with ui.header().classes("shadow-sm items-center").style(
            f"background-color: {COLORS['primary_dark']}"
        ):
            with ui.row().classes("w-full items-center gap-2 px-4 py-2"):
                ui.icon("nightlight", size="lg").classes("text-yellow-200")
                ui.label("SoftDreams").classes("text-xl font-bold mr-2 text-white")

                self._build_navigation()

                ui.space()

                self._build_profile_badge()

    def _build_navigation(self) -> None:
        """Build navigation links."""
        for path, label, icon in NAV_ITEMS:
            is_active = self.current_path == path
            if is_active:
                classes = "text-white bg-white/20"
            else:
                classes = "text-violet-200 hover:text-white hover:bg-white/10"

            with ui.link(target=path).classes(
                f"flex items-center gap-1 px-3 py-1.5 rounded-md no-underline {classes}"
            ):
                ui.icon(icon, size="xs")
                ui.label(label).classes("text-sm")

    def _build_profile_badge(self) -> None:
        """Show the child's name and stage, if a profile exists."""
        try:
            profile = self.services.profile.load_profile()
        except AppError as e:
            logger.warning("Header could not load profile: %s", e)
            return
        if profile is None:
            return
        with ui.row().classes("items-center gap-1 text-white"):
            ui.icon(get_stage_icon(profile.baby_stage.value), size="sm")
            ui.label(profile.display_name).classes("text-sm")
