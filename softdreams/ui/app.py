"""Main NiceGUI application for SoftDreams."""

import logging
from collections.abc import Callable
from typing import Protocol

from nicegui import app, ui

from softdreams.services import ServiceContainer
from softdreams.ui.components.header import Header
from softdreams.ui.pages import (
    GeneratePage,
    HomePage,
    LibraryPage,
    OnboardingPage,
    StoryReaderPage,
)
from softdreams.ui.state import AppState
from softdreams.ui.theme import COLORS, get_background_class
from softdreams.utils.exceptions import AppError
from softdreams.utils.logging_config import log_context

logger = logging.getLogger(__name__)


class Page(Protocol):
    """Protocol for page classes."""

    def build(self) -> None:
        """Build the page UI."""
        ...


class SoftDreamsApp:
    """Main SoftDreams application.

    Uses path-based routing; every page shares the header layout and the
    reminder poller.
    """

    def __init__(self, services: ServiceContainer):
        """Initialize the application."""
        self.services = services
        self.state = AppState()
        self.state.dark_mode = services.settings.dark_mode
        self.state.last_notification_check = services.clock()

    def _apply_theme(self) -> None:
        """Apply theme settings to the page."""
        ui.query("body").classes(get_background_class(self.state.dark_mode))
        if self.state.dark_mode:
            ui.dark_mode().enable()
        else:
            ui.dark_mode().disable()

    def _page_layout(self, current_path: str, build_content: Callable[[], None]) -> None:
        """Render the shared layout (theme, header, reminder poller) around page content."""
        self._apply_theme()

        header = Header(self.state, self.services, current_path)
        header.build()

        if self.services.settings.notifications_enabled:
            ui.timer(self.services.settings.notification_poll_seconds, self.poll_notifications)

        with ui.column().classes("w-full flex-grow p-0"):
            build_content()

    def _has_profile(self) -> bool:
        """True when a profile is stored; unreadable profiles count as present."""
        try:
            return self.services.profile.profile_exists()
        except AppError as e:
            logger.warning("Profile check failed: %s", e)
            return True

    def _profile_page(self, current_path: str, page_factory: Callable[[], Page]) -> None:
        """Render a page that needs a profile, redirecting to onboarding otherwise."""
        if not self._has_profile():
            logger.info("No profile yet, redirecting %s to onboarding", current_path)
            ui.navigate.to("/onboarding")
            return
        self._page_layout(current_path, lambda: page_factory().build())

    def poll_notifications(self) -> int:
        """Show reminders that fell due since the previous poll.

        Returns:
            Number of reminders shown.
        """
        now = self.services.clock()
        start = self.state.last_notification_check
        self.state.last_notification_check = now
        with log_context():
            try:
                due = self.services.notifications.due_requests(start, now)
            except AppError as e:
                logger.warning("Could not read scheduled reminders: %s", e)
                return 0
            for request in due:
                logger.info("Reminder due: %s", request.identifier)
                ui.notify(
                    f"{request.title} - {request.body}",
                    type="info",
                    position="top",
                    timeout=15000,
                )
        self.state.notifications_shown += len(due)
        return len(due)

    def _setup_global_colors(self) -> None:
        """Set the application's global color palette."""
        colors = app.colors
        colors.primary = COLORS["primary"]
        colors.secondary = COLORS["secondary"]
        colors.positive = COLORS["success"]
        colors.negative = COLORS["error"]
        colors.warning = COLORS["warning"]
        colors.info = COLORS["info"]
        logger.debug("Global color palette configured")

    def _setup_exception_handler(self) -> None:
        """Set up global exception handler for unhandled UI errors."""

        def handle_exception(e: Exception) -> None:
            text = str(e).lower()
            teardown = "parent slot" in text or "has been deleted" in text
            if isinstance(e, RuntimeError) and teardown:
                # Client left while a background update was still rendering
                logger.debug("Ignoring UI update after page teardown: %s", e)
                return
            logger.exception("Unhandled UI exception")
            message = getattr(e, "user_message", None) or f"An error occurred: {e}"
            ui.notify(message, type="negative", timeout=10000)

        app.on_exception(handle_exception)
        logger.debug("Global exception handler registered")

    def build(self) -> None:
        """Configure colors and the exception handler, then register all routes."""
        self._setup_global_colors()
        self._setup_exception_handler()

        @ui.page("/")
        def home_page() -> None:
            """Render the Home page."""
            self._profile_page("/", lambda: HomePage(self.state, self.services))

        @ui.page("/onboarding")
        def onboarding_page() -> None:
            """Render the Onboarding page."""

            def content() -> None:
                page = OnboardingPage(self.state, self.services)
                page.build()

            self._page_layout("/onboarding", content)

        @ui.page("/generate")
        def generate_page() -> None:
            """Render the Generate page."""
            self._profile_page("/generate", lambda: GeneratePage(self.state, self.services))

        @ui.page("/library")
        def library_page() -> None:
            """Render the Library page."""
            self._profile_page("/library", lambda: LibraryPage(self.state, self.services))

        @ui.page("/story/{story_id}")
        def story_page(story_id: str) -> None:
            """Render a single story."""
            self._profile_page(
                "/library", lambda: StoryReaderPage(self.state, self.services, story_id)
            )

        app.on_shutdown(self._on_shutdown)
        logger.info("SoftDreams app built with path-based routing")

    def _on_shutdown(self) -> None:
        """Handle application shutdown."""
        logger.info("SoftDreams shutting down")

    def run(
        self,
        host: str = "127.0.0.1",
        port: int = 8080,
        title: str = "SoftDreams",
        reload: bool = False,
    ) -> None:
        """Run the application."""
        logger.info("Starting SoftDreams on http://%s:%s", host, port)
        ui.run(
            host=host,
            port=port,
            title=title,
            reload=reload,
            favicon="🌙",
            show=False,
        )


def create_app(services: ServiceContainer | None = None) -> SoftDreamsApp:
    """Create and configure the SoftDreams application."""
    if services is None:
        services = ServiceContainer()

    app_instance = SoftDreamsApp(services)
    app_instance.build()
    return app_instance
