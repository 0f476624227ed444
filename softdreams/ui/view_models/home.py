"""Home view-model: profile, stories and background housekeeping."""

import logging

from softdreams.memory.story import Story
from softdreams.memory.user_profile import UserProfile
from softdreams.services import AutoProfileUpdateService, ServiceContainer
from softdreams.services.protocols import (
    DueDateNotificationServiceProtocol,
    StoryServiceProtocol,
    StoryTimeNotificationServiceProtocol,
    UserProfileServiceProtocol,
)
from softdreams.ui.view_models._observable import ObservableObject
from softdreams.utils.dates import Clock, system_clock
from softdreams.utils.exceptions import AppError, DataCorruptionError

logger = logging.getLogger(__name__)


def as_app_error(error: Exception) -> AppError:
    """Map any storage failure onto the user-facing error taxonomy."""
    if isinstance(error, AppError):
        return error
    return DataCorruptionError(str(error))


class HomeViewModel(ObservableObject):
    """State behind the home screen.

    ``refresh()`` loads profile and stories. When a profile exists it also
    starts two best-effort background tasks: the automatic profile update
    (followed by due-date reminder setup) and the story-time reminder check.
    Failures of those tasks are logged, never shown.
    """

    PUBLISHED = ("profile", "stories", "error")

    def __init__(
        self,
        user_profile_service: UserProfileServiceProtocol | None = None,
        story_service: StoryServiceProtocol | None = None,
        story_time_notification_service: StoryTimeNotificationServiceProtocol | None = None,
        due_date_notification_service: DueDateNotificationServiceProtocol | None = None,
        auto_update_service: AutoProfileUpdateService | None = None,
        services: ServiceContainer | None = None,
        clock: Clock | None = None,
    ):
        """Initialize the view-model.

        Every collaborator not passed explicitly comes from *services*, or
        from the process-wide container when that is omitted too.
        """
        super().__init__()
        explicit = (
            user_profile_service,
            story_service,
            story_time_notification_service,
            due_date_notification_service,
        )
        if services is None and None in explicit:
            services = ServiceContainer.shared()
        self._clock = clock or (services.clock if services is not None else system_clock)

        self.user_profile_service = (
            user_profile_service if user_profile_service is not None else services.profile
        )
        self.story_service = story_service if story_service is not None else services.story
        self.story_time_notification_service = (
            story_time_notification_service
            if story_time_notification_service is not None
            else services.story_time_notifications
        )
        self.due_date_notification_service = (
            due_date_notification_service
            if due_date_notification_service is not None
            else services.due_date_notifications
        )
        if auto_update_service is None:
            # Updates are saved through the same profile service the view reads
            auto_update_service = AutoProfileUpdateService(self.user_profile_service, self._clock)
        self.auto_update_service = auto_update_service

        self.profile: UserProfile | None = None
        self.stories: list[Story] = []
        self.error: AppError | None = None

    def refresh(self) -> None:
        """Reload profile and stories and kick off background housekeeping."""
        logger.info("Refreshing home view data")
        try:
            self.profile = self.user_profile_service.load_profile()
            self.stories = self.story_service.load_stories()
            self.error = None
        except Exception as e:
            logger.error("Failed to refresh home data: %s", e)
            self.error = as_app_error(e)
            return

        logger.info("Home refresh completed - Stories count: %d", len(self.stories))

        if self.profile is not None:
            self._spawn(self.check_and_perform_auto_updates(), "auto_update")
            self._spawn(
                self.ensure_story_time_notifications_scheduled(self.profile),
                "story_time_notifications",
            )

    # ========== Convenience Properties ==========

    @property
    def has_completed_onboarding(self) -> bool:
        """True when a readable profile is stored."""
        try:
            return self.user_profile_service.load_profile() is not None
        except AppError:
            return False

    @property
    def total_stories_count(self) -> int:
        """Number of stored stories (0 when they cannot be read)."""
        try:
            return len(self.story_service.load_stories())
        except AppError:
            return 0

    def get_stories_created_today(self) -> list[Story]:
        """Stories created on the current day; sets ``error`` on failure."""
        today = self._clock().date()
        try:
            return self.story_service.get_stories_created_on(today)
        except Exception as e:
            logger.error("Failed to load today's stories: %s", e)
            self.error = as_app_error(e)
            return []

    @property
    def favorite_stories(self) -> list[Story]:
        """Favorites among the loaded stories."""
        return [s for s in self.stories if s.is_favorite]

    @property
    def recent_stories(self) -> list[Story]:
        """Loaded stories, newest first, at most five."""
        return sorted(self.stories, key=lambda s: s.date, reverse=True)[:5]

    # ========== Auto-Update Methods ==========

    async def check_and_perform_auto_updates(self) -> None:
        """Apply due profile updates, then make sure due-date reminders exist."""
        current = self.profile
        if current is None:
            logger.debug("No profile available - skipping auto-updates")
            return

        if not self.auto_update_service.needs_auto_update(current):
            logger.debug("No auto-updates needed")
            await self.ensure_due_date_notifications_setup()
            return

        logger.info("Performing automatic profile updates")
        result = await self.auto_update_service.perform_auto_update(current)

        if result.is_success and result.has_updates:
            try:
                self.profile = self.user_profile_service.load_profile()
                logger.info("Auto-update completed successfully")
            except Exception as e:
                logger.error("Failed to reload profile after auto-update: %s", e)
                self.error = as_app_error(e)
        elif result.error is not None:
            # Not user-initiated: log only
            logger.error("Auto-update failed: %s", result.error)

        await self.ensure_due_date_notifications_setup()

    async def ensure_story_time_notifications_scheduled(self, profile: UserProfile) -> None:
        """Schedule the story-time reminder when none is registered."""
        logger.debug("Checking story time notifications for %s", profile.display_name)
        try:
            if await self.story_time_notification_service.has_scheduled_story_time_reminders():
                logger.debug("Story time notifications already scheduled")
                return

            logger.info("No story time notifications found, scheduling for %s", profile.display_name)
            success = await self.story_time_notification_service.schedule_story_time_reminder(
                profile.story_time, profile.display_name
            )
        except Exception:
            logger.exception("Story time notification check failed")
            return

        if success:
            logger.info(
                "Scheduled story time notifications for %s at %s",
                profile.display_name,
                profile.story_time.strftime("%H:%M"),
            )
        else:
            logger.info("Story time notifications not scheduled - permission not granted")

    async def ensure_due_date_notifications_setup(self) -> None:
        """Set up due-date reminders for pregnancy profiles."""
        current = self.profile
        if current is None or not current.is_pregnancy:
            return
        logger.debug("Ensuring due date notifications are set up for pregnancy profile")
        try:
            await self.due_date_notification_service.schedule_notifications_for_current_profile()
        except Exception:
            logger.exception("Due date notification setup failed")

    def trigger_auto_update(self) -> None:
        """Manually start the auto-update check in the background."""
        self._spawn(self.check_and_perform_auto_updates(), "auto_update")
