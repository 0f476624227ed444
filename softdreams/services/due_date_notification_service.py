"""Due-date reminders for pregnancy profiles."""

import logging
from datetime import datetime, time, timedelta

from softdreams.memory.notifications import NotificationRequest
from softdreams.services.notification_center import NotificationCenter
from softdreams.services.user_profile_service import UserProfileService
from softdreams.settings import Settings
from softdreams.utils.dates import Clock, system_clock

logger = logging.getLogger(__name__)

DUE_DATE_CATEGORY = "due_date"


def _reminder_text(days_before: int, name: str) -> tuple[str, str]:
    """Title and body for a reminder *days_before* the due date."""
    if days_before == 0:
        return "Today's the day! 💕", f"{name}'s due date is today. Wishing you all the best."
    if days_before == 1:
        return "Almost there!", f"{name}'s due date is tomorrow. Time for a calm bedtime story."
    if days_before % 7 == 0:
        weeks = days_before // 7
        plural = "week" if weeks == 1 else "weeks"
        return f"{weeks} {plural} to go", f"{name} is due in {weeks} {plural}."
    return f"{days_before} days to go", f"{name} is due in {days_before} days."


class DueDateNotificationService:
    """Schedules one-shot reminders leading up to the due date."""

    def __init__(
        self,
        center: NotificationCenter,
        user_profile_service: UserProfileService,
        settings: Settings,
        clock: Clock = system_clock,
    ):
        """Initialize the service.

        Args:
            center: Notification center reminders are registered with.
            user_profile_service: Source of the current profile.
            settings: Reminder offsets and hour.
            clock: Returns the current time.
        """
        self.center = center
        self.user_profile_service = user_profile_service
        self.settings = settings
        self._clock = clock

    def _existing_identifiers(self) -> list[str]:
        return [
            r.identifier for r in self.center.pending_requests() if r.category == DUE_DATE_CATEGORY
        ]

    async def cancel_due_date_notifications(self) -> int:
        """Remove all due-date reminders.

        Returns:
            Number of reminders removed.
        """
        return self.center.remove_pending(self._existing_identifiers())

    async def schedule_notifications_for_current_profile(self) -> int:
        """(Re)schedule due-date reminders for the stored profile.

        Existing due-date reminders are replaced. Profiles that are not a
        pregnancy get theirs cancelled.

        Returns:
            Number of reminders scheduled.

        Raises:
            DataCorruptionError: If the stored profile cannot be decoded.
        """
        profile = self.user_profile_service.load_profile()
        removed = await self.cancel_due_date_notifications()

        if profile is None or not profile.is_pregnancy or profile.due_date is None:
            if removed:
                logger.info("Cancelled %d due-date reminder(s): no pregnancy profile", removed)
            return 0

        if not self.center.authorization_granted() and not self.center.request_authorization():
            logger.info("Due-date reminders not scheduled: permission denied")
            return 0

        now = self._clock()
        reminder_time = time(self.settings.due_date_reminder_hour, 0)
        scheduled = 0
        for days_before in self.settings.due_date_reminder_days:
            fire_at = datetime.combine(profile.due_date - timedelta(days=days_before), reminder_time)
            if fire_at <= now:
                continue
            title, body = _reminder_text(days_before, profile.display_name)
            self.center.add(
                NotificationRequest(
                    identifier=f"due-date-{days_before}",
                    title=title,
                    body=body,
                    category=DUE_DATE_CATEGORY,
                    fire_at=fire_at,
                )
            )
            scheduled += 1

        logger.info("Scheduled %d due-date reminder(s) for %s", scheduled, profile.due_date)
        return scheduled
