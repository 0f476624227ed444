"""Daily story-time reminders."""

import logging
from datetime import time

from softdreams.memory.notifications import NotificationRequest
from softdreams.services.notification_center import NotificationCenter

logger = logging.getLogger(__name__)

STORY_TIME_CATEGORY = "story_time"
STORY_TIME_IDENTIFIER = "story-time-daily"


class StoryTimeNotificationService:
    """Schedules the recurring reminder at the profile's story time."""

    def __init__(self, center: NotificationCenter):
        """Initialize the service.

        Args:
            center: Notification center the reminder is registered with.
        """
        self.center = center

    async def has_scheduled_story_time_reminders(self) -> bool:
        """True when a story-time reminder is registered."""
        return any(r.category == STORY_TIME_CATEGORY for r in self.center.pending_requests())

    async def schedule_story_time_reminder(self, story_time: time, baby_name: str) -> bool:
        """Register (or replace) the daily story-time reminder.

        Returns:
            False when notification permission is not granted.
        """
        if not self.center.authorization_granted() and not self.center.request_authorization():
            logger.info("Story time reminder not scheduled: permission denied")
            return False

        request = NotificationRequest(
            identifier=STORY_TIME_IDENTIFIER,
            title="It's story time! 🌙",
            body=f"Time for {baby_name}'s bedtime story. Sweet dreams await.",
            category=STORY_TIME_CATEGORY,
            time_of_day=story_time.replace(second=0, microsecond=0),
            repeats_daily=True,
        )
        self.center.add(request)
        logger.info(
            "Story time reminder scheduled at %s for %s", story_time.strftime("%H:%M"), baby_name
        )
        return True

    async def cancel_story_time_reminders(self) -> None:
        """Remove every story-time reminder."""
        identifiers = [
            r.identifier
            for r in self.center.pending_requests()
            if r.category == STORY_TIME_CATEGORY
        ]
        removed = self.center.remove_pending(identifiers)
        logger.info("Cancelled %d story time reminder(s)", removed)
