"""Tests for StoryTimeNotificationService."""

from datetime import time

import pytest

from softdreams.services.notification_center import NotificationCenter
from softdreams.services.story_time_notification_service import (
    STORY_TIME_CATEGORY,
    StoryTimeNotificationService,
)
from softdreams.settings import Settings


@pytest.fixture
def center(store, settings):
    return NotificationCenter(store, settings)


@pytest.fixture
def story_time(center):
    return StoryTimeNotificationService(center)


class TestStoryTimeReminders:
    """Tests for scheduling and cancelling the daily reminder."""

    @pytest.mark.asyncio
    async def test_none_scheduled_initially(self, story_time):
        assert await story_time.has_scheduled_story_time_reminders() is False

    @pytest.mark.asyncio
    async def test_schedule_registers_daily_reminder(self, story_time, center):
        assert await story_time.schedule_story_time_reminder(time(19, 45, 30), "Mia") is True

        assert await story_time.has_scheduled_story_time_reminders() is True
        [request] = center.pending_requests()
        assert request.category == STORY_TIME_CATEGORY
        assert request.repeats_daily is True
        assert request.time_of_day == time(19, 45)
        assert "Mia" in request.body

    @pytest.mark.asyncio
    async def test_rescheduling_replaces(self, story_time, center):
        await story_time.schedule_story_time_reminder(time(19, 0), "Mia")
        await story_time.schedule_story_time_reminder(time(20, 30), "Mia")
        assert [r.time_of_day for r in center.pending_requests()] == [time(20, 30)]

    @pytest.mark.asyncio
    async def test_permission_denied(self, store):
        center = NotificationCenter(store, Settings(notifications_enabled=False))
        service = StoryTimeNotificationService(center)

        assert await service.schedule_story_time_reminder(time(20, 0), "Mia") is False
        assert await service.has_scheduled_story_time_reminders() is False

    @pytest.mark.asyncio
    async def test_cancel(self, story_time):
        await story_time.schedule_story_time_reminder(time(20, 0), "Mia")
        await story_time.cancel_story_time_reminders()
        assert await story_time.has_scheduled_story_time_reminders() is False
