"""Tests for HomeViewModel."""

from datetime import date, datetime, time, timedelta

import pytest

from softdreams.memory.user_profile import BabyStage
from softdreams.services import ServiceContainer
from softdreams.ui.view_models.home import HomeViewModel, as_app_error
from softdreams.utils.exceptions import DataCorruptionError, InvalidDataError
from tests.shared.mock_services import (
    MockDueDateNotificationService,
    MockStoryService,
    MockStoryTimeNotificationService,
    MockUserProfileService,
    create_mock_story,
)


@pytest.fixture
def profile_service(toddler_profile):
    return MockUserProfileService(toddler_profile)


@pytest.fixture
def story_service():
    return MockStoryService([create_mock_story(title="One"), create_mock_story(title="Two")])


@pytest.fixture
def story_time_service():
    return MockStoryTimeNotificationService()


@pytest.fixture
def due_date_service():
    return MockDueDateNotificationService()


@pytest.fixture
def make_vm(profile_service, story_service, story_time_service, due_date_service, clock):
    def factory(**overrides):
        kwargs = {
            "user_profile_service": profile_service,
            "story_service": story_service,
            "story_time_notification_service": story_time_service,
            "due_date_notification_service": due_date_service,
            "clock": clock,
        }
        kwargs.update(overrides)
        return HomeViewModel(**kwargs)

    return factory


class TestAsAppError:
    def test_app_errors_pass_through(self):
        error = InvalidDataError("x")
        assert as_app_error(error) is error

    def test_other_errors_become_corruption(self):
        assert isinstance(as_app_error(KeyError("x")), DataCorruptionError)


class TestRefresh:
    """Tests for refresh()."""

    @pytest.mark.asyncio
    async def test_loads_profile_and_stories(self, make_vm, toddler_profile):
        vm = make_vm()
        changes = []
        vm.subscribe(lambda name, value: changes.append(name))

        vm.refresh()
        await vm.wait_for_background_tasks()

        assert vm.profile == toddler_profile
        assert [s.title for s in vm.stories] == ["One", "Two"]
        assert vm.error is None
        assert {"profile", "stories", "error"} <= set(changes)

    @pytest.mark.asyncio
    async def test_load_failure_surfaces_error(self, make_vm, profile_service, story_time_service):
        profile_service.should_throw_on_load = True
        vm = make_vm()

        vm.refresh()

        assert isinstance(vm.error, DataCorruptionError)
        assert vm.has_background_tasks is False
        assert story_time_service.scheduled == []

    @pytest.mark.asyncio
    async def test_story_load_failure_surfaces_error(self, make_vm, story_service):
        story_service.should_throw_on_load = True
        vm = make_vm()
        vm.refresh()
        assert isinstance(vm.error, DataCorruptionError)

    @pytest.mark.asyncio
    async def test_error_cleared_on_next_refresh(self, make_vm, profile_service):
        profile_service.should_throw_on_load = True
        vm = make_vm()
        vm.refresh()
        profile_service.should_throw_on_load = False

        vm.refresh()
        await vm.wait_for_background_tasks()

        assert vm.error is None

    @pytest.mark.asyncio
    async def test_no_profile_skips_background_work(
        self, make_vm, story_time_service, due_date_service
    ):
        vm = make_vm(user_profile_service=MockUserProfileService(None))

        vm.refresh()
        await vm.wait_for_background_tasks()

        assert vm.profile is None
        assert vm.error is None
        assert story_time_service.scheduled == []
        assert due_date_service.schedule_call_count == 0

    def test_refresh_without_event_loop(self, make_vm, story_time_service):
        """Outside an event loop the housekeeping runs before refresh returns."""
        vm = make_vm()
        vm.refresh()
        assert story_time_service.scheduled == [(time(19, 45), "Mia")]


class TestStoryTimeNotifications:
    @pytest.mark.asyncio
    async def test_schedules_when_missing(self, make_vm, story_time_service):
        vm = make_vm()
        vm.refresh()
        await vm.wait_for_background_tasks()
        assert story_time_service.scheduled == [(time(19, 45), "Mia")]

    @pytest.mark.asyncio
    async def test_existing_reminder_kept(self, make_vm, story_time_service):
        story_time_service.has_reminder = True
        vm = make_vm()
        vm.refresh()
        await vm.wait_for_background_tasks()
        assert story_time_service.scheduled == []

    @pytest.mark.asyncio
    async def test_permission_denied_is_not_an_error(self, make_vm, story_time_service):
        story_time_service.granted = False
        vm = make_vm()
        vm.refresh()
        await vm.wait_for_background_tasks()
        assert vm.error is None

    @pytest.mark.asyncio
    async def test_failure_is_logged_only(self, make_vm, story_time_service, caplog):
        story_time_service.should_throw = True
        vm = make_vm()

        vm.refresh()
        await vm.wait_for_background_tasks()

        assert vm.error is None
        assert "Story time notification check failed" in caplog.text


class TestAutoUpdate:
    """Tests for the background profile update."""

    @pytest.mark.asyncio
    async def test_no_update_leaves_profile_unsaved(self, make_vm, profile_service):
        vm = make_vm()
        vm.refresh()
        await vm.wait_for_background_tasks()
        assert profile_service.save_profile_call_count == 0

    @pytest.mark.asyncio
    async def test_pregnancy_before_due_date_sets_up_reminders(
        self, make_vm, pregnancy_profile, due_date_service
    ):
        vm = make_vm(user_profile_service=MockUserProfileService(pregnancy_profile))
        vm.refresh()
        await vm.wait_for_background_tasks()
        assert due_date_service.schedule_call_count == 1

    @pytest.mark.asyncio
    async def test_past_due_date_updates_profile(self, make_vm, pregnancy_profile):
        profile_service = MockUserProfileService(pregnancy_profile)
        vm = make_vm(
            user_profile_service=profile_service,
            clock=lambda: datetime(2026, 5, 12, 18, 0),
        )

        vm.refresh()
        await vm.wait_for_background_tasks()

        assert profile_service.save_profile_call_count == 1
        assert vm.profile.baby_stage is BabyStage.NEWBORN
        assert vm.profile.birth_date == date(2026, 5, 10)
        assert vm.error is None

    @pytest.mark.asyncio
    async def test_save_failure_is_logged_only(self, make_vm, pregnancy_profile):
        profile_service = MockUserProfileService(pregnancy_profile)
        profile_service.should_throw_on_save = True
        vm = make_vm(
            user_profile_service=profile_service,
            clock=lambda: datetime(2026, 5, 12, 18, 0),
        )

        vm.refresh()
        await vm.wait_for_background_tasks()

        assert vm.error is None
        assert vm.profile == pregnancy_profile

    @pytest.mark.asyncio
    async def test_reload_failure_surfaces_error(self, make_vm, pregnancy_profile):
        profile_service = MockUserProfileService(pregnancy_profile)
        vm = make_vm(
            user_profile_service=profile_service,
            clock=lambda: datetime(2026, 5, 12, 18, 0),
        )

        vm.refresh()
        profile_service.should_throw_on_load = True
        await vm.wait_for_background_tasks()

        assert isinstance(vm.error, DataCorruptionError)

    @pytest.mark.asyncio
    async def test_due_date_failure_is_logged_only(
        self, make_vm, pregnancy_profile, due_date_service
    ):
        due_date_service.should_throw = True
        vm = make_vm(user_profile_service=MockUserProfileService(pregnancy_profile))
        vm.refresh()
        await vm.wait_for_background_tasks()
        assert vm.error is None

    @pytest.mark.asyncio
    async def test_trigger_auto_update(self, make_vm, due_date_service, pregnancy_profile):
        vm = make_vm(user_profile_service=MockUserProfileService(pregnancy_profile))
        vm.profile = pregnancy_profile

        vm.trigger_auto_update()
        await vm.wait_for_background_tasks()

        assert due_date_service.schedule_call_count == 1


class TestConvenience:
    def test_has_completed_onboarding(self, make_vm, profile_service):
        vm = make_vm()
        assert vm.has_completed_onboarding is True
        profile_service.should_throw_on_load = True
        assert vm.has_completed_onboarding is False

    def test_total_stories_count(self, make_vm, story_service):
        vm = make_vm()
        assert vm.total_stories_count == 2
        story_service.should_throw_on_load = True
        assert vm.total_stories_count == 0

    def test_stories_created_today(self, make_vm, story_service, fixed_now):
        story_service.mock_stories = [
            create_mock_story(title="Today", date=fixed_now - timedelta(hours=1)),
            create_mock_story(title="Old", date=fixed_now - timedelta(days=1)),
        ]
        vm = make_vm()
        assert [s.title for s in vm.get_stories_created_today()] == ["Today"]

    def test_stories_created_today_failure(self, make_vm, story_service):
        story_service.should_throw_on_load = True
        vm = make_vm()
        assert vm.get_stories_created_today() == []
        assert isinstance(vm.error, DataCorruptionError)

    def test_recent_and_favorite_stories(self, make_vm, fixed_now):
        vm = make_vm()
        vm.stories = [
            create_mock_story(title=f"S{i}", date=fixed_now - timedelta(days=i), is_favorite=i == 3)
            for i in range(7)
        ]
        assert [s.title for s in vm.recent_stories] == ["S0", "S1", "S2", "S3", "S4"]
        assert [s.title for s in vm.favorite_stories] == ["S3"]


class TestDefaultServices:
    def test_falls_back_to_shared_container(self, services):
        ServiceContainer.set_shared(services)
        vm = HomeViewModel()
        assert vm.user_profile_service is services.profile
        assert vm.story_service is services.story
        assert vm.story_time_notification_service is services.story_time_notifications
        assert vm.auto_update_service.user_profile_service is services.profile

    def test_explicit_container(self, services, fixed_now):
        vm = HomeViewModel(services=services)
        assert vm.due_date_notification_service is services.due_date_notifications
        assert vm._clock() == fixed_now
