"""Onboarding view-model: collects and saves the user profile."""

import logging
from datetime import date, time

from softdreams.memory.user_profile import BabyStage, Gender, UserProfile
from softdreams.services import ServiceContainer
from softdreams.services.protocols import (
    DueDateNotificationServiceProtocol,
    StoryTimeNotificationServiceProtocol,
    UserProfileServiceProtocol,
)
from softdreams.ui.view_models._observable import ObservableObject
from softdreams.ui.view_models.home import as_app_error
from softdreams.utils.dates import Clock, system_clock
from softdreams.utils.exceptions import AppError, InvalidDataError

logger = logging.getLogger(__name__)

AVAILABLE_INTERESTS = [
    "animals",
    "dinosaurs",
    "space",
    "ocean",
    "music",
    "vehicles",
    "princesses",
    "nature",
    "magic",
    "sports",
]

MAX_NAME_LENGTH = 50


class OnboardingViewModel(ObservableObject):
    """Form state for creating or editing the profile."""

    PUBLISHED = ("error", "is_saving", "is_complete")

    def __init__(
        self,
        user_profile_service: UserProfileServiceProtocol | None = None,
        story_time_notification_service: StoryTimeNotificationServiceProtocol | None = None,
        due_date_notification_service: DueDateNotificationServiceProtocol | None = None,
        services: ServiceContainer | None = None,
        clock: Clock | None = None,
    ):
        super().__init__()
        if services is None and None in (
            user_profile_service,
            story_time_notification_service,
            due_date_notification_service,
        ):
            services = ServiceContainer.shared()
        self.user_profile_service = (
            user_profile_service if user_profile_service is not None else services.profile
        )
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
        self._clock = clock or (services.clock if services is not None else system_clock)

        # Form fields
        self.name = ""
        self.baby_stage = BabyStage.TODDLER
        self.gender = Gender.NOT_SPECIFIED
        self.interests: list[str] = []
        self.story_time = time(20, 0)
        self.due_date: date | None = None
        self.birth_date: date | None = None
        self.parent_names: list[str] = []

        self.existing: UserProfile | None = None
        self.error: AppError | None = None
        self.is_saving = False
        self.is_complete = False

    def toggle_interest(self, interest: str) -> None:
        """Add *interest* if missing, otherwise remove it."""
        if interest in self.interests:
            self.interests.remove(interest)
        else:
            self.interests.append(interest)

    @property
    def validation_errors(self) -> list[str]:
        """Problems that block completing the form, in display order."""
        today = self._clock().date()
        errors: list[str] = []
        if len(self.name.strip()) > MAX_NAME_LENGTH:
            errors.append(f"Name must be at most {MAX_NAME_LENGTH} characters")
        if self.baby_stage == BabyStage.PREGNANCY:
            if self.due_date is None:
                errors.append("Please enter the due date")
            elif self.due_date < today:
                errors.append("The due date is in the past")
        else:
            if not self.name.strip():
                errors.append("Please enter your child's name")
            if self.birth_date is not None and self.birth_date > today:
                errors.append("The birth date is in the future")
        return errors

    @property
    def can_complete(self) -> bool:
        return not self.validation_errors and not self.is_saving

    def build_profile(self) -> UserProfile:
        """Create a profile from the current form values.

        When editing, fields the form does not show keep their loaded values.

        Raises:
            InvalidDataError: If the form is incomplete.
        """
        errors = self.validation_errors
        if errors:
            raise InvalidDataError("; ".join(errors))
        is_pregnancy = self.baby_stage == BabyStage.PREGNANCY
        form = {
            "name": self.name,
            "baby_stage": self.baby_stage,
            "gender": self.gender,
            "interests": self.interests,
            "story_time": self.story_time,
            "due_date": self.due_date if is_pregnancy else None,
            "birth_date": None if is_pregnancy else self.birth_date,
            "parent_names": self.parent_names,
        }
        if self.existing is not None:
            base = self.existing.model_dump()
        else:
            base = {"created_at": self._clock()}
        try:
            return UserProfile.model_validate({**base, **form})
        except ValueError as e:
            raise InvalidDataError(str(e)) from e

    def load_existing(self) -> bool:
        """Fill the form from the stored profile.

        Returns:
            True if a profile was loaded.
        """
        try:
            profile = self.user_profile_service.load_profile()
        except Exception as e:
            logger.error("Failed to load existing profile: %s", e)
            self.error = as_app_error(e)
            return False
        if profile is None:
            return False
        self.existing = profile
        self.name = profile.name
        self.baby_stage = profile.baby_stage
        self.gender = profile.gender
        self.interests = list(profile.interests)
        self.story_time = profile.story_time
        self.due_date = profile.due_date
        self.birth_date = profile.birth_date
        self.parent_names = list(profile.parent_names)
        logger.debug("Loaded existing profile for editing: %s", profile.display_name)
        return True

    async def complete_onboarding(self) -> UserProfile | None:
        """Save the profile and set up reminders.

        Returns:
            The saved profile, or None when validation or saving failed
            (``error`` is set).
        """
        self.is_saving = True
        try:
            profile = self.build_profile()
            self.user_profile_service.save_profile(profile)
        except Exception as e:
            logger.error("Failed to complete onboarding: %s", e)
            self.error = as_app_error(e)
            return None
        finally:
            self.is_saving = False

        self.error = None
        logger.info("Onboarding completed for %s (%s)", profile.display_name, profile.baby_stage)
        await self._schedule_reminders(profile)
        self.is_complete = True
        return profile

    async def _schedule_reminders(self, profile: UserProfile) -> None:
        """Replace story-time and due-date reminders for *profile*, logging failures."""
        try:
            await self.story_time_notification_service.cancel_story_time_reminders()
            await self.story_time_notification_service.schedule_story_time_reminder(
                profile.story_time, profile.display_name
            )
        except Exception:
            logger.exception("Failed to schedule story time reminder")
        try:
            await self.due_date_notification_service.schedule_notifications_for_current_profile()
        except Exception:
            logger.exception("Failed to schedule due date reminders")
