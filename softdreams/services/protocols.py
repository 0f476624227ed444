"""Service interfaces the view-models depend on.

View-models accept anything matching these protocols, so tests can pass
lightweight fakes instead of store-backed services.
"""

from datetime import date, time
from typing import Protocol

from softdreams.memory.generation_config import (
    GenerationModel,
    StoryGenerationConfig,
    SubscriptionTier,
)
from softdreams.memory.story import Story, StoryOptions
from softdreams.memory.user_profile import UserProfile


class UserProfileServiceProtocol(Protocol):
    """Profile persistence."""

    def save_profile(self, profile: UserProfile) -> None: ...

    def load_profile(self) -> UserProfile | None: ...

    def delete_profile(self) -> None: ...

    def profile_exists(self) -> bool: ...


class StoryServiceProtocol(Protocol):
    """Story persistence."""

    def save_stories(self, stories: list[Story]) -> None: ...

    def load_stories(self) -> list[Story]: ...

    def save_story(self, story: Story) -> None: ...

    def update_story(self, story: Story) -> None: ...

    def delete_story(self, story_id: str) -> None: ...

    def get_story(self, story_id: str) -> Story | None: ...

    def get_story_count(self) -> int: ...

    def toggle_favorite(self, story_id: str) -> Story: ...

    def get_stories_created_on(self, day: date) -> list[Story]: ...


class StoryGenerationServiceProtocol(Protocol):
    """Story generation."""

    async def generate_story(self, profile: UserProfile, options: StoryOptions) -> Story: ...

    async def generate_daily_story(self, profile: UserProfile) -> Story: ...

    def can_generate_story(self, profile: UserProfile, options: StoryOptions) -> bool: ...

    def get_suggested_themes(self, profile: UserProfile) -> list[str]: ...


class StoryGenerationConfigServiceProtocol(Protocol):
    """Tier, model and daily quota."""

    def load_config(self) -> StoryGenerationConfig: ...

    def save_config(self, config: StoryGenerationConfig) -> None: ...

    def reset_config(self) -> None: ...

    def config_exists(self) -> bool: ...

    def remaining_generations(self) -> int: ...

    def release_generation(self) -> StoryGenerationConfig: ...

    def set_subscription_tier(self, tier: SubscriptionTier) -> StoryGenerationConfig: ...

    def set_selected_model(self, model: GenerationModel) -> StoryGenerationConfig: ...


class StoryTimeNotificationServiceProtocol(Protocol):
    """Daily story-time reminder."""

    async def has_scheduled_story_time_reminders(self) -> bool: ...

    async def schedule_story_time_reminder(self, story_time: time, baby_name: str) -> bool: ...

    async def cancel_story_time_reminders(self) -> None: ...


class DueDateNotificationServiceProtocol(Protocol):
    """Due-date reminders."""

    async def schedule_notifications_for_current_profile(self) -> int: ...
