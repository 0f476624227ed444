"""Services layer - business logic separated from UI.

This module provides a clean interface between the UI and the key-value
store, the notification center and the story generation backends.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import ClassVar

from softdreams.memory.key_value_store import JsonFileKeyValueStore, KeyValueStore
from softdreams.settings import Settings
from softdreams.utils.dates import Clock, system_clock

from .auto_profile_update_service import AutoProfileUpdateService, AutoUpdateResult
from .due_date_notification_service import DueDateNotificationService
from .notification_center import NotificationCenter
from .story_generation_config_service import StoryGenerationConfigService
from .story_generation_service import StoryGenerationService
from .story_service import StoryService
from .story_time_notification_service import StoryTimeNotificationService
from .user_profile_service import UserProfileService

logger = logging.getLogger(__name__)

__all__ = [
    "AutoProfileUpdateService",
    "AutoUpdateResult",
    "DueDateNotificationService",
    "NotificationCenter",
    "ServiceContainer",
    "StoryGenerationConfigService",
    "StoryGenerationService",
    "StoryService",
    "StoryTimeNotificationService",
    "UserProfileService",
]


@dataclass
class ServiceContainer:
    """Dependency injection container for all services.

    Usage:
        settings = Settings.load()
        services = ServiceContainer(settings)

        profile = services.profile.load_profile()
        stories = services.story.load_stories()

    View-models that are not handed explicit services fall back to the
    process-wide instance from :meth:`shared`.
    """

    settings: Settings
    clock: Clock
    store: KeyValueStore
    profile: UserProfileService
    story: StoryService
    generation_config: StoryGenerationConfigService
    generation: StoryGenerationService
    auto_update: AutoProfileUpdateService
    notifications: NotificationCenter
    story_time_notifications: StoryTimeNotificationService
    due_date_notifications: DueDateNotificationService

    _shared_instance: ClassVar[ServiceContainer | None] = None

    def __init__(
        self,
        settings: Settings | None = None,
        store: KeyValueStore | None = None,
        clock: Clock = system_clock,
    ):
        """Create and wire service instances that share settings and storage.

        Args:
            settings: Application settings. Loaded via Settings.load() if omitted.
            store: Key-value store. Defaults to JSON files in ``settings.data_dir``.
            clock: Returns the current time; shared by all date-aware services.
        """
        t0 = time.perf_counter()
        self.settings = settings or Settings.load()
        self.clock = clock
        self.store = store if store is not None else JsonFileKeyValueStore(self.settings.data_path)
        self.profile = UserProfileService(self.store)
        self.story = StoryService(self.store)
        self.generation_config = StoryGenerationConfigService(self.store, self.settings, clock)
        self.generation = StoryGenerationService(self.generation_config, self.settings, clock=clock)
        self.auto_update = AutoProfileUpdateService(self.profile, clock)
        self.notifications = NotificationCenter(self.store, self.settings)
        self.story_time_notifications = StoryTimeNotificationService(self.notifications)
        self.due_date_notifications = DueDateNotificationService(
            self.notifications, self.profile, self.settings, clock
        )
        logger.info("ServiceContainer initialized in %.3fs", time.perf_counter() - t0)

    @classmethod
    def shared(cls) -> ServiceContainer:
        """Return the process-wide container, creating it on first use."""
        if cls._shared_instance is None:
            cls._shared_instance = cls()
        return cls._shared_instance

    @classmethod
    def set_shared(cls, container: ServiceContainer | None) -> None:
        """Install (or clear, with None) the process-wide container."""
        cls._shared_instance = container
