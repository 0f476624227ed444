"""Centralized UI state management."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """UI state shared by every page of one app instance.

    Usage:
        state = AppState()
        state.dark_mode = services.settings.dark_mode
        state.on_profile_change(refresh_header)
    """

    dark_mode: bool = False
    # Window start for the notification poller; due reminders are shown once
    last_notification_check: datetime = field(default_factory=datetime.now)
    notifications_shown: int = 0

    _profile_change_callbacks: list[Callable[[], None]] = field(default_factory=list, repr=False)

    def on_profile_change(self, callback: Callable[[], None]) -> None:
        """Register a callback for profile saves."""
        self._profile_change_callbacks.append(callback)

    def notify_profile_change(self) -> None:
        """Run profile-change callbacks, logging failures."""
        for callback in self._profile_change_callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Profile change callback failed")
