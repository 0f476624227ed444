"""Automatic profile updates.

Keeps the stored profile in step with time: a pregnancy becomes a newborn
once the due date has passed, and a child's stage follows their age.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from softdreams.memory.user_profile import BabyStage, UserProfile
from softdreams.services.user_profile_service import UserProfileService
from softdreams.utils.dates import Clock, system_clock
from softdreams.utils.exceptions import SoftDreamsError

logger = logging.getLogger(__name__)


@dataclass
class AutoUpdateResult:
    """Outcome of one auto-update attempt."""

    is_success: bool
    updated_fields: list[str] = field(default_factory=list)
    error: Exception | None = None

    @property
    def has_updates(self) -> bool:
        """True when at least one profile field changed."""
        return bool(self.updated_fields)


def pending_profile_changes(profile: UserProfile, today: date) -> dict[str, Any]:
    """Compute the field changes an auto-update would apply on *today*.

    Returns:
        Mapping of field name to new value; empty when nothing is due.
    """
    changes: dict[str, Any] = {}
    expected = profile.expected_stage(today)

    if profile.is_pregnancy and expected is not BabyStage.PREGNANCY:
        changes["baby_stage"] = expected
        if profile.birth_date is None:
            changes["birth_date"] = profile.due_date
    elif not profile.is_pregnancy and expected is not profile.baby_stage:
        changes["baby_stage"] = expected

    return changes


class AutoProfileUpdateService:
    """Service deciding on and applying automatic profile updates."""

    def __init__(self, user_profile_service: UserProfileService, clock: Clock = system_clock):
        """Initialize auto-update service.

        Args:
            user_profile_service: Service used to persist updated profiles.
            clock: Returns the current time.
        """
        self.user_profile_service = user_profile_service
        self._clock = clock

    def needs_auto_update(self, profile: UserProfile, today: date | None = None) -> bool:
        """Pure check whether *profile* has updates due.

        Args:
            profile: Profile to inspect. Never modified.
            today: Reference date; defaults to the clock's date.
        """
        today = today or self._clock().date()
        return bool(pending_profile_changes(profile, today))

    async def perform_auto_update(self, profile: UserProfile) -> AutoUpdateResult:
        """Apply due updates to *profile* and save it.

        Never raises: failures are reported in the result.
        """
        today = self._clock().date()
        changes = pending_profile_changes(profile, today)
        if not changes:
            logger.debug("No profile changes due for %s", profile.display_name)
            return AutoUpdateResult(is_success=True)

        updated = profile.model_copy(update={**changes, "last_update_check": today})
        try:
            # Re-validate the combined record before it is persisted
            updated = UserProfile.model_validate(updated.model_dump())
            self.user_profile_service.save_profile(updated)
        except (SoftDreamsError, ValueError) as e:
            logger.error("Auto-update of %s failed: %s", profile.display_name, e)
            return AutoUpdateResult(is_success=False, error=e)

        fields = sorted(changes)
        logger.info(
            "Auto-updated profile %s: %s",
            updated.display_name,
            ", ".join(f"{name}={changes[name]}" for name in fields),
        )
        return AutoUpdateResult(is_success=True, updated_fields=fields)
