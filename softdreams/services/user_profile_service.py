"""User profile service - persists the single child profile."""

import logging

from softdreams.memory.key_value_store import KeyValueStore, StorageKeys
from softdreams.memory.user_profile import UserProfile
from softdreams.services._records import read_model, write_model

logger = logging.getLogger(__name__)


class UserProfileService:
    """Service for loading and saving the user profile."""

    def __init__(self, store: KeyValueStore):
        """Initialize user profile service.

        Args:
            store: Key-value store holding the profile record.
        """
        self.store = store

    def save_profile(self, profile: UserProfile) -> None:
        """Persist *profile*, replacing any stored profile.

        Raises:
            SaveFailedError: If the record cannot be written.
        """
        write_model(self.store, StorageKeys.USER_PROFILE, profile)
        logger.info("Saved profile for %s (%s)", profile.display_name, profile.baby_stage)

    def load_profile(self) -> UserProfile | None:
        """Load the stored profile.

        Returns:
            The profile, or None if onboarding has not been completed.

        Raises:
            DataCorruptionError: If the stored profile cannot be decoded.
        """
        profile = read_model(self.store, StorageKeys.USER_PROFILE, UserProfile)
        if profile is None:
            logger.debug("No stored profile")
        return profile

    def delete_profile(self) -> None:
        """Remove the stored profile."""
        self.store.remove(StorageKeys.USER_PROFILE)
        logger.info("Deleted stored profile")

    def profile_exists(self) -> bool:
        """Check whether a profile record is stored."""
        return self.store.contains(StorageKeys.USER_PROFILE)
