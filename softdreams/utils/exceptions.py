"""Centralized exception hierarchy for Soft Dreams.

Exception Hierarchy:

    SoftDreamsError (base for all application errors)
    ├── AppError (user-initiated storage operations, shown in the UI)
    │   ├── DataCorruptionError (stored record cannot be decoded)
    │   ├── InvalidDataError (request refers to missing or malformed data)
    │   └── SaveFailedError (record could not be written)
    ├── StoryGenerationError (story generation failures)
    │   ├── DailyLimitReachedError (daily quota used up)
    │   └── ModelNotAvailableError (model not included in the tier)
    └── ConfigError (configuration parsing/validation failures)

Usage:
    from softdreams.utils.exceptions import AppError, DataCorruptionError

    try:
        profile = services.profile.load_profile()
    except DataCorruptionError:
        logger.error("Stored profile is unreadable")
    except AppError as e:
        ui.notify(e.user_message, type="negative")
"""

import logging

logger = logging.getLogger(__name__)


class SoftDreamsError(Exception):
    """Base exception for all Soft Dreams errors.

    All custom exceptions inherit from this class so callers can catch
    every application-specific error with a single except clause.
    """

    #: Message safe to show to a parent in the UI.
    default_user_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        """Initialize the error.

        Args:
            message: Technical message for logs. Falls back to the user message.
        """
        super().__init__(message or self.default_user_message)

    @property
    def user_message(self) -> str:
        """Return the message to display in the UI."""
        return self.default_user_message


class AppError(SoftDreamsError):
    """Base exception for failures of user-initiated storage operations."""

    pass


class DataCorruptionError(AppError):
    """Raised when a stored record cannot be decoded or validated."""

    default_user_message = "Your saved data could not be read."


class InvalidDataError(AppError):
    """Raised when an operation refers to missing or malformed data.

    Updating a story whose id is not stored is the typical case.
    """

    default_user_message = "The information provided is not valid."


class SaveFailedError(AppError):
    """Raised when a record could not be written to storage."""

    default_user_message = "Your changes could not be saved."


class StoryGenerationError(SoftDreamsError):
    """Raised when a story could not be generated."""

    default_user_message = "We couldn't create a story right now. Please try again."


class DailyLimitReachedError(StoryGenerationError):
    """Raised when the daily story quota for the subscription tier is used up.

    Attributes:
        limit: The daily limit that was reached.
    """

    def __init__(self, limit: int):
        """Initialize with the limit that was reached.

        Args:
            limit: Number of stories allowed per day.
        """
        self.limit = limit
        super().__init__(f"Daily story limit of {limit} reached")
        logger.debug("DailyLimitReachedError initialized: limit=%d", limit)

    @property
    def user_message(self) -> str:
        """Return the message to display in the UI."""
        plural = "story" if self.limit == 1 else "stories"
        return f"You've created {self.limit} {plural} today. Come back tomorrow for more!"


class ModelNotAvailableError(StoryGenerationError):
    """Raised when the selected generation model is not part of the tier."""

    default_user_message = "This story model requires a premium subscription."


class ConfigError(SoftDreamsError):
    """Raised when configuration values cannot be parsed or are invalid."""

    pass
