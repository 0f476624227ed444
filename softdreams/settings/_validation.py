"""Validation functions for Settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlparse

if TYPE_CHECKING:
    from softdreams.settings._settings import Settings

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate(settings: Settings) -> bool:
    """Validate all settings fields.

    Returns:
        True if any settings were mutated during validation (e.g. unsorted
        reminder days normalized), False otherwise. Callers can use this to
        decide whether to re-save the settings file.

    Raises:
        ValueError: If any field contains an invalid value.
    """
    _validate_log_level(settings)
    _validate_url(settings)
    _validate_generation(settings)
    _validate_story_limits(settings)
    _validate_notifications(settings)
    changed = _normalize_reminder_days(settings)
    return changed


def _validate_log_level(settings: Settings) -> None:
    """Validate log_level is a known logging level."""
    if settings.log_level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {list(LOG_LEVELS)}, got {settings.log_level}")


def _validate_url(settings: Settings) -> None:
    """Validate URL format for ollama_url."""
    try:
        parsed = urlparse(settings.ollama_url)
    except (AttributeError, TypeError) as e:
        raise ValueError(f"Invalid ollama_url: {settings.ollama_url} - {e}") from e
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Invalid URL scheme in ollama_url: {settings.ollama_url}")
    if not parsed.netloc:
        raise ValueError(f"Invalid URL (missing host) in ollama_url: {settings.ollama_url}")


def _validate_generation(settings: Settings) -> None:
    """Validate generation backend parameters."""
    if not 0.0 <= settings.generation_temperature <= 2.0:
        raise ValueError(
            f"generation_temperature must be between 0.0 and 2.0, "
            f"got {settings.generation_temperature}"
        )
    if not 128 <= settings.generation_max_tokens <= 8192:
        raise ValueError(
            f"generation_max_tokens must be between 128 and 8192, "
            f"got {settings.generation_max_tokens}"
        )
    if not 5 <= settings.ollama_timeout <= 600:
        raise ValueError(f"ollama_timeout must be between 5 and 600, got {settings.ollama_timeout}")


def _validate_story_limits(settings: Settings) -> None:
    """Validate per-tier daily story limits."""
    if not 1 <= settings.free_daily_story_limit <= 100:
        raise ValueError(
            f"free_daily_story_limit must be between 1 and 100, "
            f"got {settings.free_daily_story_limit}"
        )
    if not settings.free_daily_story_limit <= settings.premium_daily_story_limit <= 1000:
        raise ValueError(
            f"premium_daily_story_limit must be between free_daily_story_limit and 1000, "
            f"got {settings.premium_daily_story_limit}"
        )


def _validate_notifications(settings: Settings) -> None:
    """Validate reminder scheduling settings."""
    if not 5 <= settings.notification_poll_seconds <= 3600:
        raise ValueError(
            f"notification_poll_seconds must be between 5 and 3600, "
            f"got {settings.notification_poll_seconds}"
        )
    if not 0 <= settings.due_date_reminder_hour <= 23:
        raise ValueError(
            f"due_date_reminder_hour must be between 0 and 23, "
            f"got {settings.due_date_reminder_hour}"
        )
    if not isinstance(settings.due_date_reminder_days, list):
        raise ValueError("due_date_reminder_days must be a list of integers")
    for days in settings.due_date_reminder_days:
        if isinstance(days, bool) or not isinstance(days, int) or not 0 <= days <= 280:
            raise ValueError(f"due_date_reminder_days entries must be 0-280, got {days!r}")


def _normalize_reminder_days(settings: Settings) -> bool:
    """Deduplicate and sort reminder days, largest offset first.

    Returns:
        True if the list was changed.
    """
    normalized = sorted(set(settings.due_date_reminder_days), reverse=True)
    if normalized != settings.due_date_reminder_days:
        logger.info(
            "Normalized due_date_reminder_days %s -> %s",
            settings.due_date_reminder_days,
            normalized,
        )
        settings.due_date_reminder_days = normalized
        return True
    return False
