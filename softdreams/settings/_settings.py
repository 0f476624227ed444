"""Main Settings dataclass for Soft Dreams.

Settings are stored in settings.json next to the package.
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar

from softdreams.settings import _validation as _validation_mod
from softdreams.settings._paths import DATA_DIR, SETTINGS_FILE
from softdreams.utils.atomic_io import atomic_write_text
from softdreams.utils.validation import validate_string_in_choices

logger = logging.getLogger(__name__)


def _merge_with_defaults(data: dict[str, Any], settings_cls: type[Settings]) -> bool:
    """Merge loaded JSON data with dataclass defaults.

    - Adds missing top-level keys with their default values
    - Removes top-level keys that no longer exist in the dataclass

    Modifies *data* in place.

    Returns:
        True if any changes were made, False otherwise.
    """
    default_dict = asdict(settings_cls())
    known_fields = {f.name for f in fields(settings_cls)}
    changed = False

    for key in list(data):
        if key not in known_fields:
            logger.info("Removing obsolete setting: %s", key)
            del data[key]
            changed = True

    for key in known_fields:
        if key not in data:
            logger.info("Adding new setting with default: %s", key)
            data[key] = default_dict[key]
            changed = True

    return changed


def _atomic_write_json(path: Path | str, data: dict[str, Any]) -> None:
    """Write JSON to *path* atomically via a temp file + rename."""
    atomic_write_text(Path(path), json.dumps(data, indent=2))


def _backup_corrupt_file(path: Path) -> None:
    """Keep a copy of an unreadable settings file for inspection."""
    backup_path = path.with_suffix(".json.corrupt")
    try:
        shutil.copy(path, backup_path)
        logger.info("Backed up corrupted settings to %s", backup_path)
    except OSError as copy_err:
        logger.warning("Failed to backup corrupted settings: %s", copy_err)


@dataclass
class Settings:
    """Application settings, stored as JSON."""

    # General
    log_level: str = "INFO"
    data_dir: str = field(default_factory=lambda: str(DATA_DIR))
    dark_mode: bool = False

    # Story generation backend (used by non-template models)
    ollama_url: str = "http://localhost:11434"
    ollama_timeout: int = 120  # Seconds
    generation_temperature: float = 0.8
    generation_max_tokens: int = 1200

    # Daily quota per subscription tier
    free_daily_story_limit: int = 3
    premium_daily_story_limit: int = 20

    # Local notifications
    notifications_enabled: bool = True  # Acts as the notification permission
    notification_poll_seconds: int = 30
    due_date_reminder_days: list[int] = field(default_factory=lambda: [28, 14, 7, 1, 0])
    due_date_reminder_hour: int = 9

    def save(self) -> None:
        """Save settings to JSON file."""
        self.validate()
        _atomic_write_json(SETTINGS_FILE, asdict(self))
        logger.info("Settings saved to %s", SETTINGS_FILE)

    def validate(self) -> bool:
        """Validate all settings fields. Delegates to _validation module.

        Returns:
            True if any settings were normalized during validation.

        Raises:
            ValueError: If any field contains an invalid value.
        """
        return _validation_mod.validate(self)

    @property
    def data_path(self) -> Path:
        """Return the data directory as a Path."""
        return Path(self.data_dir)

    # Class-level cache for settings (speeds up repeated load() calls)
    _cached_instance: ClassVar[Settings | None] = None

    @classmethod
    def load(cls, use_cache: bool = True) -> Settings:
        """Load settings from JSON file, or create defaults.

        New settings get default values and removed settings are cleaned
        up. Customized values are always preserved.

        Args:
            use_cache: If True, return cached instance if available. Set to False
                to force reload from disk.

        Returns:
            Settings instance.

        Raises:
            ValueError: If a stored value has an invalid type or range.
        """
        if use_cache and cls._cached_instance is not None:
            return cls._cached_instance

        loaded_from_file = False
        data: dict[str, Any] = {}

        if SETTINGS_FILE.exists():
            try:
                with open(SETTINGS_FILE, encoding="utf-8") as f:
                    raw = json.load(f)
                if isinstance(raw, dict):
                    data = raw
                    loaded_from_file = bool(data)
                else:
                    logger.error(
                        "Corrupted settings file (expected JSON object, got %s)",
                        type(raw).__name__,
                    )
                    _backup_corrupt_file(SETTINGS_FILE)
            except json.JSONDecodeError as e:
                logger.error("Corrupted settings file (invalid JSON): %s", e)
                _backup_corrupt_file(SETTINGS_FILE)
            except OSError as e:
                logger.error("Cannot read settings file: %s", e)

        changed = _merge_with_defaults(data, cls)

        # TypeError surfaces from range checks on wrongly typed values
        try:
            settings = cls(**data)
            changed = settings.validate() or changed
        except TypeError as e:
            raise ValueError(f"A setting has an invalid type: {e}") from e

        if changed or not loaded_from_file:
            try:
                _atomic_write_json(SETTINGS_FILE, asdict(settings))
                logger.info("Settings written to %s", SETTINGS_FILE)
            except OSError as write_err:
                logger.warning("Could not persist settings to disk: %s", write_err)

        cls._cached_instance = settings
        return settings

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the cached settings instance.

        Use this in tests that need to verify settings loading behavior,
        or after programmatically modifying settings files.
        """
        cls._cached_instance = None

    def daily_limit_for_tier(self, tier: str) -> int:
        """Return the daily story limit for a subscription tier value.

        Raises:
            ValueError: If *tier* is not a known tier.
        """
        validate_string_in_choices(tier, "tier", ["free", "premium"])
        if tier == "premium":
            return self.premium_daily_story_limit
        return self.free_daily_story_limit
