"""Settings package for Soft Dreams.

- _paths.py: Path constants for the settings file and data directory
- _validation.py: Field validation
- _settings.py: Main Settings dataclass
"""

from softdreams.settings._paths import DATA_DIR, SETTINGS_FILE
from softdreams.settings._settings import Settings

__all__ = ["DATA_DIR", "SETTINGS_FILE", "Settings"]
