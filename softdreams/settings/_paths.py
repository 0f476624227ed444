"""Path constants for Soft Dreams settings and data directories."""

from pathlib import Path

SETTINGS_FILE = Path(__file__).parent.parent / "settings.json"

# Go up from softdreams/settings to softdreams/, then up to project root, then into data/
DATA_DIR = Path(__file__).parent.parent.parent / "data"

__all__ = ["DATA_DIR", "SETTINGS_FILE"]
