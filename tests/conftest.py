"""Pytest fixtures for SoftDreams tests."""

import logging
from datetime import date, datetime, time

import pytest

from softdreams.memory.key_value_store import InMemoryKeyValueStore
from softdreams.memory.user_profile import BabyStage, Gender, UserProfile
from softdreams.services import ServiceContainer
from softdreams.settings import Settings

# Fixed "now" used by clock-aware tests: a Tuesday evening before story time
FIXED_NOW = datetime(2026, 3, 10, 19, 30)


@pytest.fixture(autouse=True, scope="function")
def cleanup_production_log_handlers():
    """Remove file handlers pointing to the production log after each test."""
    yield

    root_logger = logging.getLogger()
    production_log_name = "soft_dreams.log"

    handlers_to_remove = []
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            if hasattr(handler, "baseFilename") and production_log_name in handler.baseFilename:
                handlers_to_remove.append(handler)

    for handler in handlers_to_remove:
        handler.close()
        root_logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def clear_settings_cache_per_test():
    """Clear Settings cache before each test to ensure isolation."""
    Settings.clear_cache()
    yield
    Settings.clear_cache()


@pytest.fixture(autouse=True)
def reset_shared_container():
    """Drop the process-wide ServiceContainer between tests."""
    ServiceContainer.set_shared(None)
    yield
    ServiceContainer.set_shared(None)


@pytest.fixture(autouse=True)
def isolate_settings_and_data(tmp_path, monkeypatch):
    """Redirect SETTINGS_FILE and DATA_DIR to the test's temp directory.

    Without this, Settings.load() would write settings.json into the
    package and default stores would write into the real data folder.
    """
    import softdreams.settings._settings as settings_module

    monkeypatch.setattr(settings_module, "SETTINGS_FILE", tmp_path / "settings.json")
    monkeypatch.setattr(settings_module, "DATA_DIR", tmp_path / "data")
    yield


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now):
    """Clock pinned to FIXED_NOW."""
    return lambda: fixed_now


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Default settings with the data directory inside tmp_path."""
    return Settings(data_dir=str(tmp_path / "data"))


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def services(settings, store, clock) -> ServiceContainer:
    """Fully wired container over an in-memory store and the fixed clock."""
    return ServiceContainer(settings, store=store, clock=clock)


@pytest.fixture
def toddler_profile() -> UserProfile:
    """A two-year-old whose stage matches FIXED_NOW."""
    return UserProfile(
        name="Mia",
        baby_stage=BabyStage.TODDLER,
        gender=Gender.FEMALE,
        interests=["animals", "space"],
        story_time=time(19, 45),
        birth_date=date(2024, 1, 15),
    )


@pytest.fixture
def pregnancy_profile() -> UserProfile:
    """A pregnancy due two months after FIXED_NOW."""
    return UserProfile(
        name="",
        baby_stage=BabyStage.PREGNANCY,
        due_date=date(2026, 5, 10),
    )
