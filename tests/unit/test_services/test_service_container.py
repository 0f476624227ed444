"""Tests for ServiceContainer initialization."""

import logging
from unittest.mock import patch

from softdreams.memory.key_value_store import JsonFileKeyValueStore
from softdreams.services import ServiceContainer
from softdreams.settings import Settings


class TestServiceContainer:
    """Tests for ServiceContainer class."""

    def test_init_with_provided_settings(self, settings, store):
        """Test ServiceContainer wires every service to the shared store."""
        container = ServiceContainer(settings, store=store)

        assert container.settings is settings
        assert container.store is store
        assert container.profile.store is store
        assert container.story.store is store
        assert container.generation_config.store is store
        assert container.notifications.store is store
        assert container.generation.config_service is container.generation_config
        assert container.auto_update.user_profile_service is container.profile
        assert container.story_time_notifications.center is container.notifications
        assert container.due_date_notifications.center is container.notifications

    def test_init_loads_settings_if_not_provided(self):
        """Test ServiceContainer loads settings when None is passed."""
        with patch("softdreams.services.Settings.load") as mock_load:
            mock_settings = Settings()
            mock_load.return_value = mock_settings

            container = ServiceContainer(None)

            mock_load.assert_called_once()
            assert container.settings is mock_settings

    def test_default_store_uses_data_dir(self, settings):
        container = ServiceContainer(settings)
        assert isinstance(container.store, JsonFileKeyValueStore)

    def test_clock_shared(self, settings, store, clock, fixed_now):
        container = ServiceContainer(settings, store=store, clock=clock)
        assert container.clock() == fixed_now

    def test_init_logs_timing(self, settings, store, caplog):
        """Test ServiceContainer logs initialization timing at INFO level."""
        with caplog.at_level(logging.INFO, logger="softdreams.services"):
            ServiceContainer(settings, store=store)

        assert any("ServiceContainer initialized" in r.message for r in caplog.records)


class TestSharedContainer:
    """Tests for the process-wide fallback instance."""

    def test_shared_is_created_once(self):
        first = ServiceContainer.shared()
        assert ServiceContainer.shared() is first

    def test_set_shared(self, services):
        ServiceContainer.set_shared(services)
        assert ServiceContainer.shared() is services

        ServiceContainer.set_shared(None)
        assert ServiceContainer.shared() is not services
