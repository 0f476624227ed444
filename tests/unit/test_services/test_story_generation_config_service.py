"""Tests for StoryGenerationConfigService."""

from datetime import date, datetime

import pytest

from softdreams.memory.generation_config import (
    GenerationModel,
    StoryGenerationConfig,
    SubscriptionTier,
)
from softdreams.memory.key_value_store import InMemoryKeyValueStore, StorageKeys
from softdreams.services.story_generation_config_service import StoryGenerationConfigService
from softdreams.utils.exceptions import DataCorruptionError, ModelNotAvailableError


@pytest.fixture
def config_service(store, settings, clock):
    return StoryGenerationConfigService(store, settings, clock)


def store_config(store, **fields) -> None:
    store.set(StorageKeys.STORY_GENERATION_CONFIG, StoryGenerationConfig(**fields).model_dump_json())


class TestLoadConfig:
    """Tests for loading and the lazy daily reset."""

    def test_defaults_when_nothing_stored(self, config_service, fixed_now):
        config = config_service.load_config()
        assert config.subscription_tier is SubscriptionTier.FREE
        assert config.stories_generated_today == 0
        assert config.last_reset_date == fixed_now.date()
        assert config_service.config_exists() is False

    def test_counter_resets_on_new_day(self, store, config_service, fixed_now):
        """A counter from a previous day goes back to zero and is saved."""
        store_config(store, stories_generated_today=3, last_reset_date=date(2026, 3, 9))

        config = config_service.load_config()

        assert config.stories_generated_today == 0
        assert config.last_reset_date == fixed_now.date()
        stored = StoryGenerationConfig.model_validate_json(
            store.get(StorageKeys.STORY_GENERATION_CONFIG)
        )
        assert stored.stories_generated_today == 0

    def test_counter_kept_on_same_day(self, store, config_service, fixed_now):
        store_config(store, stories_generated_today=2, last_reset_date=fixed_now.date())
        assert config_service.load_config().stories_generated_today == 2

    def test_reset_also_applies_to_future_dates(self, store, config_service):
        """Any stored date other than today triggers the reset."""
        store_config(store, stories_generated_today=1, last_reset_date=date(2026, 3, 11))
        assert config_service.load_config().stories_generated_today == 0

    def test_corrupt_config_raises(self, settings, clock):
        store = InMemoryKeyValueStore({StorageKeys.STORY_GENERATION_CONFIG: "[]"})
        with pytest.raises(DataCorruptionError):
            StoryGenerationConfigService(store, settings, clock).load_config()

    def test_reset_config(self, store, config_service):
        store_config(store, subscription_tier=SubscriptionTier.PREMIUM)
        config_service.reset_config()
        assert config_service.load_config().subscription_tier is SubscriptionTier.FREE


class TestQuota:
    def test_record_generation_counts_down(self, config_service):
        assert config_service.remaining_generations() == 3
        config_service.record_generation()
        config_service.record_generation()
        assert config_service.remaining_generations() == 1
        assert config_service.can_generate() is True
        config_service.record_generation()
        assert config_service.remaining_generations() == 0
        assert config_service.can_generate() is False

    def test_release_generation_gives_slot_back(self, config_service):
        config_service.record_generation()
        config_service.record_generation()

        config = config_service.release_generation()

        assert config.stories_generated_today == 1
        assert config_service.remaining_generations() == 2

    def test_release_never_goes_below_zero(self, config_service):
        assert config_service.release_generation().stories_generated_today == 0
        assert config_service.remaining_generations() == 3

    def test_premium_limit_from_settings(self, store, config_service, fixed_now):
        store_config(
            store,
            subscription_tier=SubscriptionTier.PREMIUM,
            stories_generated_today=5,
            last_reset_date=fixed_now.date(),
        )
        assert config_service.remaining_generations() == 15

    def test_new_day_restores_quota(self, store, settings):
        now = {"value": datetime(2026, 3, 10, 20, 0)}
        service = StoryGenerationConfigService(store, settings, lambda: now["value"])
        for _ in range(3):
            service.record_generation()
        assert service.can_generate() is False

        now["value"] = datetime(2026, 3, 11, 8, 0)
        assert service.remaining_generations() == 3


class TestTierAndModel:
    def test_select_model_outside_tier_raises(self, config_service):
        with pytest.raises(ModelNotAvailableError):
            config_service.set_selected_model(GenerationModel.GEMMA2)

    def test_select_model_in_tier(self, config_service):
        config_service.set_selected_model(GenerationModel.LLAMA3_2)
        assert config_service.load_config().selected_model is GenerationModel.LLAMA3_2

    def test_downgrade_resets_premium_model(self, config_service):
        config_service.set_subscription_tier(SubscriptionTier.PREMIUM)
        config_service.set_selected_model(GenerationModel.QWEN2_5)

        config = config_service.set_subscription_tier(SubscriptionTier.FREE)

        assert config.selected_model is GenerationModel.TEMPLATE
        assert config_service.load_config().selected_model is GenerationModel.TEMPLATE
