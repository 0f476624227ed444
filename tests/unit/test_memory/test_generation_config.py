"""Tests for StoryGenerationConfig and its enums."""

from datetime import date

import pytest
from pydantic import ValidationError

from softdreams.memory.generation_config import (
    GenerationModel,
    StoryGenerationConfig,
    SubscriptionTier,
)


class TestGenerationModel:
    def test_free_tier_excludes_premium_models(self):
        free = GenerationModel.available_for(SubscriptionTier.FREE)
        assert GenerationModel.TEMPLATE in free
        assert GenerationModel.LLAMA3_2 in free
        assert GenerationModel.QWEN2_5 not in free

    def test_premium_tier_includes_all(self):
        assert GenerationModel.available_for(SubscriptionTier.PREMIUM) == list(GenerationModel)

    def test_template_is_offline(self):
        assert GenerationModel.TEMPLATE.is_offline
        assert not GenerationModel.GEMMA2.is_offline


class TestStoryGenerationConfig:
    def test_defaults(self):
        config = StoryGenerationConfig()
        assert config.subscription_tier is SubscriptionTier.FREE
        assert config.selected_model is GenerationModel.TEMPLATE
        assert config.stories_generated_today == 0
        assert config.last_reset_date == date.today()

    def test_negative_counter_rejected(self):
        with pytest.raises(ValidationError):
            StoryGenerationConfig(stories_generated_today=-1)

    def test_reset_on_new_day(self):
        config = StoryGenerationConfig(stories_generated_today=3, last_reset_date=date(2026, 3, 9))
        assert config.reset_if_needed(date(2026, 3, 10)) is True
        assert config.stories_generated_today == 0
        assert config.last_reset_date == date(2026, 3, 10)

    def test_no_reset_same_day(self):
        config = StoryGenerationConfig(stories_generated_today=2, last_reset_date=date(2026, 3, 10))
        assert config.reset_if_needed(date(2026, 3, 10)) is False
        assert config.stories_generated_today == 2

    def test_can_use_model(self):
        config = StoryGenerationConfig()
        assert config.can_use_model(GenerationModel.TEMPLATE)
        assert not config.can_use_model(GenerationModel.GEMMA2)
