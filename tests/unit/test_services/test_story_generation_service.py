"""Tests for StoryGenerationService."""

import asyncio
from unittest.mock import MagicMock

import pytest

from softdreams.memory.generation_config import (
    GenerationModel,
    StoryGenerationConfig,
    SubscriptionTier,
)
from softdreams.memory.key_value_store import StorageKeys
from softdreams.memory.story import AgeRange, StoryLength, StoryOptions
from softdreams.services.story_backends import ComposedStory
from softdreams.services.story_generation_config_service import StoryGenerationConfigService
from softdreams.services.story_generation_service import StoryGenerationService
from softdreams.utils.exceptions import (
    DailyLimitReachedError,
    InvalidDataError,
    ModelNotAvailableError,
    StoryGenerationError,
)


@pytest.fixture
def config_service(store, settings, clock):
    return StoryGenerationConfigService(store, settings, clock)


@pytest.fixture
def generation_service(config_service, settings, clock):
    return StoryGenerationService(config_service, settings, clock=clock)


class TestSuggestedThemes:
    def test_stage_themes_then_interests_then_basics(self, generation_service, toddler_profile):
        themes = generation_service.get_suggested_themes(toddler_profile)
        assert themes[:4] == ["Animals", "Vehicles", "Magic", "Kindness"]
        assert "Space" in themes
        assert themes[-1] == "Bedtime"
        assert len(themes) == len(set(themes))

    def test_pregnancy_themes(self, generation_service, pregnancy_profile):
        assert generation_service.get_suggested_themes(pregnancy_profile)[0] == "Lullaby"


class TestGenerateStory:
    """Tests for generate_story()."""

    @pytest.mark.asyncio
    async def test_generates_story_with_metadata(
        self, generation_service, toddler_profile, fixed_now
    ):
        options = StoryOptions(theme="Space", length=StoryLength.SHORT, characters=["Rocket"])

        story = await generation_service.generate_story(toddler_profile, options)

        assert story.title
        assert "Mia" in story.content
        assert story.theme == "Space"
        assert story.length is StoryLength.SHORT
        assert story.characters == ["Rocket"]
        assert story.age_range is AgeRange.TODDLER
        assert story.date == fixed_now
        assert story.reading_time >= 1
        assert story.tags == ["space", "toddler", "short"]

    @pytest.mark.asyncio
    async def test_generation_counts_against_quota(
        self, generation_service, config_service, toddler_profile
    ):
        await generation_service.generate_story(toddler_profile, StoryOptions())
        assert config_service.remaining_generations() == 2

    @pytest.mark.asyncio
    async def test_generated_story_is_not_saved(self, generation_service, store, toddler_profile):
        await generation_service.generate_story(toddler_profile, StoryOptions())
        assert store.get(StorageKeys.SAVED_STORIES) is None

    @pytest.mark.asyncio
    async def test_blank_theme_rejected(self, generation_service, config_service, toddler_profile):
        options = StoryOptions.model_construct(theme="  ")
        with pytest.raises(InvalidDataError):
            await generation_service.generate_story(toddler_profile, options)
        assert config_service.remaining_generations() == 3

    @pytest.mark.asyncio
    async def test_daily_limit(self, generation_service, toddler_profile):
        for _ in range(3):
            await generation_service.generate_story(toddler_profile, StoryOptions())

        with pytest.raises(DailyLimitReachedError) as exc_info:
            await generation_service.generate_story(toddler_profile, StoryOptions())
        assert exc_info.value.limit == 3
        assert "3 stories today" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_model_outside_tier(self, generation_service, store, toddler_profile, fixed_now):
        store.set(
            StorageKeys.STORY_GENERATION_CONFIG,
            StoryGenerationConfig(
                subscription_tier=SubscriptionTier.FREE,
                selected_model=GenerationModel.GEMMA2,
                last_reset_date=fixed_now.date(),
            ).model_dump_json(),
        )
        with pytest.raises(ModelNotAvailableError):
            await generation_service.generate_story(toddler_profile, StoryOptions())

    @pytest.mark.asyncio
    async def test_uses_backend_for_selected_model(
        self, config_service, settings, clock, toddler_profile
    ):
        backend = MagicMock()
        backend.compose.return_value = ComposedStory(title="Llama Tale", content="Sleep well.")
        service = StoryGenerationService(
            config_service, settings, backends={GenerationModel.LLAMA3_2: backend}, clock=clock
        )
        config_service.set_selected_model(GenerationModel.LLAMA3_2)

        story = await service.generate_story(toddler_profile, StoryOptions(theme="Nature"))

        assert story.title == "Llama Tale"
        assert "llama3.2" in story.tags
        _, kwargs = backend.compose.call_args
        assert kwargs["model"] == "llama3.2"

    @pytest.mark.asyncio
    async def test_backend_failure_does_not_use_quota(
        self, config_service, settings, clock, toddler_profile
    ):
        backend = MagicMock()
        backend.compose.side_effect = StoryGenerationError("boom")
        service = StoryGenerationService(
            config_service, settings, backends={GenerationModel.TEMPLATE: backend}, clock=clock
        )

        with pytest.raises(StoryGenerationError):
            await service.generate_story(toddler_profile, StoryOptions())
        assert config_service.remaining_generations() == 3


class TestConcurrentGeneration:
    """Concurrent generations share one daily quota."""

    @pytest.mark.asyncio
    async def test_last_slot_goes_to_one_caller(
        self, generation_service, config_service, toddler_profile
    ):
        config_service.record_generation()
        config_service.record_generation()

        results = await asyncio.gather(
            *(generation_service.generate_story(toddler_profile, StoryOptions()) for _ in range(3)),
            return_exceptions=True,
        )

        stories = [r for r in results if not isinstance(r, Exception)]
        assert len(stories) == 1
        assert sum(isinstance(r, DailyLimitReachedError) for r in results) == 2
        assert config_service.load_config().stories_generated_today == 3

    @pytest.mark.asyncio
    async def test_slot_held_while_backend_runs(
        self, config_service, settings, clock, toddler_profile
    ):
        seen: list[int] = []

        def compose(*args, **kwargs):
            seen.append(config_service.load_config().stories_generated_today)
            return ComposedStory(title="Moon", content="Goodnight moon.")

        backend = MagicMock()
        backend.compose.side_effect = compose
        service = StoryGenerationService(
            config_service, settings, backends={GenerationModel.TEMPLATE: backend}, clock=clock
        )

        await service.generate_story(toddler_profile, StoryOptions())

        assert seen == [1]
        assert config_service.remaining_generations() == 2


class TestCanGenerate:
    def test_true_with_quota(self, generation_service, toddler_profile):
        assert generation_service.can_generate_story(toddler_profile, StoryOptions()) is True

    def test_false_when_limit_reached(self, generation_service, config_service, toddler_profile):
        for _ in range(3):
            config_service.record_generation()
        assert generation_service.can_generate_story(toddler_profile, StoryOptions()) is False

    def test_false_when_config_corrupt(self, generation_service, store, toddler_profile):
        store.set(StorageKeys.STORY_GENERATION_CONFIG, "garbage")
        assert generation_service.can_generate_story(toddler_profile, StoryOptions()) is False


class TestDailyStory:
    @pytest.mark.asyncio
    async def test_theme_picked_for_date(self, generation_service, toddler_profile, fixed_now):
        themes = generation_service.get_suggested_themes(toddler_profile)
        expected = themes[fixed_now.date().toordinal() % len(themes)]

        story = await generation_service.generate_daily_story(toddler_profile)

        assert story.theme == expected
        assert story.length is StoryLength.MEDIUM
