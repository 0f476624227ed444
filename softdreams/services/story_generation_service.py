"""Story generation service - turns a profile and options into a Story."""

import asyncio
import logging

from softdreams.memory.generation_config import GenerationModel
from softdreams.memory.story import Story, StoryLength, StoryOptions, estimate_reading_time
from softdreams.memory.user_profile import BabyStage, UserProfile
from softdreams.services.story_backends import (
    OllamaStoryBackend,
    StoryBackend,
    TemplateStoryBackend,
)
from softdreams.services.story_generation_config_service import StoryGenerationConfigService
from softdreams.settings import Settings
from softdreams.utils.dates import Clock, system_clock
from softdreams.utils.exceptions import (
    AppError,
    DailyLimitReachedError,
    InvalidDataError,
    ModelNotAvailableError,
)
from softdreams.utils.logging_config import log_performance

logger = logging.getLogger(__name__)

# Themes suggested for every stage
BASE_THEMES = ["Adventure", "Friendship", "Nature", "Bedtime"]

STAGE_THEMES: dict[BabyStage, list[str]] = {
    BabyStage.PREGNANCY: ["Lullaby", "Waiting for You", "Family Love"],
    BabyStage.NEWBORN: ["Lullaby", "Family Love", "Gentle Sounds"],
    BabyStage.INFANT: ["Animals", "Colors", "Family Love"],
    BabyStage.TODDLER: ["Animals", "Vehicles", "Magic", "Kindness"],
    BabyStage.PRESCHOOLER: ["Fantasy", "Space", "Ocean", "Dinosaurs", "Kindness"],
}


class StoryGenerationService:
    """Service for generating stories.

    Generation is quota-checked against the stored config and delegated
    to the backend matching the selected model. The quota slot is taken
    before the backend runs and given back when it fails. The returned
    story is not saved; callers persist it through the story service and
    call ``release_generation()`` on the config service if that fails.
    """

    def __init__(
        self,
        config_service: StoryGenerationConfigService,
        settings: Settings,
        backends: dict[GenerationModel, StoryBackend] | None = None,
        clock: Clock = system_clock,
    ):
        """Initialize story generation service.

        Args:
            config_service: Service for tier, model and quota.
            settings: Application settings.
            backends: Optional backend per model. Models not listed use the
                template backend (offline) or the Ollama backend.
            clock: Returns the current time.
        """
        self.config_service = config_service
        self.settings = settings
        self._backends = backends or {}
        self._template_backend = TemplateStoryBackend()
        self._ollama_backend = OllamaStoryBackend(settings)
        self._clock = clock

    def _backend_for(self, model: GenerationModel) -> StoryBackend:
        """Pick the backend that serves *model*."""
        if model in self._backends:
            return self._backends[model]
        if model.is_offline:
            return self._template_backend
        return self._ollama_backend

    def get_suggested_themes(self, profile: UserProfile) -> list[str]:
        """Themes to offer for *profile*: stage themes, interests, then basics."""
        themes: list[str] = []
        candidates = [
            *STAGE_THEMES.get(profile.baby_stage, []),
            *(interest.title() for interest in profile.interests),
            *BASE_THEMES,
        ]
        for theme in candidates:
            if theme not in themes:
                themes.append(theme)
        return themes

    def can_generate_story(self, profile: UserProfile, options: StoryOptions) -> bool:
        """Check whether a story can be generated right now.

        False when the theme is blank, the daily quota is used up, the
        selected model is outside the tier, or the stored config cannot be read.
        """
        if not options.theme.strip():
            return False
        try:
            config = self.config_service.load_config()
        except AppError as e:
            logger.warning("Cannot check generation quota: %s", e)
            return False
        if not config.can_use_model(config.selected_model):
            return False
        limit = self.config_service.daily_limit(config)
        return config.stories_generated_today < limit

    async def generate_story(self, profile: UserProfile, options: StoryOptions) -> Story:
        """Generate one story and count it against the daily quota.

        Raises:
            DailyLimitReachedError: If today's quota is used up.
            ModelNotAvailableError: If the tier does not include the selected model.
            InvalidDataError: If the options have no theme.
            StoryGenerationError: If the backend fails.
            DataCorruptionError: If the stored config cannot be decoded.
        """
        if not options.theme.strip():
            raise InvalidDataError("A story theme is required")
        config = self.config_service.load_config()
        limit = self.config_service.daily_limit(config)
        if config.stories_generated_today >= limit:
            logger.info("Daily limit reached (%d/%d)", config.stories_generated_today, limit)
            raise DailyLimitReachedError(limit)
        model = config.selected_model
        if not config.can_use_model(model):
            raise ModelNotAvailableError(
                f"Model {model} is not available for the {config.subscription_tier} tier"
            )

        now = self._clock()
        seed = int(now.timestamp()) + config.stories_generated_today
        backend = self._backend_for(model)

        # Reserve the slot before the first await so concurrent calls see it
        self.config_service.record_generation()
        try:
            with log_performance(logger, f"story_generation[{model}]"):
                composed = await asyncio.to_thread(
                    backend.compose, profile, options, model=model.value, seed=seed
                )
            story = Story(
                title=composed.title,
                content=composed.content,
                date=now,
                theme=options.theme,
                length=options.length,
                characters=options.characters,
                age_range=profile.age_range,
                reading_time=estimate_reading_time(composed.content),
                tags=_story_tags(profile, options, model),
            )
        except BaseException:
            self.config_service.release_generation()
            raise
        logger.info("Generated story '%s' (%d words)", story.title, story.word_count)
        return story

    async def generate_daily_story(self, profile: UserProfile) -> Story:
        """Generate today's story with a theme picked for the date."""
        themes = self.get_suggested_themes(profile)
        today = self._clock().date()
        theme = themes[today.toordinal() % len(themes)]
        logger.debug("Daily story theme for %s: %s", today, theme)
        options = StoryOptions(length=StoryLength.MEDIUM, theme=theme)
        return await self.generate_story(profile, options)


def _story_tags(profile: UserProfile, options: StoryOptions, model: GenerationModel) -> list[str]:
    """Searchable tags for a generated story."""
    tags = [options.theme.lower(), profile.baby_stage.value, options.length.value]
    if model is not GenerationModel.TEMPLATE:
        tags.append(model.value)
    return tags
