"""Story generation view-model."""

import logging

from softdreams.memory.generation_config import (
    GenerationModel,
    StoryGenerationConfig,
    SubscriptionTier,
)
from softdreams.memory.story import Story, StoryLength, StoryOptions
from softdreams.memory.user_profile import UserProfile
from softdreams.services import ServiceContainer
from softdreams.services.protocols import (
    StoryGenerationConfigServiceProtocol,
    StoryGenerationServiceProtocol,
    StoryServiceProtocol,
    UserProfileServiceProtocol,
)
from softdreams.ui.view_models._observable import ObservableObject
from softdreams.ui.view_models.home import as_app_error
from softdreams.utils.exceptions import InvalidDataError, SoftDreamsError

logger = logging.getLogger(__name__)


class StoryGenerationViewModel(ObservableObject):
    """Options form, quota display and the generated story.

    Generated stories are saved to the library before they are published.
    """

    PUBLISHED = ("is_generating", "generated_story", "error", "remaining_generations")

    def __init__(
        self,
        generation_service: StoryGenerationServiceProtocol | None = None,
        config_service: StoryGenerationConfigServiceProtocol | None = None,
        story_service: StoryServiceProtocol | None = None,
        user_profile_service: UserProfileServiceProtocol | None = None,
        services: ServiceContainer | None = None,
    ):
        super().__init__()
        if services is None and None in (
            generation_service,
            config_service,
            story_service,
            user_profile_service,
        ):
            services = ServiceContainer.shared()
        self.generation_service = (
            generation_service if generation_service is not None else services.generation
        )
        self.config_service = (
            config_service if config_service is not None else services.generation_config
        )
        self.story_service = story_service if story_service is not None else services.story
        self.user_profile_service = (
            user_profile_service if user_profile_service is not None else services.profile
        )

        # Options
        self.theme = "Adventure"
        self.length = StoryLength.MEDIUM
        self.characters: list[str] = []
        self.lesson = ""

        self.profile: UserProfile | None = None
        self.config: StoryGenerationConfig | None = None
        self.is_generating = False
        self.generated_story: Story | None = None
        self.error: SoftDreamsError | None = None
        self.remaining_generations = 0

    def load(self) -> None:
        """Load the profile and the current quota."""
        try:
            self.profile = self.user_profile_service.load_profile()
        except Exception as e:
            logger.error("Failed to load profile for generation: %s", e)
            self.error = as_app_error(e)
            return
        self.refresh_quota()

    def refresh_quota(self) -> None:
        """Re-read the config and publish the remaining generations."""
        try:
            self.config = self.config_service.load_config()
            self.remaining_generations = self.config_service.remaining_generations()
        except Exception as e:
            logger.error("Failed to load generation config: %s", e)
            self.error = as_app_error(e)

    @property
    def suggested_themes(self) -> list[str]:
        if self.profile is None:
            return []
        return self.generation_service.get_suggested_themes(self.profile)

    @property
    def available_models(self) -> list[GenerationModel]:
        tier = self.config.subscription_tier if self.config else SubscriptionTier.FREE
        return GenerationModel.available_for(tier)

    def options(self) -> StoryOptions:
        """Build generation options from the form.

        Raises:
            ValueError: If the theme is blank.
        """
        return StoryOptions(
            length=self.length,
            theme=self.theme,
            characters=self.characters,
            lesson=self.lesson.strip() or None,
        )

    @property
    def can_generate(self) -> bool:
        if self.profile is None or self.is_generating or not self.theme.strip():
            return False
        return self.generation_service.can_generate_story(self.profile, self.options())

    async def generate_story(self) -> Story | None:
        """Generate a story from the current options and save it."""
        if self.profile is None:
            logger.warning("Story generation requested without a profile")
            return None
        try:
            options = self.options()
        except ValueError as e:
            self.error = InvalidDataError(f"Invalid story options: {e}")
            return None
        return await self._run(self.generation_service.generate_story(self.profile, options))

    async def generate_daily_story(self) -> Story | None:
        """Generate and save today's story."""
        if self.profile is None:
            logger.warning("Daily story requested without a profile")
            return None
        return await self._run(self.generation_service.generate_daily_story(self.profile))

    async def _run(self, generation) -> Story | None:
        self.is_generating = True
        self.error = None
        try:
            story = await generation
            self._save_generated(story)
        except SoftDreamsError as e:
            logger.error("Story generation failed: %s", e)
            self.error = e
            return None
        except Exception as e:
            logger.exception("Unexpected error during story generation")
            self.error = as_app_error(e)
            return None
        finally:
            self.is_generating = False
            self.refresh_quota()

        self.generated_story = story
        return story

    def _save_generated(self, story: Story) -> None:
        """Save *story*, returning its quota slot when it cannot be kept."""
        try:
            self.story_service.save_story(story)
        except Exception:
            logger.warning("Generated story could not be saved, releasing its quota slot")
            try:
                self.config_service.release_generation()
            except Exception as e:
                logger.error("Failed to release quota slot: %s", e)
            raise

    def select_model(self, model: GenerationModel) -> bool:
        """Switch the generation model; sets ``error`` when the tier lacks it."""
        try:
            self.config = self.config_service.set_selected_model(model)
        except SoftDreamsError as e:
            logger.warning("Model selection rejected: %s", e)
            self.error = e
            return False
        logger.info("Selected generation model: %s", model)
        return True

    def set_subscription_tier(self, tier: SubscriptionTier) -> None:
        """Change the tier and refresh the quota."""
        try:
            self.config = self.config_service.set_subscription_tier(tier)
        except Exception as e:
            logger.error("Failed to change subscription tier: %s", e)
            self.error = as_app_error(e)
            return
        self.refresh_quota()
