"""Story generation config service - tier, model and the daily quota."""

import logging
from datetime import date

from softdreams.memory.generation_config import (
    GenerationModel,
    StoryGenerationConfig,
    SubscriptionTier,
)
from softdreams.memory.key_value_store import KeyValueStore, StorageKeys
from softdreams.services._records import read_model, write_model
from softdreams.settings import Settings
from softdreams.utils.dates import Clock, system_clock
from softdreams.utils.exceptions import ModelNotAvailableError

logger = logging.getLogger(__name__)


class StoryGenerationConfigService:
    """Service for the persisted generation config.

    The daily counter is reset lazily: whenever the config is loaded on a
    day other than its ``last_reset_date``, the counter goes back to zero
    and the reset is written back.
    """

    def __init__(self, store: KeyValueStore, settings: Settings, clock: Clock = system_clock):
        """Initialize config service.

        Args:
            store: Key-value store holding the config record.
            settings: Application settings (daily limits).
            clock: Returns the current time.
        """
        self.store = store
        self.settings = settings
        self._clock = clock

    def _today(self) -> date:
        return self._clock().date()

    def load_config(self) -> StoryGenerationConfig:
        """Load the config, creating defaults when none is stored.

        Raises:
            DataCorruptionError: If the stored config cannot be decoded.
        """
        today = self._today()
        config = read_model(self.store, StorageKeys.STORY_GENERATION_CONFIG, StoryGenerationConfig)
        if config is None:
            logger.debug("No stored generation config, using defaults")
            return StoryGenerationConfig(last_reset_date=today)
        if config.reset_if_needed(today):
            logger.info("Daily story counter reset for %s", today)
            self.save_config(config)
        return config

    def save_config(self, config: StoryGenerationConfig) -> None:
        """Persist *config*."""
        write_model(self.store, StorageKeys.STORY_GENERATION_CONFIG, config)
        logger.debug(
            "Saved generation config: tier=%s model=%s today=%d",
            config.subscription_tier,
            config.selected_model,
            config.stories_generated_today,
        )

    def reset_config(self) -> None:
        """Remove the stored config so defaults apply again."""
        self.store.remove(StorageKeys.STORY_GENERATION_CONFIG)
        logger.info("Generation config reset to defaults")

    def config_exists(self) -> bool:
        """Check whether a config record is stored."""
        return self.store.contains(StorageKeys.STORY_GENERATION_CONFIG)

    def daily_limit(self, config: StoryGenerationConfig) -> int:
        """Stories allowed per day for the config's tier."""
        return self.settings.daily_limit_for_tier(config.subscription_tier.value)

    def remaining_generations(self) -> int:
        """Stories that can still be generated today."""
        config = self.load_config()
        return max(self.daily_limit(config) - config.stories_generated_today, 0)

    def can_generate(self) -> bool:
        """True while today's quota is not used up."""
        return self.remaining_generations() > 0

    def record_generation(self) -> StoryGenerationConfig:
        """Count one generated story against today's quota.

        Returns:
            The updated config.
        """
        config = self.load_config()
        config.stories_generated_today += 1
        self.save_config(config)
        logger.info(
            "Recorded story generation %d/%d for %s",
            config.stories_generated_today,
            self.daily_limit(config),
            config.last_reset_date,
        )
        return config

    def release_generation(self) -> StoryGenerationConfig:
        """Give back one counted story, e.g. when it could not be delivered.

        The counter never drops below zero; after a daily reset there is
        nothing left to give back.

        Returns:
            The updated config.
        """
        config = self.load_config()
        if config.stories_generated_today > 0:
            config.stories_generated_today -= 1
            self.save_config(config)
        logger.info(
            "Released story generation, now %d/%d for %s",
            config.stories_generated_today,
            self.daily_limit(config),
            config.last_reset_date,
        )
        return config

    def set_subscription_tier(self, tier: SubscriptionTier) -> StoryGenerationConfig:
        """Change the tier. Models outside the new tier fall back to the default."""
        config = self.load_config()
        config.subscription_tier = tier
        if not config.can_use_model(config.selected_model):
            logger.info(
                "Model %s not included in %s tier, switching to %s",
                config.selected_model,
                tier,
                GenerationModel.TEMPLATE,
            )
            config.selected_model = GenerationModel.TEMPLATE
        self.save_config(config)
        return config

    def set_selected_model(self, model: GenerationModel) -> StoryGenerationConfig:
        """Select the model used for new stories.

        Raises:
            ModelNotAvailableError: If the current tier does not include *model*.
        """
        config = self.load_config()
        if not config.can_use_model(model):
            raise ModelNotAvailableError(
                f"Model {model} is not available for the {config.subscription_tier} tier"
            )
        config.selected_model = model
        self.save_config(config)
        return config
