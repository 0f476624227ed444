"""Story generation config - subscription tier, model and daily quota."""

from __future__ import annotations

import logging
from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class SubscriptionTier(StrEnum):
    """Subscription tier. Stored as a flag only; there is no billing."""

    FREE = "free"
    PREMIUM = "premium"

    @property
    def display_name(self) -> str:
        """Human-readable label."""
        return self.value.capitalize()


class GenerationModel(StrEnum):
    """Models stories can be generated with.

    ``template`` is the offline placeholder composer; the others are
    served by a local Ollama instance.
    """

    TEMPLATE = "template"
    LLAMA3_2 = "llama3.2"
    QWEN2_5 = "qwen2.5"
    GEMMA2 = "gemma2"

    @property
    def display_name(self) -> str:
        """Human-readable label."""
        labels = {
            "template": "Classic Tales (offline)",
            "llama3.2": "Llama 3.2",
            "qwen2.5": "Qwen 2.5",
            "gemma2": "Gemma 2",
        }
        return labels[self.value]

    @property
    def is_offline(self) -> bool:
        """True for the built-in template composer."""
        return self is GenerationModel.TEMPLATE

    @property
    def requires_premium(self) -> bool:
        """True when the model is reserved for premium subscribers."""
        return self in (GenerationModel.QWEN2_5, GenerationModel.GEMMA2)

    @classmethod
    def available_for(cls, tier: SubscriptionTier) -> list[GenerationModel]:
        """Models included in *tier*."""
        if tier is SubscriptionTier.PREMIUM:
            return list(cls)
        return [model for model in cls if not model.requires_premium]


class StoryGenerationConfig(BaseModel):
    """Persisted generation preferences and the daily usage counter."""

    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    selected_model: GenerationModel = GenerationModel.TEMPLATE
    stories_generated_today: int = Field(default=0, ge=0)
    last_reset_date: date = Field(default_factory=date.today)

    def needs_reset(self, today: date) -> bool:
        """True when the counter belongs to a different day than *today*."""
        return self.last_reset_date != today

    def reset_if_needed(self, today: date) -> bool:
        """Zero the counter when the stored date is not *today*.

        Returns:
            True if the counter was reset.
        """
        if not self.needs_reset(today):
            return False
        logger.debug(
            "Resetting daily story counter (%d generated on %s)",
            self.stories_generated_today,
            self.last_reset_date,
        )
        self.stories_generated_today = 0
        self.last_reset_date = today
        return True

    def can_use_model(self, model: GenerationModel) -> bool:
        """Check whether the current tier includes *model*."""
        return model in GenerationModel.available_for(self.subscription_tier)
