"""Story models - generated stories and the options that produce them."""

import logging
import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# Average read-aloud pace used to estimate reading time
WORDS_PER_MINUTE = 130


class StoryLength(StrEnum):
    """Requested story length."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @property
    def target_words(self) -> int:
        """Approximate word count to aim for."""
        return {"short": 250, "medium": 500, "long": 900}[self.value]

    @property
    def display_name(self) -> str:
        """Human-readable label, with the approximate reading time."""
        minutes = {"short": 2, "medium": 4, "long": 7}[self.value]
        return f"{self.value.capitalize()} (~{minutes} min)"


class AgeRange(StrEnum):
    """Audience a story is written for."""

    BABY = "baby"  # 0-1 years
    TODDLER = "toddler"  # 1-3 years
    PRESCHOOLER = "preschooler"  # 3-5 years
    EARLY_READER = "early_reader"  # 5-8 years

    @property
    def display_name(self) -> str:
        """Human-readable label."""
        labels = {
            "baby": "0-1 years",
            "toddler": "1-3 years",
            "preschooler": "3-5 years",
            "early_reader": "5-8 years",
        }
        return labels[self.value]


def estimate_reading_time(content: str) -> int:
    """Estimate read-aloud minutes for *content* (minimum 1)."""
    words = len(content.split())
    return max(1, round(words / WORDS_PER_MINUTE))


class Story(BaseModel):
    """A generated bedtime story."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    title: str
    content: str
    date: datetime = Field(default_factory=datetime.now)
    is_favorite: bool = False
    theme: str = ""
    length: StoryLength = StoryLength.MEDIUM
    characters: list[str] = Field(default_factory=list)
    age_range: AgeRange = AgeRange.PRESCHOOLER
    reading_time: int = 1  # Minutes
    tags: list[str] = Field(default_factory=list)

    @property
    def story_id(self) -> str:
        """The id as a string, the form used by services and routes."""
        return str(self.id)

    @property
    def word_count(self) -> int:
        """Number of words in the story text."""
        return len(self.content.split())

    def excerpt(self, max_chars: int = 140) -> str:
        """First characters of the story, cut at a word boundary."""
        text = " ".join(self.content.split())
        if len(text) <= max_chars:
            return text
        cut = text[:max_chars].rsplit(" ", 1)[0]
        return f"{cut}…"


class StoryOptions(BaseModel):
    """Choices made by the parent before generating a story."""

    length: StoryLength = StoryLength.MEDIUM
    theme: str = "Adventure"
    characters: list[str] = Field(default_factory=list)
    lesson: str | None = None

    @field_validator("theme")
    @classmethod
    def theme_not_blank(cls, v: str) -> str:
        """Require a non-blank theme."""
        text = v.strip()
        if not text:
            raise ValueError("A story theme is required")
        return text

    @field_validator("characters")
    @classmethod
    def clean_characters(cls, v: list[str]) -> list[str]:
        """Drop blank character names."""
        return [name.strip() for name in v if name.strip()]
