"""User profile - the child (or expected baby) stories are written for."""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

from softdreams.memory.story import AgeRange
from softdreams.utils.dates import months_between

logger = logging.getLogger(__name__)


class BabyStage(StrEnum):
    """Developmental stage used to tailor stories."""

    PREGNANCY = "pregnancy"
    NEWBORN = "newborn"  # 0-3 months
    INFANT = "infant"  # 3-12 months
    TODDLER = "toddler"  # 1-3 years
    PRESCHOOLER = "preschooler"  # 3+ years

    @property
    def display_name(self) -> str:
        """Human-readable label for the stage."""
        return self.value.capitalize()

    @property
    def age_range(self) -> AgeRange:
        """Story age range matching this stage."""
        return _STAGE_AGE_RANGES[self]

    @classmethod
    def for_age_in_months(cls, months: int) -> BabyStage:
        """Return the stage a child of *months* months belongs to."""
        if months < 3:
            return cls.NEWBORN
        if months < 12:
            return cls.INFANT
        if months < 36:
            return cls.TODDLER
        return cls.PRESCHOOLER


_STAGE_AGE_RANGES: dict[BabyStage, AgeRange] = {
    BabyStage.PREGNANCY: AgeRange.BABY,
    BabyStage.NEWBORN: AgeRange.BABY,
    BabyStage.INFANT: AgeRange.BABY,
    BabyStage.TODDLER: AgeRange.TODDLER,
    BabyStage.PRESCHOOLER: AgeRange.PRESCHOOLER,
}


class Gender(StrEnum):
    """Gender used for pronouns in generated stories."""

    MALE = "male"
    FEMALE = "female"
    NOT_SPECIFIED = "not_specified"


class UserProfile(BaseModel):
    """Persisted description of the child stories are generated for.

    Created at onboarding, corrected by the auto-update service and saved
    as a single record.
    """

    name: str = ""  # May stay empty until the baby is named
    baby_stage: BabyStage
    gender: Gender = Gender.NOT_SPECIFIED
    interests: list[str] = Field(default_factory=list)
    story_time: time = time(20, 0)
    due_date: date | None = None
    birth_date: date | None = None
    parent_names: list[str] = Field(default_factory=list)
    language: str = "en"
    last_update_check: date | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Trim surrounding whitespace from the name."""
        return v.strip()

    @field_validator("interests", "parent_names")
    @classmethod
    def clean_list(cls, v: list[str]) -> list[str]:
        """Drop blank entries and duplicates, keeping the original order."""
        cleaned: list[str] = []
        for item in v:
            text = item.strip()
            if text and text not in cleaned:
                cleaned.append(text)
        return cleaned

    @model_validator(mode="after")
    def check_due_date(self) -> UserProfile:
        """Pregnancy profiles need a due date."""
        if self.baby_stage == BabyStage.PREGNANCY and self.due_date is None:
            raise ValueError("A due date is required for pregnancy profiles")
        return self

    @property
    def is_pregnancy(self) -> bool:
        """True while the profile describes an expected baby."""
        return self.baby_stage == BabyStage.PREGNANCY

    @property
    def display_name(self) -> str:
        """Name to show in the UI and in stories."""
        return self.name or "Baby"

    @property
    def age_range(self) -> AgeRange:
        """Story age range for the current stage."""
        return self.baby_stage.age_range

    def age_in_months(self, today: date) -> int | None:
        """Age in whole months on *today*, or None without a birth date."""
        if self.birth_date is None:
            return None
        return months_between(self.birth_date, today)

    def expected_stage(self, today: date) -> BabyStage:
        """Stage the profile should be in on *today*.

        Pregnancy lasts until the due date is reached; after that the stage
        follows the child's age (birth date, or due date when no birth date
        was recorded).
        """
        if self.is_pregnancy:
            if self.due_date is not None and self.due_date <= today:
                return BabyStage.for_age_in_months(months_between(self.due_date, today))
            return BabyStage.PREGNANCY
        born = self.birth_date
        if born is None:
            return self.baby_stage
        return BabyStage.for_age_in_months(months_between(born, today))

    def days_until_due(self, today: date) -> int | None:
        """Days until the due date, or None when there is none."""
        if self.due_date is None:
            return None
        return (self.due_date - today).days
