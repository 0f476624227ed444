"""Local notification requests."""

from __future__ import annotations

from datetime import datetime, time, timedelta

from pydantic import BaseModel, Field, model_validator


class NotificationRequest(BaseModel):
    """A reminder registered with the notification center.

    Either repeats daily at ``time_of_day`` or fires once at ``fire_at``.
    """

    identifier: str
    title: str
    body: str
    category: str = "general"
    time_of_day: time | None = None
    repeats_daily: bool = False
    fire_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def check_trigger(self) -> NotificationRequest:
        """Require exactly one trigger: daily time or one-shot datetime."""
        if self.repeats_daily:
            if self.time_of_day is None:
                raise ValueError("Daily reminders need a time of day")
            if self.fire_at is not None:
                raise ValueError("Daily reminders cannot have a fire date")
        elif self.fire_at is None:
            raise ValueError("One-shot reminders need a fire date")
        return self

    def next_fire_after(self, moment: datetime) -> datetime | None:
        """Return the first trigger time strictly after *moment*.

        One-shot requests return None once their fire date has passed.
        """
        if self.repeats_daily and self.time_of_day is not None:
            candidate = datetime.combine(moment.date(), self.time_of_day)
            if candidate <= moment:
                candidate += timedelta(days=1)
            return candidate
        if self.fire_at is not None and self.fire_at > moment:
            return self.fire_at
        return None

    def fires_between(self, start: datetime, end: datetime) -> bool:
        """True when the request triggers in the window ``(start, end]``."""
        next_fire = self.next_fire_after(start)
        return next_fire is not None and next_fire <= end
