"""Argument checks shared by services and settings.

Used where a bad value is a programming error rather than bad user input,
such as a blank story id or an unknown subscription tier name. Failures
raise ValueError or TypeError naming the offending argument.
"""


def validate_not_empty(value: str | None, param_name: str) -> None:
    """Require a non-blank string, e.g. a story id before a lookup.

    Raises:
        ValueError: If *value* is None or whitespace only.
        TypeError: If *value* is not a string.
    """
    if value is None:
        raise ValueError(f"{param_name} is required")
    if not isinstance(value, str):
        raise TypeError(f"{param_name} must be text, not {type(value).__name__}")
    if not value.strip():
        raise ValueError(f"{param_name} must not be blank")


def validate_string_in_choices(value: str | None, param_name: str, choices: list[str]) -> None:
    """Require one of a fixed set of names, e.g. "free" or "premium" for a tier."""
    if value not in choices:
        raise ValueError(f"{param_name} must be one of {', '.join(choices)}; got {value!r}")
