"""Reusable UI components for SoftDreams."""

from .common import empty_state, error_banner, notify_error
from .header import NAV_ITEMS, Header
from .story_card import StoryCard, app_card

__all__ = [
    "NAV_ITEMS",
    "Header",
    "StoryCard",
    "app_card",
    "empty_state",
    "error_banner",
    "notify_error",
]
