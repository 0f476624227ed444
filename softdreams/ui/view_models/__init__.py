"""Observable view state for the UI pages."""

from softdreams.ui.view_models._observable import ObservableObject
from softdreams.ui.view_models.home import HomeViewModel
from softdreams.ui.view_models.library import LibraryViewModel
from softdreams.ui.view_models.onboarding import AVAILABLE_INTERESTS, OnboardingViewModel
from softdreams.ui.view_models.story_generation import StoryGenerationViewModel

__all__ = [
    "AVAILABLE_INTERESTS",
    "HomeViewModel",
    "LibraryViewModel",
    "ObservableObject",
    "OnboardingViewModel",
    "StoryGenerationViewModel",
]
