"""Page classes for the SoftDreams UI."""

from .generate import GeneratePage
from .home import HomePage
from .library import LibraryPage
from .onboarding import OnboardingPage
from .story_reader import StoryReaderPage

__all__ = [
    "GeneratePage",
    "HomePage",
    "LibraryPage",
    "OnboardingPage",
    "StoryReaderPage",
]
