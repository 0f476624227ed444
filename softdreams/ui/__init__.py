"""UI module for SoftDreams.

NiceGUI-based web interface with:
- Home page (greeting, today's and recent stories)
- Onboarding page (child profile)
- Generate page (story options and quota)
- Library page (saved stories, favorites, search)
- Story reader page
"""

from .app import SoftDreamsApp, create_app
from .state import AppState

__all__ = [
    "AppState",
    "SoftDreamsApp",
    "create_app",
]
