"""Story library view-model."""

import logging

from softdreams.memory.story import Story
from softdreams.services import ServiceContainer
from softdreams.services.protocols import StoryServiceProtocol
from softdreams.ui.view_models._observable import ObservableObject
from softdreams.ui.view_models.home import as_app_error
from softdreams.utils.exceptions import AppError

logger = logging.getLogger(__name__)


class LibraryViewModel(ObservableObject):
    PUBLISHED = ("stories", "error", "show_favorites_only", "search_query")

    def __init__(
        self,
        story_service: StoryServiceProtocol | None = None,
        services: ServiceContainer | None = None,
    ):
        super().__init__()
        if story_service is None:
            story_service = (services or ServiceContainer.shared()).story
        self.story_service = story_service
        self.stories: list[Story] = []
        self.error: AppError | None = None
        self.show_favorites_only = False
        self.search_query = ""

    def load_stories(self) -> None:
        try:
            self.stories = self.story_service.load_stories()
            self.error = None
        except Exception as e:
            logger.error("Failed to load stories: %s", e)
            self.error = as_app_error(e)

    @property
    def visible_stories(self) -> list[Story]:
        """Stories matching the filters, newest first."""
        query = self.search_query.strip().lower()
        result = []
        for story in self.stories:
            if self.show_favorites_only and not story.is_favorite:
                continue
            if query and not _matches(story, query):
                continue
            result.append(story)
        return sorted(result, key=lambda s: s.date, reverse=True)

    def toggle_favorite(self, story_id: str) -> Story | None:
        """Flip the favorite flag of one story and reload the list."""
        try:
            updated = self.story_service.toggle_favorite(story_id)
        except Exception as e:
            logger.error("Failed to toggle favorite for %s: %s", story_id, e)
            self.error = as_app_error(e)
            return None
        self.load_stories()
        return updated

    def delete_story(self, story_id: str) -> None:
        try:
            self.story_service.delete_story(story_id)
        except Exception as e:
            logger.error("Failed to delete story %s: %s", story_id, e)
            self.error = as_app_error(e)
            return
        logger.info("Deleted story %s", story_id)
        self.load_stories()


def _matches(story: Story, query: str) -> bool:
    haystack = [story.title, story.theme, *story.tags, *story.characters]
    return any(query in text.lower() for text in haystack)
