"""Story service - persists the list of saved stories."""

import logging
from datetime import date

from pydantic import TypeAdapter

from softdreams.memory.key_value_store import KeyValueStore, StorageKeys
from softdreams.memory.story import Story
from softdreams.services._records import read_list, write_list
from softdreams.utils.dates import is_same_day
from softdreams.utils.exceptions import InvalidDataError
from softdreams.utils.validation import validate_not_empty

logger = logging.getLogger(__name__)

_STORY_LIST = TypeAdapter(list[Story])


class StoryService:
    """Service for story CRUD operations.

    All stories live in one list record. Story ids are unique within it.
    """

    def __init__(self, store: KeyValueStore):
        """Initialize story service.

        Args:
            store: Key-value store holding the story list.
        """
        self.store = store

    def save_stories(self, stories: list[Story]) -> None:
        """Replace the stored list with *stories*.

        Raises:
            InvalidDataError: If two stories share an id.
            SaveFailedError: If the record cannot be written.
        """
        seen: set[str] = set()
        for story in stories:
            if story.story_id in seen:
                raise InvalidDataError(f"Duplicate story id: {story.story_id}")
            seen.add(story.story_id)
        write_list(self.store, StorageKeys.SAVED_STORIES, _STORY_LIST, stories)
        logger.debug("Saved %d stories", len(stories))

    def load_stories(self) -> list[Story]:
        """Load all stored stories in stored order.

        A list that somehow holds duplicate ids keeps the first occurrence.

        Raises:
            DataCorruptionError: If the stored list cannot be decoded.
        """
        stories = read_list(self.store, StorageKeys.SAVED_STORIES, _STORY_LIST)
        unique: list[Story] = []
        seen: set[str] = set()
        for story in stories:
            if story.story_id in seen:
                logger.warning("Ignoring duplicate stored story %s", story.story_id)
                continue
            seen.add(story.story_id)
            unique.append(story)
        return unique

    def save_story(self, story: Story) -> None:
        """Insert *story*, or replace the stored story with the same id."""
        stories = self.load_stories()
        for index, existing in enumerate(stories):
            if existing.id == story.id:
                stories[index] = story
                logger.info("Replaced story %s: %s", story.story_id, story.title)
                break
        else:
            stories.append(story)
            logger.info("Added story %s: %s", story.story_id, story.title)
        self.save_stories(stories)

    def update_story(self, story: Story) -> None:
        """Replace an existing story.

        Raises:
            InvalidDataError: If no stored story has this id.
        """
        stories = self.load_stories()
        for index, existing in enumerate(stories):
            if existing.id == story.id:
                stories[index] = story
                self.save_stories(stories)
                logger.info("Updated story %s", story.story_id)
                return
        raise InvalidDataError(f"Cannot update unknown story {story.story_id}")

    def delete_story(self, story_id: str) -> None:
        """Remove the story with *story_id*. Unknown ids are ignored."""
        validate_not_empty(story_id, "story_id")
        stories = self.load_stories()
        remaining = [s for s in stories if s.story_id != story_id]
        if len(remaining) == len(stories):
            logger.debug("Delete requested for unknown story %s", story_id)
            return
        self.save_stories(remaining)
        logger.info("Deleted story %s", story_id)

    def get_story(self, story_id: str) -> Story | None:
        """Return the story with *story_id*, or None."""
        validate_not_empty(story_id, "story_id")
        return next((s for s in self.load_stories() if s.story_id == story_id), None)

    def get_story_count(self) -> int:
        """Number of stored stories."""
        return len(self.load_stories())

    def toggle_favorite(self, story_id: str) -> Story:
        """Flip the favorite flag of one story.

        Returns:
            The updated story.

        Raises:
            InvalidDataError: If no stored story has this id.
        """
        story = self.get_story(story_id)
        if story is None:
            raise InvalidDataError(f"Cannot toggle favorite of unknown story {story_id}")
        updated = story.model_copy(update={"is_favorite": not story.is_favorite})
        self.update_story(updated)
        return updated

    def get_favorite_stories(self) -> list[Story]:
        """Stories marked as favorite."""
        return [s for s in self.load_stories() if s.is_favorite]

    def get_stories_created_on(self, day: date) -> list[Story]:
        """Stories whose creation date falls on *day*."""
        return [s for s in self.load_stories() if is_same_day(s.date, day)]
