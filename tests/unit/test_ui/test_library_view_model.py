"""Tests for LibraryViewModel."""

from datetime import datetime, timedelta

import pytest

from softdreams.ui.view_models.library import LibraryViewModel
from softdreams.utils.exceptions import DataCorruptionError, InvalidDataError
from tests.shared.mock_services import MockStoryService, create_mock_story

NOW = datetime(2026, 3, 10, 20, 0)


@pytest.fixture
def stories():
    return [
        create_mock_story(title="Moon Boat", theme="Ocean", date=NOW - timedelta(days=2)),
        create_mock_story(
            title="Dino Dance", theme="Dinosaurs", date=NOW, is_favorite=True, tags=["dino"]
        ),
        create_mock_story(
            title="Star Picnic", theme="Space", date=NOW - timedelta(days=1), characters=["Luna"]
        ),
    ]


@pytest.fixture
def story_service(stories):
    return MockStoryService(stories)


@pytest.fixture
def vm(story_service):
    view_model = LibraryViewModel(story_service)
    view_model.load_stories()
    return view_model


class TestVisibleStories:
    """Tests for filtering and ordering."""

    def test_newest_first(self, vm):
        assert [s.title for s in vm.visible_stories] == ["Dino Dance", "Star Picnic", "Moon Boat"]

    def test_favorites_only(self, vm):
        vm.show_favorites_only = True
        assert [s.title for s in vm.visible_stories] == ["Dino Dance"]

    @pytest.mark.parametrize(
        "query, titles",
        [
            ("moon", ["Moon Boat"]),
            ("SPACE", ["Star Picnic"]),
            ("dino", ["Dino Dance"]),
            ("luna", ["Star Picnic"]),
            ("  ", ["Dino Dance", "Star Picnic", "Moon Boat"]),
            ("unicorn", []),
        ],
    )
    def test_search(self, vm, query, titles):
        vm.search_query = query
        assert [s.title for s in vm.visible_stories] == titles


class TestActions:
    def test_load_failure(self, story_service):
        story_service.should_throw_on_load = True
        vm = LibraryViewModel(story_service)
        vm.load_stories()
        assert isinstance(vm.error, DataCorruptionError)

    def test_toggle_favorite_reloads(self, vm, stories):
        updated = vm.toggle_favorite(stories[0].story_id)

        assert updated.is_favorite is True
        assert [s.is_favorite for s in vm.stories] == [True, True, False]

    def test_toggle_unknown_story(self, vm):
        assert vm.toggle_favorite("missing") is None
        assert isinstance(vm.error, InvalidDataError)

    def test_delete_story(self, vm, stories):
        vm.delete_story(stories[1].story_id)
        assert [s.title for s in vm.stories] == ["Moon Boat", "Star Picnic"]
        assert vm.error is None

    def test_delete_failure(self, vm, story_service, stories):
        story_service.should_throw_on_delete = True
        vm.delete_story(stories[0].story_id)
        assert isinstance(vm.error, DataCorruptionError)
        assert len(vm.stories) == 3

    def test_error_cleared_after_successful_load(self, vm):
        vm.toggle_favorite("missing")
        vm.load_stories()
        assert vm.error is None
