"""Tests for the command-line entry point."""

import json
from datetime import datetime
from unittest.mock import patch

import pytest

import main as cli
from softdreams.memory.key_value_store import JsonFileKeyValueStore, StorageKeys
from softdreams.memory.story import Story
from softdreams.services.story_service import StoryService


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "stories-data"


def save_stories(data_dir, *stories: Story) -> None:
    StoryService(JsonFileKeyValueStore(data_dir)).save_stories(list(stories))


class TestListStories:
    """Tests for --list-stories output."""

    def test_no_stories(self, data_dir, capsys):
        assert cli.list_stories(str(data_dir)) == 0
        assert "No saved stories found." in capsys.readouterr().out

    def test_lists_newest_first(self, data_dir, capsys):
        older = Story(title="Old Tale", content="x", date=datetime(2026, 3, 1, 20, 0))
        newer = Story(
            title="New Tale", content="y", date=datetime(2026, 3, 9, 20, 0), is_favorite=True
        )
        save_stories(data_dir, older, newer)

        assert cli.list_stories(str(data_dir)) == 0

        out = capsys.readouterr().out
        assert out.startswith("Saved Stories:")
        assert "1. New Tale *" in out
        assert "2. Old Tale\n" in out
        assert f"ID: {older.story_id}" in out
        assert "2026-03-09" in out

    def test_unreadable_stories(self, data_dir, capsys):
        JsonFileKeyValueStore(data_dir).set(StorageKeys.SAVED_STORIES, json.dumps({"bad": 1}))

        assert cli.list_stories(str(data_dir)) == 1

        assert "Your saved data could not be read." in capsys.readouterr().out


class TestMain:
    """Tests for argument handling in main()."""

    def test_list_stories_exits(self, data_dir, capsys):
        argv = ["main.py", "--list-stories", "--data-dir", str(data_dir), "--log-level", "INFO"]
        with (
            patch("sys.argv", argv),
            patch("main.setup_logging") as mock_setup,
            pytest.raises(SystemExit) as exc_info,
        ):
            cli.main()

        assert exc_info.value.code == 0
        mock_setup.assert_called_once_with(level="INFO", log_file="default")
        assert "No saved stories found." in capsys.readouterr().out

    def test_web_ui_arguments(self):
        argv = ["main.py", "--host", "0.0.0.0", "--port", "9000", "--log-file", "none"]
        with (
            patch("sys.argv", argv),
            patch("main.setup_logging") as mock_setup,
            patch("main.run_web_ui") as mock_run,
        ):
            cli.main()

        assert mock_setup.call_args.kwargs["log_file"] is None
        kwargs = mock_run.call_args.kwargs
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000
        assert kwargs["reload"] is False
        assert kwargs["data_dir"] is None

    def test_invalid_settings_exit_with_error(self, tmp_path, capsys):
        (tmp_path / "settings.json").write_text(
            json.dumps({"notification_poll_seconds": 0}), encoding="utf-8"
        )
        argv = ["main.py", "--list-stories", "--log-level", "INFO"]
        with (
            patch("sys.argv", argv),
            patch("main.setup_logging"),
            pytest.raises(SystemExit) as exc_info,
        ):
            cli.main()

        assert exc_info.value.code == 1
        assert "Invalid settings file" in capsys.readouterr().out
