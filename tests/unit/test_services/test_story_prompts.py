"""Tests for story prompt construction."""

from softdreams.memory.story import StoryOptions
from softdreams.services.story_prompts import SYSTEM_PROMPT, build_story_prompt


class TestBuildStoryPrompt:
    def test_contains_profile_and_options(self, toddler_profile):
        prompt = build_story_prompt(
            toddler_profile,
            StoryOptions(theme="Space", characters=["Teddy"], lesson="sharing is caring"),
        )
        assert prompt.system == SYSTEM_PROMPT
        assert "Theme: Space" in prompt.user
        assert "Make Mia the hero" in prompt.user
        assert "animals, space" in prompt.user
        assert "Teddy" in prompt.user
        assert "sharing is caring" in prompt.user
        assert "Title:" in prompt.user

    def test_pregnancy_audience(self, pregnancy_profile):
        prompt = build_story_prompt(pregnancy_profile, StoryOptions())
        assert "expecting parents" in prompt.user
        assert "hero" not in prompt.user

    def test_language_hint_only_for_other_languages(self, toddler_profile):
        assert "language" not in build_story_prompt(toddler_profile, StoryOptions()).user
        german = toddler_profile.model_copy(update={"language": "de"})
        assert "'de'" in build_story_prompt(german, StoryOptions()).user
