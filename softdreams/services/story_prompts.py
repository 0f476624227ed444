"""Prompt construction for LLM-backed story generation."""

from dataclasses import dataclass

from softdreams.memory.story import StoryOptions
from softdreams.memory.user_profile import UserProfile

SYSTEM_PROMPT = (
    "You are a gentle storyteller who writes calm, soothing bedtime stories for young "
    "children. Stories are warm, safe and free of anything frightening. Use simple "
    "words, a slow rhythm and end with the main character drifting off to sleep."
)


@dataclass(frozen=True)
class StoryPrompt:
    """System and user messages for a chat completion."""

    system: str
    user: str


def _audience_line(profile: UserProfile) -> str:
    """Describe who will listen to the story."""
    if profile.is_pregnancy:
        return (
            "The story will be read aloud by expecting parents to their baby "
            "who has not been born yet."
        )
    return f"The listener is {profile.display_name}, a {profile.baby_stage.value}."


def build_story_prompt(profile: UserProfile, options: StoryOptions) -> StoryPrompt:
    """Build the chat messages for one story.

    The model is asked to put the title on the first line as
    ``Title: <title>`` so it can be split from the body.
    """
    lines = [
        _audience_line(profile),
        f"Theme: {options.theme}",
        f"Length: about {options.length.target_words} words",
        f"Age range: {profile.age_range.display_name}",
    ]
    if not profile.is_pregnancy and profile.name:
        lines.append(f"Make {profile.name} the hero of the story.")
    if profile.interests:
        lines.append(f"Weave in some of these interests: {', '.join(profile.interests)}")
    if options.characters:
        lines.append(f"Include these characters: {', '.join(options.characters)}")
    if profile.parent_names:
        lines.append(f"Parents who may appear: {', '.join(profile.parent_names)}")
    if options.lesson:
        lines.append(f"Gently convey this lesson: {options.lesson}")
    if profile.language != "en":
        lines.append(f"Write the story in the language with code '{profile.language}'.")
    lines.append("Start with 'Title: <title>' on its own line, then the story.")
    return StoryPrompt(system=SYSTEM_PROMPT, user="\n".join(f"- {line}" for line in lines))
