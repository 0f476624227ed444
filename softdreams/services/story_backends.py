"""Story text backends.

``TemplateStoryBackend`` is the offline placeholder: it assembles a story
from hand-written passages, deterministically for a given seed.
``OllamaStoryBackend`` asks a local Ollama model for the text.
"""

import logging
import random
import threading
from dataclasses import dataclass
from typing import Protocol

import httpx
import ollama

from softdreams.memory.story import StoryOptions
from softdreams.memory.user_profile import UserProfile
from softdreams.services.story_prompts import build_story_prompt
from softdreams.settings import Settings
from softdreams.utils.exceptions import StoryGenerationError

logger = logging.getLogger(__name__)

# Module-level cache for Ollama clients (keyed by (url, timeout))
_ollama_clients: dict[tuple[str, float], ollama.Client] = {}
_ollama_clients_lock = threading.Lock()


@dataclass(frozen=True)
class ComposedStory:
    """Title and body produced by a backend."""

    title: str
    content: str


class StoryBackend(Protocol):
    """Protocol for story text backends."""

    def compose(
        self, profile: UserProfile, options: StoryOptions, *, model: str, seed: int
    ) -> ComposedStory:
        """Produce the title and text of one story."""
        ...


_OPENINGS = [
    "Once upon a time, when the sky was painted in soft shades of lavender, {hero} "
    "noticed something wonderful.",
    "In a cozy little house at the edge of a quiet meadow, {hero} was getting ready "
    "for a very special evening.",
    "Far away, where the stars hum lullabies to the moon, {hero} began a gentle "
    "{theme} adventure.",
]

_JOURNEYS = [
    "Together with {companion}, {hero} followed a path of glowing pebbles that "
    "sparkled like tiny lanterns.",
    "{companion} smiled and took {hero} by the hand, and they tiptoed past sleepy "
    "flowers that were folding their petals for the night.",
    "A friendly breeze carried the smell of warm cookies, and {hero} and {companion} "
    "laughed softly as they floated over the treetops.",
    "They found a quiet pond where the moon was taking a bath, and {companion} "
    "whispered a secret about the stars.",
]

_INTEREST_PASSAGES = [
    "Because {hero} loved {interest}, the whole world seemed to be full of it tonight.",
    "Everywhere they looked there was a little bit of {interest}, just the way {hero} "
    "liked it.",
]

_SLOWING = [
    "The night grew calmer and calmer. Breathe in, breathe out, like the waves on a "
    "sleepy shore.",
    "One by one, the fireflies dimmed their lights and yawned big, slow yawns.",
    "The owls hooted softly, counting the stars: one, two, three, all the way to sleep.",
    "The clouds tucked the moon in with a fluffy blanket, and everything felt warm and safe.",
]

_ENDINGS = [
    "And so, wrapped in love, {hero} closed {possessive} eyes and drifted into the "
    "sweetest dreams. Goodnight, {hero}.",
    "Safe and snug, {hero} smiled one last sleepy smile and fell fast asleep. "
    "Sweet dreams, little one.",
]

_TITLE_PATTERNS = [
    "{hero} and the {theme} Night",
    "The {theme} Dream of {hero}",
    "{hero}'s Starlit {theme}",
]


class TemplateStoryBackend:
    """Offline placeholder composer built from template passages."""

    def compose(
        self, profile: UserProfile, options: StoryOptions, *, model: str, seed: int
    ) -> ComposedStory:
        """Assemble a story of roughly the requested length.

        The same profile, options and seed always produce the same story.
        """
        rng = random.Random(seed)
        hero = profile.display_name if not profile.is_pregnancy else "Little One"
        possessive = {"male": "his", "female": "her"}.get(profile.gender.value, "their")
        companions = options.characters or ["a kind little star"]
        theme = options.theme

        fields = {"hero": hero, "theme": theme.lower(), "possessive": possessive}
        paragraphs = [rng.choice(_OPENINGS).format(**fields)]
        for companion in companions:
            paragraphs.append(rng.choice(_JOURNEYS).format(companion=companion, **fields))
        for interest in profile.interests[:3]:
            paragraphs.append(rng.choice(_INTEREST_PASSAGES).format(interest=interest, **fields))
        if options.lesson:
            paragraphs.append(
                f"Before the night was over, {hero} learned something important: {options.lesson}."
            )

        ending = rng.choice(_ENDINGS).format(**fields)
        target = options.length.target_words
        slowing = list(_SLOWING)
        rng.shuffle(slowing)
        index = 0
        while _word_total(paragraphs) + len(ending.split()) < target:
            paragraphs.append(slowing[index % len(slowing)])
            index += 1
        paragraphs.append(ending)

        title = rng.choice(_TITLE_PATTERNS).format(hero=hero, theme=theme.title())
        logger.debug("Template story composed: %s (%d paragraphs)", title, len(paragraphs))
        return ComposedStory(title=title, content="\n\n".join(paragraphs))


def _word_total(paragraphs: list[str]) -> int:
    return sum(len(p.split()) for p in paragraphs)


def _get_ollama_client(url: str, timeout: float) -> ollama.Client:
    """Return a cached Ollama client for (url, timeout)."""
    key = (url, timeout)
    with _ollama_clients_lock:
        client = _ollama_clients.get(key)
        if client is None:
            client = ollama.Client(host=url, timeout=timeout)
            _ollama_clients[key] = client
        return client


def split_title(text: str, fallback_title: str) -> ComposedStory:
    """Split ``Title: ...`` off the first line of an LLM response."""
    stripped = text.strip()
    first_line, _, rest = stripped.partition("\n")
    if first_line.lower().startswith("title:"):
        title = first_line.split(":", 1)[1].strip().strip("*\"' ")
        body = rest.strip()
        if title and body:
            return ComposedStory(title=title, content=body)
    return ComposedStory(title=fallback_title, content=stripped)


class OllamaStoryBackend:
    """Generate story text with a local Ollama model."""

    def __init__(self, settings: Settings):
        """Initialize the backend.

        Args:
            settings: Application settings (URL, timeout, sampling).
        """
        self.settings = settings

    def compose(
        self, profile: UserProfile, options: StoryOptions, *, model: str, seed: int
    ) -> ComposedStory:
        """Ask *model* for a story.

        Raises:
            StoryGenerationError: If the request fails or returns no text.
        """
        prompt = build_story_prompt(profile, options)
        client = _get_ollama_client(self.settings.ollama_url, float(self.settings.ollama_timeout))
        logger.info("Requesting story from Ollama model %s", model)
        try:
            response = client.chat(
                model=model,
                messages=[
                    {"role": "system", "content": prompt.system},
                    {"role": "user", "content": prompt.user},
                ],
                options={
                    "temperature": self.settings.generation_temperature,
                    "num_predict": self.settings.generation_max_tokens,
                    "seed": seed,
                },
            )
        except (ollama.ResponseError, httpx.HTTPError, ConnectionError, TimeoutError) as e:
            logger.error("Ollama request to %s failed: %s", model, e)
            raise StoryGenerationError(f"Ollama request failed: {e}") from e

        try:
            text = str(response["message"]["content"] or "")
        except (KeyError, TypeError) as e:
            raise StoryGenerationError("Unexpected Ollama response format") from e
        if not text.strip():
            raise StoryGenerationError(f"Model {model} returned an empty story")

        return split_title(text, fallback_title=f"A {options.theme} Bedtime Story")
