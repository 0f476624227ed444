"""Domain models and the key-value persistence layer."""

from softdreams.memory.generation_config import (
    GenerationModel,
    StoryGenerationConfig,
    SubscriptionTier,
)
from softdreams.memory.key_value_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StorageKeys,
)
from softdreams.memory.notifications import NotificationRequest
from softdreams.memory.story import AgeRange, Story, StoryLength, StoryOptions
from softdreams.memory.user_profile import BabyStage, Gender, UserProfile

__all__ = [
    "AgeRange",
    "BabyStage",
    "Gender",
    "GenerationModel",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "NotificationRequest",
    "StorageKeys",
    "Story",
    "StoryGenerationConfig",
    "StoryLength",
    "StoryOptions",
    "SubscriptionTier",
    "UserProfile",
]
