"""Encoding and decoding of stored records.

Every service persists pydantic models as JSON strings in the key-value
store. A record that no longer parses surfaces as DataCorruptionError.
"""

import logging
from typing import TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from softdreams.memory.key_value_store import KeyValueStore
from softdreams.utils.exceptions import DataCorruptionError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")


def read_model(store: KeyValueStore, key: str, model_cls: type[M]) -> M | None:
    """Decode the record stored under *key*.

    Returns:
        The decoded model, or None when nothing is stored.

    Raises:
        DataCorruptionError: If the stored JSON is invalid for *model_cls*.
    """
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return model_cls.model_validate_json(raw)
    except ValidationError as e:
        logger.error("Stored %s record is corrupt: %s", key, e.error_count())
        raise DataCorruptionError(f"Record '{key}' is not a valid {model_cls.__name__}") from e


def read_list(store: KeyValueStore, key: str, adapter: TypeAdapter[list[T]]) -> list[T]:
    """Decode a list record stored under *key* (empty when absent).

    Raises:
        DataCorruptionError: If the stored JSON is not a valid list.
    """
    raw = store.get(key)
    if raw is None:
        return []
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        logger.error("Stored %s list is corrupt: %s", key, e.error_count())
        raise DataCorruptionError(f"Record '{key}' is not a valid list") from e


def write_model(store: KeyValueStore, key: str, model: BaseModel) -> None:
    """Encode *model* and store it under *key*."""
    store.set(key, model.model_dump_json())


def write_list(
    store: KeyValueStore, key: str, adapter: TypeAdapter[list[T]], items: list[T]
) -> None:
    """Encode *items* and store them under *key*."""
    store.set(key, adapter.dump_json(items).decode("utf-8"))
