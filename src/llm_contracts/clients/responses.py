"""Read OpenAI-shaped chat responses whether they are objects or plain dicts."""

from collections.abc import Mapping
from typing import Any


def get_field(obj: Any, key: str) -> Any:
    """Return ``obj[key]`` for mappings, ``obj.key`` otherwise, or ``None``."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def first_message(response: Any) -> Any:
    """Return the message of the first choice, or ``None`` if there are no choices."""
    choices = get_field(response, "choices")
    if not choices:
        return None
    return get_field(choices[0], "message")
