"""Ordered message accumulation with key-collision shifting.

Writing a key that already holds a value never overwrites it: the previous
value moves to the same key with an underscore appended, and so on down the
chain. After writing ``error`` three times::

    error   -> newest
    error_  -> second newest
    error__ -> oldest
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

SHADOW_SUFFIX = "_"


def push_back(messages: dict[str, object], key: str, value: object) -> None:
    """Write ``key`` into ``messages``, shifting any existing value to the shadow key.

    Example:
        >>> m: dict[str, object] = {}
        >>> for v in ("a", "b", "c"):
        ...     push_back(m, "k", v)
        >>> m
        {'k': 'c', 'k_': 'b', 'k__': 'a'}
    """
    while key in messages:
        previous = messages.pop(key)
        messages[key] = value
        key, value = key + SHADOW_SUFFIX, previous
    messages[key] = value


def push_back_all(messages: dict[str, object], other: Mapping[str, object]) -> None:
    """push_back every entry of ``other`` in its iteration order."""
    for key, value in other.items():
        push_back(messages, key, value)


def clean(messages: Mapping[str, object]) -> dict[str, object]:
    """Drop entries whose key is blank (or not a string) or whose value is None."""
    return {k: v for k, v in messages.items() if isinstance(k, str) and k.strip() and v is not None}


def freeze(messages: dict[str, object]) -> Mapping[str, object]:
    """Read-only view handed out by Result.messages()."""
    return MappingProxyType(messages)


def thaw(messages: Mapping[str, object]) -> dict[str, object]:
    """Plain-dict copy of ``messages``, nested read-only views included, for pickling."""
    return {k: thaw(v) if isinstance(v, MappingProxyType) else v for k, v in messages.items()}
