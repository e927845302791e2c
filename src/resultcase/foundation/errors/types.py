"""Type aliases shared across resultcase."""

from __future__ import annotations

from typing import Any, Union

JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]  # Any for recursive slots
JsonDict = dict[str, Any]
JsonMapping = dict[str, Any]
