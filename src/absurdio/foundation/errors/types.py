"""Type aliases shared by logging and reports."""

from __future__ import annotations

from typing import Any, Union

# JSON type aliases - using Any for recursive types to avoid Pydantic resolution issues
JsonValue = Union[str, int, float, bool, None, list[Any], dict[str, Any]]  # Any for recursive slots
JsonDict = dict[str, Any]
