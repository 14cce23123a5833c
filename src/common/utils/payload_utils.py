"""Helpers for loosely typed request payloads."""

from typing import Any


def as_int(value: Any) -> Any:
    """Converts numeric strings from loosely typed payloads; anything else is left for validation."""
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value
