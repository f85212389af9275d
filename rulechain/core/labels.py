"""Helpers for building the tokens of a rule set's debug string."""

from collections.abc import Callable, Sequence
from typing import Any

MAX_DISPLAY_LENGTH = 50
MAX_DISPLAY_VALUES = 3


def truncate(text: str) -> str:
    if len(text) <= MAX_DISPLAY_LENGTH:
        return text
    return text[:MAX_DISPLAY_LENGTH] + "..."


def quote(text: str) -> str:
    """Quote a string argument for display, truncating long values."""
    escaped = truncate(text).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def display(value: Any) -> str:
    if isinstance(value, str):
        return quote(value)
    return str(value)


def token(name: str, *args: str) -> str:
    """Return ``name(arg1, arg2, ...)`` from already-rendered arguments."""
    return f"{name}({', '.join(args)})"


def values_token(
    name: str,
    values: Sequence[Any],
    render: Callable[[Any], str] = display,
) -> str:
    """Render a token for a list of values, showing at most three.

    Example:
        >>> values_token("WithAllowedValues", ["a", "b", "c", "d", "e"])
        'WithAllowedValues("a", "b", "c" ... and 2 more)'
    """
    shown = ", ".join(render(value) for value in values[:MAX_DISPLAY_VALUES])
    if len(values) > MAX_DISPLAY_VALUES:
        shown += f" ... and {len(values) - MAX_DISPLAY_VALUES} more"
    return f"{name}({shown})"
