"""
Safe list handling for Todoist API responses.

Some Todoist endpoints return a bare JSON array, others wrap it in a
pagination envelope (``{"results": [...], "next_cursor": ...}``). Every
consumer goes through ``extract_array`` so list semantics never depend on
which shape came back.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def extract_array(response: Any) -> list[Any]:
    """
    Extract a list from a Todoist API response of unknown shape.

    Args:
        response: A bare list, a ``{"results": [...]}`` envelope, any
            mapping with a list-valued property, or anything else.

    Returns:
        The list itself, the ``results`` list, the first list-valued
        property in definition order, or an empty list. Never raises.
    """
    if isinstance(response, list):
        return response
    if isinstance(response, tuple):
        return list(response)

    if isinstance(response, Mapping):
        results = response.get("results")
        if _is_sequence(results):
            return list(results)

        for value in response.values():
            if _is_sequence(value):
                return list(value)

    return []


def get_array_length(response: Any) -> int:
    """Number of items in a response of unknown shape."""
    return len(extract_array(response))


def safe_map(response: Any, fn: Callable[[T], R]) -> list[R]:
    """Map ``fn`` over the items of a response of unknown shape."""
    return [fn(item) for item in extract_array(response)]


def safe_filter(response: Any, predicate: Callable[[T], bool]) -> list[T]:
    """Filter the items of a response of unknown shape."""
    return [item for item in extract_array(response) if predicate(item)]


def format_array_response(
    response: Any,
    item_name: str,
    formatter: Callable[[Any], str],
) -> str:
    """
    Render a response as a counted list, or a "No X found." message.

    Args:
        response: Response of unknown shape
        item_name: Plural-less noun for the header (e.g. "task")
        formatter: Renders one item as a single line
    """
    items = extract_array(response)
    if not items:
        return f"No {item_name}s found."

    lines = "\n".join(formatter(item) for item in items)
    return f"Found {len(items)} {item_name}(s):\n{lines}"
