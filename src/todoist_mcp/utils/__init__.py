"""Response-shape helpers."""

from todoist_mcp.utils.arrays import (
    extract_array,
    get_array_length,
    safe_map,
    safe_filter,
    format_array_response,
)

__all__ = [
    "extract_array",
    "get_array_length",
    "safe_map",
    "safe_filter",
    "format_array_response",
]
