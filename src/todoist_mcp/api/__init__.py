"""Remote Todoist API access."""

from todoist_mcp.api.rest import TodoistRestAPI

__all__ = ["TodoistRestAPI"]
