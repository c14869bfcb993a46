"""
Todoist Data Models.

Pydantic value records for the entities the tools pass around. They are
built from raw API payloads (snake_case or camelCase) and never persisted.

Models:
    - Task, Due: Task and its due-date descriptor
    - Project, Section: Projects and the sections inside them
    - Label: Personal label (name is the natural key)
    - Comment, Attachment: Task/project comments
"""

from todoist_mcp.models.task import Task, Due, LOWEST_PRIORITY
from todoist_mcp.models.project import Project, Section
from todoist_mcp.models.label import Label
from todoist_mcp.models.comment import Comment, Attachment

__all__ = [
    "Task",
    "Due",
    "LOWEST_PRIORITY",
    "Project",
    "Section",
    "Label",
    "Comment",
    "Attachment",
]
