"""
Response formatting for Todoist MCP tools.

Every tool returns text. These helpers render models as the compact,
line-oriented markdown Poke reads best, or as JSON-ready dicts when the
caller asks for ``response_format="json"``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from pydantic import ValidationError

from todoist_mcp.models import Comment, Label, Project, Section, Task
from todoist_mcp.utils.arrays import extract_array, format_array_response

logger = logging.getLogger(__name__)

COMPLETED_MARK = "✓"
OPEN_MARK = "○"


# =============================================================================
# Tasks
# =============================================================================


def format_task_line(task: Task) -> str:
    """One-line summary: status, priority tag, content, id, project, due."""
    status = COMPLETED_MARK if task.is_completed else OPEN_MARK
    project = task.project_id or "Inbox"
    due = f" - Due: {task.due_string}" if task.due_string else ""
    return f"{status} [{task.priority_tag}] {task.content} (ID: {task.id}) - {project}{due}"


def format_overview_line(task: Task) -> str:
    """Line used in the daily overview: priority tag, content, project, due."""
    parts = [f"[{task.priority_tag}] {task.content}"]
    if task.project_id:
        parts.append(f"#{task.project_id}")
    line = " ".join(parts)
    if task.due_string:
        line += f" - Due: {task.due_string}"
    return line


def format_task_details(task: Task) -> str:
    """Multi-line task details used after create/update."""
    lines = [
        f"ID: {task.id}",
        f"Title: {task.content}",
        f"Description: {task.description or 'None'}",
        f"Priority: {task.priority_tag}",
        f"Due: {task.due_string or 'None'}",
        f"Project: {task.project_id or 'Inbox'}",
    ]
    if task.section_id:
        lines.append(f"Section: {task.section_id}")
    if task.parent_id:
        lines.append(f"Parent: {task.parent_id}")
    if task.labels:
        lines.append(f"Labels: {', '.join(task.labels)}")
    return "\n".join(lines)


def format_task_json(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "content": task.content,
        "description": task.description,
        "priority": task.effective_priority,
        "due": task.due_string or None,
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "project_id": task.project_id,
        "section_id": task.section_id,
        "parent_id": task.parent_id,
        "is_completed": task.is_completed,
        "labels": task.labels,
    }


def format_tasks_markdown(tasks: list[Task]) -> str:
    return format_array_response(tasks, "task", format_task_line)


def format_tasks_json(tasks: list[Task]) -> dict[str, Any]:
    return {"count": len(tasks), "tasks": [format_task_json(t) for t in tasks]}


def parse_tasks(response: Any) -> list[Task]:
    """Normalize a task-list response into Task models, skipping unusable records."""
    tasks = []
    for item in extract_array(response):
        try:
            tasks.append(Task.from_api(item))
        except ValidationError as e:
            logger.warning("Skipping malformed task record %r: %s", item, e)
    return tasks


# =============================================================================
# Projects, Sections, Labels, Comments
# =============================================================================


def format_project_line(project: Project) -> str:
    favorite = " ⭐" if project.is_favorite else ""
    color = f" - Color: {project.color}" if project.color else ""
    return f"{project.name} (ID: {project.id}){color}{favorite}"


def format_section_line(section: Section) -> str:
    return f"{section.name} (ID: {section.id}) - Order: {section.order}"


def format_label_line(label: Label) -> str:
    favorite = " ⭐" if label.is_favorite else ""
    return f"{label.name} (ID: {label.id}) - Color: {label.color or 'default'}{favorite}"


def format_comment_line(comment: Comment) -> str:
    posted = comment.posted_at.strftime("%Y-%m-%d %H:%M") if comment.posted_at else "unknown date"
    line = f"{comment.content} (ID: {comment.id}) - {posted}"
    if comment.attachment and comment.attachment.file_name:
        line += f" [📎 {comment.attachment.file_name}]"
    return line


def format_items(response: Any, item_name: str, model: Any, formatter: Any) -> str:
    """Normalize a list response, validate each item, and render it."""
    items = [model.from_api(item) for item in extract_array(response)]
    return format_array_response(items, item_name, formatter)


# =============================================================================
# Messages
# =============================================================================


def success_message(message: str) -> str:
    return f"✅ {message}"


def format_results(header: str, lines: Iterable[str]) -> str:
    return "\n".join([header, *lines])


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)
