"""
Todoist MCP tool handlers.

Every tool is an async function ``(params, ctx) -> str`` registered on the
module-level ``registry`` in the order it is published by ``tools/list``.
Handlers let exceptions propagate; the dispatcher turns them into
JSON-RPC errors.
"""

from __future__ import annotations

import datetime as dt
import logging
import time
from typing import Any

from todoist_mcp import __version__
from todoist_mcp.exceptions import (
    TodoistNotFoundError,
    TodoistUnsupportedOperationError,
    TodoistValidationError,
)
from todoist_mcp.models import Comment, Label, Project, Section, Task
from todoist_mcp.overview import daily_overview_json, format_daily_overview, get_daily_overview
from todoist_mcp.tools.formatting import (
    COMPLETED_MARK,
    OPEN_MARK,
    format_comment_line,
    format_items,
    format_label_line,
    format_project_line,
    format_section_line,
    format_task_details,
    format_task_line,
    format_tasks_json,
    format_tasks_markdown,
    format_results,
    parse_tasks,
    success_message,
    to_json,
)
from todoist_mcp.tools.inputs import (
    BulkCreateSubtasksInput,
    BulkCreateTasksInput,
    BulkTaskFilterInput,
    BulkUpdateTasksInput,
    CommentCreateInput,
    CommentListInput,
    ConvertToSubtaskInput,
    DailyOverviewInput,
    EmptyInput,
    FeatureTestInput,
    FeatureTestMode,
    LabelCreateInput,
    LabelNameInput,
    LabelUpdateInput,
    PerformanceTestInput,
    ProjectCreateInput,
    PromoteSubtaskInput,
    ResponseFormat,
    SectionCreateInput,
    SectionListInput,
    SubtaskCreateInput,
    TaskCreateInput,
    TaskHierarchyInput,
    TaskIdInput,
    TaskListInput,
    TaskUpdateInput,
)
from todoist_mcp.tools.registry import ToolContext, ToolRegistry
from todoist_mcp.utils.arrays import extract_array, get_array_length

logger = logging.getLogger(__name__)

registry = ToolRegistry()


# =============================================================================
# Task Tools
# =============================================================================


@registry.tool(
    name="create_task",
    input_model=TaskCreateInput,
    annotations={
        "title": "Create Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def create_task(params: TaskCreateInput, ctx: ToolContext) -> str:
    """
    Create a new task in Todoist.

    Args:
        params: Task creation parameters including:
            - content (str): Task title (required)
            - description (str): Longer notes
            - due_string (str): Natural language due date ("tomorrow at 5pm")
            - priority (int): 1 (highest) to 4 (lowest)
            - labels (list): Label names
            - project_id / section_id (str): Where to put the task

    Returns:
        Formatted task details.

    Examples:
        - content="Buy groceries"
        - content="Submit report", due_string="friday", priority=1
    """
    result = await ctx.client.add_task(
        params.content,
        description=params.description,
        due_string=params.due_string,
        priority=params.priority,
        labels=params.labels,
        project_id=params.project_id,
        section_id=params.section_id,
    )
    task = Task.from_api(result)
    return success_message(f"Task created successfully:\n{format_task_details(task)}")


@registry.tool(
    name="get_tasks",
    input_model=TaskListInput,
    annotations={
        "title": "Get Tasks",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_tasks(params: TaskListInput, ctx: ToolContext) -> str:
    """
    List active tasks, optionally filtered by project, section, label or priority.

    Args:
        params: Filter parameters including:
            - project_id / section_id (str): Scope of the listing
            - label (str): Label name
            - priority (int): Only this priority
            - limit (int): Maximum results (default 50)
            - response_format: 'markdown' or 'json'

    Returns:
        "Found N task(s):" followed by one line per task, or "No tasks found."
    """
    response = await ctx.client.get_tasks(
        project_id=params.project_id,
        section_id=params.section_id,
        label=params.label,
    )
    tasks = parse_tasks(response)

    if params.priority is not None:
        tasks = [t for t in tasks if t.effective_priority == params.priority]

    tasks = tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return to_json(format_tasks_json(tasks))
    return format_tasks_markdown(tasks)


@registry.tool(
    name="update_task",
    input_model=TaskUpdateInput,
    annotations={
        "title": "Update Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def update_task(params: TaskUpdateInput, ctx: ToolContext) -> str:
    """
    Update an existing task. Only the fields provided are changed.

    Args:
        params: task_id (required) plus any of content, description,
            due_string, priority, labels.
    """
    changes = params.model_dump(exclude={"task_id"}, exclude_none=True)
    if not changes:
        raise TodoistValidationError(
            "Nothing to update: provide at least one of content, description, "
            "due_string, priority or labels"
        )

    result = await ctx.client.update_task(params.task_id, **changes)
    task = Task.from_api(result)
    return success_message(f"Task updated successfully:\n{format_task_details(task)}")


@registry.tool(
    name="complete_task",
    input_model=TaskIdInput,
    annotations={
        "title": "Complete Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def complete_task(params: TaskIdInput, ctx: ToolContext) -> str:
    """Mark a task as complete."""
    await ctx.client.close_task(params.task_id)
    return success_message(f"Task {params.task_id} marked as complete.")


@registry.tool(
    name="delete_task",
    input_model=TaskIdInput,
    annotations={
        "title": "Delete Task",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def delete_task(params: TaskIdInput, ctx: ToolContext) -> str:
    """Permanently delete a task."""
    await ctx.client.delete_task(params.task_id)
    return success_message(f"Task {params.task_id} deleted successfully.")


# =============================================================================
# Bulk Task Tools
# =============================================================================


async def _select_tasks(params: BulkTaskFilterInput, ctx: ToolContext) -> list[Task]:
    """Fetch active tasks matching every given criterion."""
    response = await ctx.client.get_tasks(project_id=params.project_id, label=params.label)
    tasks = parse_tasks(response)

    if params.label:
        tasks = [t for t in tasks if params.label in t.labels]
    if params.priority is not None:
        tasks = [t for t in tasks if t.effective_priority == params.priority]
    if params.content_contains:
        needle = params.content_contains.lower()
        tasks = [t for t in tasks if needle in t.content.lower()]

    return tasks


@registry.tool(
    name="bulk_create_tasks",
    input_model=BulkCreateTasksInput,
    annotations={
        "title": "Bulk Create Tasks",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def bulk_create_tasks(params: BulkCreateTasksInput, ctx: ToolContext) -> str:
    """
    Create up to 50 tasks in one call.

    Tasks are created one after another; the first failure aborts the rest
    and tasks created before it are kept.

    Args:
        params:
            - tasks (list): Items with content (required), description,
              due_string, priority, labels
            - project_id / section_id (str): Applied to every task
    """
    created: list[Task] = []
    for item in params.tasks:
        result = await ctx.client.add_task(
            item.content,
            description=item.description,
            due_string=item.due_string,
            priority=item.priority,
            labels=item.labels,
            project_id=params.project_id,
            section_id=params.section_id,
        )
        created.append(Task.from_api(result))

    logger.info("Bulk-created %d task(s)", len(created))
    return success_message(
        format_results(
            f"Created {len(created)} task(s):",
            (format_task_line(t) for t in created),
        )
    )


@registry.tool(
    name="bulk_update_tasks",
    input_model=BulkUpdateTasksInput,
    annotations={
        "title": "Bulk Update Tasks",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def bulk_update_tasks(params: BulkUpdateTasksInput, ctx: ToolContext) -> str:
    """
    Apply up to 50 task updates in one call.

    Each update names a task_id and the fields to change. Updates run in
    order and stop at the first failure.
    """
    updated: list[Task] = []
    for item in params.updates:
        changes = item.model_dump(exclude={"task_id"}, exclude_none=True)
        result = await ctx.client.update_task(item.task_id, **changes)
        updated.append(Task.from_api(result))

    return success_message(
        format_results(
            f"Updated {len(updated)} task(s):",
            (f"- {t.content or '(unchanged title)'} (ID: {t.id})" for t in updated),
        )
    )


@registry.tool(
    name="bulk_delete_tasks",
    input_model=BulkTaskFilterInput,
    annotations={
        "title": "Bulk Delete Tasks",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def bulk_delete_tasks(params: BulkTaskFilterInput, ctx: ToolContext) -> str:
    """
    Delete every active task matching the given criteria.

    At least one of project_id, label, priority or content_contains is
    required. Matching tasks are deleted one at a time.
    """
    tasks = await _select_tasks(params, ctx)
    if not tasks:
        return "No tasks matched the given criteria."

    for task in tasks:
        await ctx.client.delete_task(task.id)

    return success_message(
        format_results(
            f"Deleted {len(tasks)} task(s):",
            (f"- {t.content} (ID: {t.id})" for t in tasks),
        )
    )


@registry.tool(
    name="bulk_complete_tasks",
    input_model=BulkTaskFilterInput,
    annotations={
        "title": "Bulk Complete Tasks",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def bulk_complete_tasks(params: BulkTaskFilterInput, ctx: ToolContext) -> str:
    """
    Complete every open task matching the given criteria.

    Accepts the same filters as bulk_delete_tasks.
    """
    tasks = [t for t in await _select_tasks(params, ctx) if not t.is_completed]
    if not tasks:
        return "No open tasks matched the given criteria."

    for task in tasks:
        await ctx.client.close_task(task.id)

    return success_message(
        format_results(
            f"Completed {len(tasks)} task(s):",
            (f"- {t.content} (ID: {t.id})" for t in tasks),
        )
    )


# =============================================================================
# Project & Section Tools
# =============================================================================


@registry.tool(
    name="get_projects",
    input_model=EmptyInput,
    annotations={
        "title": "Get Projects",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_projects(params: EmptyInput, ctx: ToolContext) -> str:
    """List all projects."""
    response = await ctx.client.get_projects()
    return format_items(response, "project", Project, format_project_line)


@registry.tool(
    name="create_project",
    input_model=ProjectCreateInput,
    annotations={
        "title": "Create Project",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def create_project(params: ProjectCreateInput, ctx: ToolContext) -> str:
    """
    Create a new project.

    Args:
        params:
            - name (str): Project name (required)
            - color (str): Todoist color name, e.g. 'berry_red'
            - is_favorite (bool): Add to favorites
    """
    result = await ctx.client.add_project(
        params.name,
        color=params.color,
        is_favorite=params.is_favorite,
    )
    project = Project.from_api(result)
    return success_message(f"Project created successfully:\n{format_project_line(project)}")


@registry.tool(
    name="get_sections",
    input_model=SectionListInput,
    annotations={
        "title": "Get Sections",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_sections(params: SectionListInput, ctx: ToolContext) -> str:
    """List the sections of a project."""
    response = await ctx.client.get_sections(project_id=params.project_id)
    return format_items(response, "section", Section, format_section_line)


@registry.tool(
    name="create_section",
    input_model=SectionCreateInput,
    annotations={
        "title": "Create Section",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def create_section(params: SectionCreateInput, ctx: ToolContext) -> str:
    """Create a section inside a project."""
    result = await ctx.client.add_section(
        params.name,
        params.project_id,
        order=params.order,
    )
    section = Section.from_api(result)
    return success_message(
        f"Section created successfully:\n{format_section_line(section)}"
        f"\nProject: {section.project_id}"
    )


# =============================================================================
# Comment Tools
# =============================================================================


@registry.tool(
    name="create_comment",
    input_model=CommentCreateInput,
    annotations={
        "title": "Create Comment",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def create_comment(params: CommentCreateInput, ctx: ToolContext) -> str:
    """
    Add a comment to a task or a project.

    Exactly one of task_id or project_id must be given. An optional
    attachment (resource_type, file_url, file_name) is forwarded as-is.
    """
    attachment = params.attachment.model_dump() if params.attachment else None
    result = await ctx.client.add_comment(
        params.content,
        task_id=params.task_id,
        project_id=params.project_id,
        attachment=attachment,
    )
    comment = Comment.from_api(result)
    target = f"task {params.task_id}" if params.task_id else f"project {params.project_id}"
    return success_message(f"Comment added to {target}:\n{format_comment_line(comment)}")


@registry.tool(
    name="get_comments",
    input_model=CommentListInput,
    annotations={
        "title": "Get Comments",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_comments(params: CommentListInput, ctx: ToolContext) -> str:
    """List the comments of a task or a project."""
    response = await ctx.client.get_comments(
        task_id=params.task_id,
        project_id=params.project_id,
    )
    return format_items(response, "comment", Comment, format_comment_line)


# =============================================================================
# Label Tools
# =============================================================================


async def _find_label(ctx: ToolContext, name: str) -> Label:
    """Look a label up by name, the key users know it by."""
    labels = [Label.from_api(item) for item in extract_array(await ctx.client.get_labels())]
    for label in labels:
        if label.name == name:
            return label
    raise TodoistNotFoundError(f"Label '{name}' not found")


@registry.tool(
    name="get_labels",
    input_model=EmptyInput,
    annotations={
        "title": "Get Labels",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_labels(params: EmptyInput, ctx: ToolContext) -> str:
    """List all personal labels."""
    response = await ctx.client.get_labels()
    return format_items(response, "label", Label, format_label_line)


@registry.tool(
    name="create_label",
    input_model=LabelCreateInput,
    annotations={
        "title": "Create Label",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def create_label(params: LabelCreateInput, ctx: ToolContext) -> str:
    """Create a personal label."""
    result = await ctx.client.add_label(
        params.name,
        color=params.color,
        is_favorite=params.is_favorite,
    )
    label = Label.from_api(result)
    return success_message(f"Label created successfully:\n{format_label_line(label)}")


@registry.tool(
    name="update_label",
    input_model=LabelUpdateInput,
    annotations={
        "title": "Update Label",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def update_label(params: LabelUpdateInput, ctx: ToolContext) -> str:
    """
    Rename or recolor a label, identified by its current name.

    Args:
        params:
            - label_name (str): Current name (required)
            - new_name (str): New name
            - color (str): New color
            - is_favorite (bool): Favorite flag
    """
    changes = {
        "name": params.new_name,
        "color": params.color,
        "is_favorite": params.is_favorite,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        raise TodoistValidationError(
            "Nothing to update: provide at least one of new_name, color or is_favorite"
        )

    label = await _find_label(ctx, params.label_name)
    await ctx.client.update_label(label.id, **changes)

    updated = label.model_copy(update=changes)
    return success_message(f"Label '{params.label_name}' updated:\n{format_label_line(updated)}")


@registry.tool(
    name="delete_label",
    input_model=LabelNameInput,
    annotations={
        "title": "Delete Label",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def delete_label(params: LabelNameInput, ctx: ToolContext) -> str:
    """Delete a label, identified by its name."""
    label = await _find_label(ctx, params.label_name)
    await ctx.client.delete_label(label.id)
    return success_message(f"Label '{label.name}' (ID: {label.id}) deleted successfully.")


@registry.tool(
    name="get_label_stats",
    input_model=EmptyInput,
    annotations={
        "title": "Get Label Statistics",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_label_stats(params: EmptyInput, ctx: ToolContext) -> str:
    """Count how many active tasks carry each label, most used first."""
    labels = [Label.from_api(item) for item in extract_array(await ctx.client.get_labels())]
    if not labels:
        return "No labels found."

    tasks = parse_tasks(await ctx.client.get_tasks())
    usage = {label.name: 0 for label in labels}
    for task in tasks:
        for name in task.labels:
            if name in usage:
                usage[name] += 1

    ranked = sorted(usage.items(), key=lambda kv: kv[1], reverse=True)
    return format_results(
        f"Label usage statistics ({len(tasks)} active task(s)):",
        (f"{name}: {count} task(s)" for name, count in ranked),
    )


# =============================================================================
# Subtask Tools
# =============================================================================


@registry.tool(
    name="create_subtask",
    input_model=SubtaskCreateInput,
    annotations={
        "title": "Create Subtask",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def create_subtask(params: SubtaskCreateInput, ctx: ToolContext) -> str:
    """Create a subtask under an existing parent task."""
    result = await ctx.client.add_task(
        params.content,
        description=params.description,
        due_string=params.due_string,
        priority=params.priority,
        parent_id=params.parent_task_id,
    )
    subtask = Task.from_api(result)
    return success_message(
        f"Subtask created under task {params.parent_task_id}:\n{format_task_details(subtask)}"
    )


@registry.tool(
    name="bulk_create_subtasks",
    input_model=BulkCreateSubtasksInput,
    annotations={
        "title": "Bulk Create Subtasks",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def bulk_create_subtasks(params: BulkCreateSubtasksInput, ctx: ToolContext) -> str:
    """
    Create up to 20 subtasks under one parent.

    Unlike the other bulk tools, a failing item does not stop the batch:
    failures are collected and reported next to the created subtasks.
    """
    created: list[Task] = []
    failed: list[tuple[str, str]] = []

    for item in params.subtasks:
        try:
            result = await ctx.client.add_task(
                item.content,
                description=item.description,
                due_string=item.due_string,
                priority=item.priority,
                parent_id=params.parent_task_id,
            )
        except Exception as e:
            logger.warning("Failed to create subtask %r: %s", item.content, e)
            failed.append((item.content, str(e)))
            continue
        created.append(Task.from_api(result))

    lines = [f"Created {len(created)} subtask(s) under task {params.parent_task_id}:"]
    lines.extend(format_task_line(t) for t in created)
    if failed:
        lines.append(f"Failed to create {len(failed)} subtask(s):")
        lines.extend(f"- {content}: {reason}" for content, reason in failed)

    text = "\n".join(lines)
    return success_message(text) if created else text


@registry.tool(
    name="convert_to_subtask",
    input_model=ConvertToSubtaskInput,
    annotations={
        "title": "Convert To Subtask",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def convert_to_subtask(params: ConvertToSubtaskInput, ctx: ToolContext) -> str:
    """Make an existing task a subtask of another task (not supported by Todoist)."""
    raise TodoistUnsupportedOperationError(
        f"Cannot move task {params.task_id} under {params.parent_task_id}: the Todoist "
        "REST API does not allow changing a task's parent. Create a new subtask with "
        "create_subtask and delete the original task instead.",
        operation="convert_to_subtask",
    )


@registry.tool(
    name="promote_subtask",
    input_model=PromoteSubtaskInput,
    annotations={
        "title": "Promote Subtask",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def promote_subtask(params: PromoteSubtaskInput, ctx: ToolContext) -> str:
    """Turn a subtask into a top-level task (not supported by Todoist)."""
    raise TodoistUnsupportedOperationError(
        f"Cannot promote subtask {params.subtask_id}: the Todoist REST API does not allow "
        "removing a task's parent. Create a new top-level task with create_task and "
        "delete the subtask instead.",
        operation="promote_subtask",
    )


def _render_node(
    task: Task,
    children: dict[str | None, list[Task]],
    current_id: str,
    depth: int,
    seen: set[str],
    lines: list[str],
) -> tuple[int, int]:
    """Append the subtree rooted at ``task``; returns (total, completed) in it."""
    seen.add(task.id)
    kids = [c for c in children.get(task.id, []) if c.id not in seen]

    child_lines: list[str] = []
    total, completed = 1, int(task.is_completed)
    for child in kids:
        sub_total, sub_completed = _render_node(
            child, children, current_id, depth + 1, seen, child_lines
        )
        total += sub_total
        completed += sub_completed

    status = COMPLETED_MARK if task.is_completed else OPEN_MARK
    line = f"{'  ' * depth}{status} {task.content} (ID: {task.id})"
    if kids:
        done = completed - int(task.is_completed)
        line += f" [{round(100 * done / (total - 1))}%]"
    if task.id == current_id:
        line += " ← current task"

    lines.append(line)
    lines.extend(child_lines)
    return total, completed


@registry.tool(
    name="get_task_hierarchy",
    input_model=TaskHierarchyInput,
    annotations={
        "title": "Get Task Hierarchy",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_task_hierarchy(params: TaskHierarchyInput, ctx: ToolContext) -> str:
    """
    Show the whole task tree a task belongs to.

    Walks up from the given task to its topmost ancestor, then renders
    every descendant with per-node completion percentages and an overall
    total.
    """
    task = Task.from_api(await ctx.client.get_task(params.task_id))

    root = task
    visited = {root.id}
    while root.parent_id and root.parent_id not in visited:
        root = Task.from_api(await ctx.client.get_task(root.parent_id))
        visited.add(root.id)

    response = await ctx.client.get_tasks(project_id=root.project_id)
    children: dict[str | None, list[Task]] = {}
    for item in parse_tasks(response):
        children.setdefault(item.parent_id, []).append(item)

    lines: list[str] = []
    total, completed = _render_node(root, children, task.id, 0, set(), lines)

    lines.append("")
    lines.append(f"Total tasks: {total}")
    lines.append(f"Completed: {completed} ({round(100 * completed / total)}%)")
    return format_results("📋 Task Hierarchy:", lines)


# =============================================================================
# Overview Tools
# =============================================================================


@registry.tool(
    name="get_daily_overview",
    input_model=DailyOverviewInput,
    annotations={
        "title": "Get Daily Overview",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def get_daily_overview_tool(params: DailyOverviewInput, ctx: ToolContext) -> str:
    """
    Summarize overdue, due-today, upcoming (next 7 days) and completed-today tasks.

    Each section lists its highest-priority tasks first, up to ``limit``,
    and its header shows the full count.

    Args:
        params:
            - date (str): Day to report on, YYYY-MM-DD (defaults to today)
            - limit (int): Tasks listed per section (default 10)
            - response_format: 'markdown' or 'json'
    """
    as_of = dt.date.fromisoformat(params.date) if params.date else None
    overview = await get_daily_overview(ctx.client, as_of=as_of, limit=params.limit)

    if params.response_format == ResponseFormat.JSON:
        return to_json(daily_overview_json(overview))
    return format_daily_overview(overview)


# =============================================================================
# Diagnostics Tools
# =============================================================================


@registry.tool(
    name="test_connection",
    input_model=EmptyInput,
    annotations={
        "title": "Test Connection",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def test_connection(params: EmptyInput, ctx: ToolContext) -> str:
    """Check that the Todoist API token works by listing projects."""
    count = get_array_length(await ctx.client.get_projects())
    return success_message(
        f"Connection successful! Found {count} projects in your Todoist account."
    )


async def _probe(label: str, call: Any) -> str:
    try:
        count = get_array_length(await call())
    except Exception as e:
        logger.warning("Feature probe %s failed: %s", label, e)
        return f"❌ {label}: Failed - {e}"
    return f"✅ {label}: {count} found"


@registry.tool(
    name="test_all_features",
    input_model=FeatureTestInput,
    annotations={
        "title": "Test All Features",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def test_all_features(params: FeatureTestInput, ctx: ToolContext) -> str:
    """
    Run a quick self-test against the Todoist account.

    'basic' mode only reads projects, tasks and labels. 'enhanced' mode
    also creates a probe task and deletes it again.
    """
    client = ctx.client
    results = [
        await _probe("Projects", client.get_projects),
        await _probe("Tasks", client.get_tasks),
        await _probe("Labels", client.get_labels),
    ]

    if params.mode == FeatureTestMode.ENHANCED:
        stamp = dt.datetime.now(dt.timezone.utc).isoformat()
        try:
            probe = Task.from_api(await client.add_task(f"MCP Test Task - {stamp}"))
            results.append(f"✅ Create: Task {probe.id} created")
            await client.delete_task(probe.id)
            results.append("✅ Delete: Test task cleaned up")
        except Exception as e:
            logger.warning("Create/delete probe failed: %s", e)
            results.append(f"❌ Create/Delete: Failed - {e}")

    return format_results(
        f"🧪 Todoist MCP Server Test Results ({params.mode.value} mode):",
        results,
    )


@registry.tool(
    name="test_performance",
    input_model=PerformanceTestInput,
    annotations={
        "title": "Test Performance",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def test_performance(params: PerformanceTestInput, ctx: ToolContext) -> str:
    """Time repeated project listings to measure Todoist API latency."""
    results: list[str] = []
    timings: list[float] = []

    for i in range(1, params.iterations + 1):
        start = time.perf_counter()
        try:
            await ctx.client.get_projects()
        except Exception as e:
            logger.warning("Performance iteration %d failed: %s", i, e)
            results.append(f"❌ Iteration {i}: Failed - {e}")
            continue
        elapsed = (time.perf_counter() - start) * 1000
        timings.append(elapsed)
        results.append(f"✅ Iteration {i}: {elapsed:.0f}ms")

    average = sum(timings) / len(timings) if timings else 0.0
    results.append(f"📊 Average response time: {average:.0f}ms")
    return format_results(
        f"⚡ Performance Test Results ({params.iterations} iterations):",
        results,
    )


@registry.tool(
    name="health_check",
    input_model=EmptyInput,
    annotations={
        "title": "Health Check",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def health_check(params: EmptyInput, ctx: ToolContext) -> str:
    """Report server status as JSON."""
    return to_json(
        {
            "status": "healthy",
            "service": "todoist-mcp",
            "version": __version__,
            "endpoint": "/mcp",
            "authentication": "enabled" if ctx.settings.auth_enabled else "disabled",
            "dry_run": ctx.client.dry_run,
            "tools": len(registry),
            "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
        }
    )
