"""
Pydantic Input Models for Todoist MCP Tools.

This module defines the input validation model of every MCP tool. The
models double as the published parameter schema: ``model_json_schema()``
of each one is the ``inputSchema`` returned by ``tools/list``.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

MAX_BULK_TASKS = 50
MAX_BULK_SUBTASKS = 20


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    MARKDOWN = "markdown"
    JSON = "json"


class FeatureTestMode(str, Enum):
    """Depth of the self-test tool."""

    BASIC = "basic"
    ENHANCED = "enhanced"


class BaseMCPInput(BaseModel):
    """Base input model with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


class EmptyInput(BaseMCPInput):
    """Input for tools that take no arguments."""


# =============================================================================
# Task Input Models
# =============================================================================


class TaskFieldsMixin(BaseMCPInput):
    """Optional task fields shared by create, update and bulk items."""

    description: Optional[str] = Field(
        default=None,
        description="Detailed description of the task",
        max_length=16000,
    )
    due_string: Optional[str] = Field(
        default=None,
        description="Natural language due date like 'tomorrow', 'next Monday', 'Jan 23'",
        max_length=200,
    )
    priority: Optional[int] = Field(
        default=None,
        description="Task priority from 1 (highest) to 4 (lowest)",
        ge=1,
        le=4,
    )
    labels: Optional[List[str]] = Field(
        default=None,
        description="Label names to assign to the task (e.g., ['work', 'urgent'])",
        max_length=100,
    )


class TaskCreateInput(TaskFieldsMixin):
    """Input for creating a new task."""

    content: str = Field(
        ...,
        description="The content/title of the task (e.g., 'Buy groceries')",
        min_length=1,
        max_length=500,
    )
    project_id: Optional[str] = Field(
        default=None,
        description="Project ID to assign the task to. Defaults to the Inbox.",
    )
    section_id: Optional[str] = Field(
        default=None,
        description="Section ID within the project",
    )


class TaskListInput(BaseMCPInput):
    """Input for listing tasks."""

    project_id: Optional[str] = Field(
        default=None,
        description="Filter by project ID",
    )
    section_id: Optional[str] = Field(
        default=None,
        description="Filter by section ID",
    )
    label: Optional[str] = Field(
        default=None,
        description="Filter by label name",
    )
    priority: Optional[int] = Field(
        default=None,
        description="Only tasks with this priority (1 highest, 4 lowest)",
        ge=1,
        le=4,
    )
    limit: int = Field(
        default=50,
        description="Maximum number of tasks to return",
        ge=1,
        le=200,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'json' for machine-readable",
    )


class TaskUpdateInput(TaskFieldsMixin):
    """Input for updating a task."""

    task_id: str = Field(
        ...,
        description="The ID of the task to update",
        min_length=1,
    )
    content: Optional[str] = Field(
        default=None,
        description="New content/title of the task",
        min_length=1,
        max_length=500,
    )


class TaskIdInput(BaseMCPInput):
    """Input for tools that act on a single task (complete, delete)."""

    task_id: str = Field(
        ...,
        description="The ID of the task",
        min_length=1,
    )


class BulkTaskItem(TaskFieldsMixin):
    """One task in a bulk-create request."""

    content: str = Field(
        ...,
        description="Task content/title",
        min_length=1,
        max_length=500,
    )


class BulkCreateTasksInput(BaseMCPInput):
    """Input for creating several tasks at once."""

    tasks: List[BulkTaskItem] = Field(
        ...,
        description=f"Tasks to create (1 to {MAX_BULK_TASKS})",
        min_length=1,
        max_length=MAX_BULK_TASKS,
    )
    project_id: Optional[str] = Field(
        default=None,
        description="Project ID for all created tasks",
    )
    section_id: Optional[str] = Field(
        default=None,
        description="Section ID for all created tasks",
    )


class BulkUpdateItem(TaskFieldsMixin):
    """One update in a bulk-update request."""

    task_id: str = Field(
        ...,
        description="The ID of the task to update",
        min_length=1,
    )
    content: Optional[str] = Field(
        default=None,
        description="New content/title",
        min_length=1,
        max_length=500,
    )

    @model_validator(mode="after")
    def require_changes(self) -> BulkUpdateItem:
        if not self.model_dump(exclude={"task_id"}, exclude_none=True):
            raise ValueError(
                f"Nothing to update for task {self.task_id}: provide at least one of "
                "content, description, due_string, priority or labels"
            )
        return self


class BulkUpdateTasksInput(BaseMCPInput):
    """Input for updating several tasks at once."""

    updates: List[BulkUpdateItem] = Field(
        ...,
        description=f"Updates to apply (1 to {MAX_BULK_TASKS})",
        min_length=1,
        max_length=MAX_BULK_TASKS,
    )


class BulkTaskFilterInput(BaseMCPInput):
    """Input for bulk delete/complete: selects tasks by criteria."""

    project_id: Optional[str] = Field(
        default=None,
        description="Only tasks in this project",
        min_length=1,
    )
    label: Optional[str] = Field(
        default=None,
        description="Only tasks carrying this label",
        min_length=1,
    )
    priority: Optional[int] = Field(
        default=None,
        description="Only tasks with this priority",
        ge=1,
        le=4,
    )
    content_contains: Optional[str] = Field(
        default=None,
        description="Only tasks whose content contains this text (case-insensitive)",
        min_length=1,
    )

    @model_validator(mode="after")
    def require_criteria(self) -> BulkTaskFilterInput:
        if not any(
            v is not None
            for v in (self.project_id, self.label, self.priority, self.content_contains)
        ):
            raise ValueError(
                "At least one of project_id, label, priority or content_contains is required"
            )
        return self


# =============================================================================
# Project & Section Input Models
# =============================================================================


class ProjectCreateInput(BaseMCPInput):
    """Input for creating a project."""

    name: str = Field(
        ...,
        description="Project name (e.g., 'Work', 'Home Renovation')",
        min_length=1,
        max_length=120,
    )
    color: Optional[str] = Field(
        default=None,
        description="Color name (e.g., 'berry_red', 'sky_blue')",
    )
    is_favorite: Optional[bool] = Field(
        default=None,
        description="Add to favorites",
    )


class SectionListInput(BaseMCPInput):
    """Input for listing sections of a project."""

    project_id: str = Field(
        ...,
        description="Project ID to get sections from",
        min_length=1,
    )


class SectionCreateInput(BaseMCPInput):
    """Input for creating a section."""

    project_id: str = Field(
        ...,
        description="Project ID to add the section to",
        min_length=1,
    )
    name: str = Field(
        ...,
        description="Section name",
        min_length=1,
        max_length=120,
    )
    order: Optional[int] = Field(
        default=None,
        description="Section order within the project",
        ge=0,
    )


# =============================================================================
# Comment Input Models
# =============================================================================


class AttachmentInput(BaseMCPInput):
    """File attachment for a comment."""

    resource_type: str = Field(..., description="Attachment type, e.g. 'file'")
    file_url: str = Field(..., description="Public URL of the file")
    file_name: str = Field(..., description="File name shown in Todoist")


class CommentTargetMixin(BaseMCPInput):
    """Exactly one of task_id or project_id."""

    task_id: Optional[str] = Field(
        default=None,
        description="Task ID to comment on",
    )
    project_id: Optional[str] = Field(
        default=None,
        description="Project ID to comment on",
    )

    @model_validator(mode="after")
    def exactly_one_target(self) -> CommentTargetMixin:
        if (self.task_id is None) == (self.project_id is None):
            raise ValueError("Exactly one of task_id or project_id must be provided")
        return self


class CommentCreateInput(CommentTargetMixin):
    """Input for adding a comment."""

    content: str = Field(
        ...,
        description="Comment content (supports markdown)",
        min_length=1,
        max_length=15000,
    )
    attachment: Optional[AttachmentInput] = Field(
        default=None,
        description="File attachment",
    )


class CommentListInput(CommentTargetMixin):
    """Input for listing comments."""


# =============================================================================
# Label Input Models
# =============================================================================


class LabelCreateInput(BaseMCPInput):
    """Input for creating a label."""

    name: str = Field(
        ...,
        description="Label name (e.g., 'work', 'urgent')",
        min_length=1,
        max_length=60,
    )
    color: Optional[str] = Field(
        default=None,
        description="Color name (e.g., 'berry_red')",
    )
    is_favorite: Optional[bool] = Field(
        default=None,
        description="Add to favorites",
    )


class LabelUpdateInput(BaseMCPInput):
    """Input for updating a label, looked up by its current name."""

    label_name: str = Field(
        ...,
        description="Current label name",
        min_length=1,
        max_length=60,
    )
    new_name: Optional[str] = Field(
        default=None,
        description="New label name",
        min_length=1,
        max_length=60,
    )
    color: Optional[str] = Field(
        default=None,
        description="New color name",
    )
    is_favorite: Optional[bool] = Field(
        default=None,
        description="Add/remove from favorites",
    )


class LabelNameInput(BaseMCPInput):
    """Input for deleting a label by name."""

    label_name: str = Field(
        ...,
        description="Label name to delete",
        min_length=1,
        max_length=60,
    )


# =============================================================================
# Subtask Input Models
# =============================================================================


class SubtaskCreateInput(BaseMCPInput):
    """Input for creating a subtask."""

    parent_task_id: str = Field(
        ...,
        description="Parent task ID",
        min_length=1,
    )
    content: str = Field(
        ...,
        description="Subtask content",
        min_length=1,
        max_length=500,
    )
    description: Optional[str] = Field(
        default=None,
        description="Subtask description",
        max_length=16000,
    )
    due_string: Optional[str] = Field(
        default=None,
        description="Natural language due date",
        max_length=200,
    )
    priority: Optional[int] = Field(
        default=None,
        description="Subtask priority from 1 (highest) to 4 (lowest)",
        ge=1,
        le=4,
    )


class SubtaskItem(BaseMCPInput):
    """One subtask in a bulk-subtask request."""

    content: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=16000)
    due_string: Optional[str] = Field(default=None, max_length=200)
    priority: Optional[int] = Field(default=None, ge=1, le=4)


class BulkCreateSubtasksInput(BaseMCPInput):
    """Input for creating several subtasks under one parent."""

    parent_task_id: str = Field(
        ...,
        description="Parent task ID",
        min_length=1,
    )
    subtasks: List[SubtaskItem] = Field(
        ...,
        description=f"Subtasks to create (1 to {MAX_BULK_SUBTASKS})",
        min_length=1,
        max_length=MAX_BULK_SUBTASKS,
    )


class ConvertToSubtaskInput(BaseMCPInput):
    """Input for converting a task into a subtask."""

    task_id: str = Field(..., description="Task ID to convert", min_length=1)
    parent_task_id: str = Field(..., description="New parent task ID", min_length=1)


class PromoteSubtaskInput(BaseMCPInput):
    """Input for promoting a subtask to a top-level task."""

    subtask_id: str = Field(..., description="Subtask ID to promote", min_length=1)


class TaskHierarchyInput(BaseMCPInput):
    """Input for reading a task tree."""

    task_id: str = Field(..., description="Any task in the tree", min_length=1)


# =============================================================================
# Overview & Diagnostics Input Models
# =============================================================================


class DailyOverviewInput(BaseMCPInput):
    """Input for the daily overview."""

    date: Optional[str] = Field(
        default=None,
        description="Day to report on in YYYY-MM-DD format (defaults to today)",
        pattern=r"^\d{4}-\d{2}-\d{2}$",
    )
    limit: int = Field(
        default=10,
        description="Maximum tasks listed per section",
        ge=1,
        le=50,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            dt.date.fromisoformat(v)
        except ValueError:
            raise ValueError("date must be a valid calendar day in YYYY-MM-DD format")
        return v


class FeatureTestInput(BaseMCPInput):
    """Input for the self-test tool."""

    mode: FeatureTestMode = Field(
        default=FeatureTestMode.BASIC,
        description="'basic' only reads; 'enhanced' also creates and deletes a probe task",
    )


class PerformanceTestInput(BaseMCPInput):
    """Input for the latency probe."""

    iterations: int = Field(
        default=3,
        description="Number of timed requests",
        ge=1,
        le=10,
    )

