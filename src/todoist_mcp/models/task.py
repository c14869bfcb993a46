"""
Task model.

Todoist payloads arrive in snake_case from the REST API and in camelCase
from older SDK-shaped responses; both spellings validate into the same
model.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

LOWEST_PRIORITY = 4


class Due(BaseModel):
    """Due date descriptor."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    date: Optional[str] = None
    string: Optional[str] = None
    datetime: Optional[str] = None
    is_recurring: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_recurring", "isRecurring"),
    )
    timezone: Optional[str] = None

    def as_date(self) -> date | None:
        """
        Calendar day of this due date, or None if it cannot be parsed.

        Datetime values contribute only their date part.
        """
        for raw in (self.date, self.datetime):
            if not raw:
                continue
            try:
                return date.fromisoformat(raw[:10])
            except ValueError:
                continue
        return None

    @property
    def display(self) -> str:
        """Human-readable due string, falling back to the raw date."""
        return self.string or self.datetime or self.date or ""


class Task(BaseModel):
    """A Todoist task (value copy of the remote record)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    content: str = ""
    description: Optional[str] = None
    due: Optional[Due] = None
    priority: Optional[int] = Field(default=None, ge=1, le=4)
    project_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("project_id", "projectId"),
    )
    section_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("section_id", "sectionId"),
    )
    parent_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("parent_id", "parentId"),
    )
    is_completed: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_completed", "isCompleted", "checked", "completed"),
    )
    labels: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "createdAt", "added_at", "addedAt"),
    )

    @field_validator("id", "project_id", "section_id", "parent_id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        # Older API versions return numeric ids.
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("due", mode="before")
    @classmethod
    def coerce_due(cls, v: Any) -> Any:
        # A bare string is a date; any other non-object shape is unusable.
        if isinstance(v, str):
            return {"date": v, "string": v}
        if v is None or isinstance(v, (Mapping, Due)):
            return v
        return None

    @field_validator("priority", mode="before")
    @classmethod
    def drop_out_of_range_priority(cls, v: Any) -> Any:
        if isinstance(v, int) and not 1 <= v <= 4:
            return None
        return v

    @field_validator("labels", mode="before")
    @classmethod
    def none_labels(cls, v: Any) -> Any:
        return v or []

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Task:
        """Build a task from a raw API payload."""
        return cls.model_validate(data)

    @property
    def effective_priority(self) -> int:
        """Priority used for display and sorting (absent means lowest)."""
        return self.priority or LOWEST_PRIORITY

    @property
    def priority_tag(self) -> str:
        return f"P{self.effective_priority}"

    @property
    def due_date(self) -> date | None:
        return self.due.as_date() if self.due else None

    @property
    def due_string(self) -> str:
        return self.due.display if self.due else ""
