"""Comment model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Attachment(BaseModel):
    """File attached to a comment."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    resource_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("resource_type", "resourceType"),
    )
    file_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("file_url", "fileUrl"),
    )
    file_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("file_name", "fileName"),
    )


class Comment(BaseModel):
    """A comment on a task or a project (exactly one of the two)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    content: str = ""
    task_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("task_id", "taskId", "item_id"),
    )
    project_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("project_id", "projectId"),
    )
    posted_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("posted_at", "postedAt", "created_at", "createdAt"),
    )
    attachment: Optional[Attachment] = Field(
        default=None,
        validation_alias=AliasChoices("attachment", "file_attachment", "fileAttachment"),
    )

    @field_validator("id", "task_id", "project_id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Comment:
        return cls.model_validate(data)
