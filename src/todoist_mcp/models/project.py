"""Project and section models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Project(BaseModel):
    """A Todoist project."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str = ""
    color: Optional[str] = None
    is_favorite: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_favorite", "isFavorite"),
    )
    is_inbox_project: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_inbox_project", "isInboxProject", "inbox_project"),
    )

    @field_validator("id", "color", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Project:
        return cls.model_validate(data)


class Section(BaseModel):
    """A section inside a project."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    project_id: str = Field(
        default="",
        validation_alias=AliasChoices("project_id", "projectId"),
    )
    name: str = ""
    order: int = Field(
        default=0,
        validation_alias=AliasChoices("order", "section_order", "sectionOrder"),
    )

    @field_validator("id", "project_id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("order", mode="before")
    @classmethod
    def none_order(cls, v: Any) -> Any:
        return 0 if v is None else v

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Section:
        return cls.model_validate(data)
