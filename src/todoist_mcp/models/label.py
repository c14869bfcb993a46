"""Label model."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Label(BaseModel):
    """
    A personal label.

    ``name`` is the natural key: tasks reference labels by name, and the
    delete/update tools look labels up by name before calling the API by id.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str
    color: Optional[str] = None
    is_favorite: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_favorite", "isFavorite"),
    )

    @field_validator("id", "color", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Label:
        return cls.model_validate(data)
