"""
Todoist Client.

TodoistClient is the single object tool handlers talk to. It exposes the
same operation surface as the REST client and, when built in dry-run
mode, intercepts every mutating call: nothing is sent to Todoist and a
synthesized result (the input echoed back with a generated id) is
returned instead. Reads always reach the real API.

Errors from the underlying API propagate unchanged.
"""

from __future__ import annotations

import itertools
import logging
from types import TracebackType
from typing import Any, Protocol, TypeVar

from todoist_mcp.api.rest import TodoistRestAPI
from todoist_mcp.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="TodoistClient")

DRY_RUN_ID_PREFIX = "dry-run-"


class TodoistAPI(Protocol):
    """Operation surface shared by TodoistRestAPI and test doubles."""

    async def get_tasks(self, **filters: Any) -> Any: ...
    async def get_task(self, task_id: str) -> Any: ...
    async def add_task(self, **fields: Any) -> Any: ...
    async def update_task(self, task_id: str, **fields: Any) -> Any: ...
    async def close_task(self, task_id: str) -> Any: ...
    async def delete_task(self, task_id: str) -> Any: ...
    async def get_projects(self) -> Any: ...
    async def add_project(self, **fields: Any) -> Any: ...
    async def get_sections(self, **filters: Any) -> Any: ...
    async def add_section(self, **fields: Any) -> Any: ...
    async def get_labels(self) -> Any: ...
    async def add_label(self, **fields: Any) -> Any: ...
    async def update_label(self, label_id: str, **fields: Any) -> Any: ...
    async def delete_label(self, label_id: str) -> Any: ...
    async def get_comments(self, **filters: Any) -> Any: ...
    async def add_comment(self, **fields: Any) -> Any: ...


class TodoistClient:
    """
    Todoist operations with an optional dry-run mode.

    Usage:
        async with TodoistClient.from_settings(settings) as client:
            tasks = await client.get_tasks()
            await client.add_task(content="Buy milk")  # simulated if dry_run
    """

    def __init__(self, api: TodoistAPI, *, dry_run: bool = False) -> None:
        self._api = api
        self._dry_run = dry_run
        self._ids = itertools.count(1)

    @classmethod
    def from_settings(cls, settings: Settings) -> TodoistClient:
        """Create a client backed by the REST API."""
        api = TodoistRestAPI(
            token=settings.todoist_api_token,
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
        )
        return cls(api, dry_run=settings.dry_run)

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    @property
    def api(self) -> TodoistAPI:
        return self._api

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def connect(self) -> None:
        connect = getattr(self._api, "connect", None)
        if connect is not None:
            await connect()
        if self._dry_run:
            logger.warning("Dry-run mode enabled: mutating Todoist calls will be simulated")

    async def close(self) -> None:
        close = getattr(self._api, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self: T) -> T:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # =========================================================================
    # Dry-run helpers
    # =========================================================================

    def _next_id(self) -> str:
        return f"{DRY_RUN_ID_PREFIX}{next(self._ids)}"

    def _simulate(self, operation: str, **fields: Any) -> dict[str, Any]:
        logger.info("[DRY-RUN] Would %s with %s", operation, fields)
        result = {k: v for k, v in fields.items() if v is not None}
        result.setdefault("id", self._next_id())
        return result

    # =========================================================================
    # Tasks
    # =========================================================================

    async def get_tasks(
        self,
        *,
        project_id: str | None = None,
        section_id: str | None = None,
        parent_id: str | None = None,
        label: str | None = None,
    ) -> Any:
        return await self._api.get_tasks(
            project_id=project_id,
            section_id=section_id,
            parent_id=parent_id,
            label=label,
        )

    async def get_task(self, task_id: str) -> Any:
        return await self._api.get_task(task_id)

    async def add_task(
        self,
        content: str,
        *,
        description: str | None = None,
        due_string: str | None = None,
        priority: int | None = None,
        labels: list[str] | None = None,
        project_id: str | None = None,
        section_id: str | None = None,
        parent_id: str | None = None,
    ) -> Any:
        fields = {
            "content": content,
            "description": description,
            "due_string": due_string,
            "priority": priority,
            "labels": labels,
            "project_id": project_id,
            "section_id": section_id,
            "parent_id": parent_id,
        }
        if self._dry_run:
            result = self._simulate("create task", **fields)
            result.pop("due_string", None)
            if due_string:
                result["due"] = {"string": due_string}
            result["is_completed"] = False
            return result
        return await self._api.add_task(**fields)

    async def update_task(
        self,
        task_id: str,
        *,
        content: str | None = None,
        description: str | None = None,
        due_string: str | None = None,
        priority: int | None = None,
        labels: list[str] | None = None,
    ) -> Any:
        fields = {
            "content": content,
            "description": description,
            "due_string": due_string,
            "priority": priority,
            "labels": labels,
        }
        if self._dry_run:
            result = self._simulate("update task", id=task_id, **fields)
            result.pop("due_string", None)
            if due_string:
                result["due"] = {"string": due_string}
            return result
        return await self._api.update_task(task_id, **fields)

    async def close_task(self, task_id: str) -> Any:
        if self._dry_run:
            self._simulate("complete task", id=task_id)
            return True
        return await self._api.close_task(task_id)

    async def delete_task(self, task_id: str) -> Any:
        if self._dry_run:
            self._simulate("delete task", id=task_id)
            return True
        return await self._api.delete_task(task_id)

    # =========================================================================
    # Projects & Sections
    # =========================================================================

    async def get_projects(self) -> Any:
        return await self._api.get_projects()

    async def add_project(
        self,
        name: str,
        *,
        color: str | None = None,
        is_favorite: bool | None = None,
    ) -> Any:
        fields = {"name": name, "color": color, "is_favorite": is_favorite}
        if self._dry_run:
            return self._simulate("create project", **fields)
        return await self._api.add_project(**fields)

    async def get_sections(self, *, project_id: str | None = None) -> Any:
        return await self._api.get_sections(project_id=project_id)

    async def add_section(
        self,
        name: str,
        project_id: str,
        *,
        order: int | None = None,
    ) -> Any:
        fields = {"name": name, "project_id": project_id, "order": order}
        if self._dry_run:
            return self._simulate("create section", **fields)
        return await self._api.add_section(**fields)

    # =========================================================================
    # Labels
    # =========================================================================

    async def get_labels(self) -> Any:
        return await self._api.get_labels()

    async def add_label(
        self,
        name: str,
        *,
        color: str | None = None,
        is_favorite: bool | None = None,
    ) -> Any:
        fields = {"name": name, "color": color, "is_favorite": is_favorite}
        if self._dry_run:
            return self._simulate("create label", **fields)
        return await self._api.add_label(**fields)

    async def update_label(
        self,
        label_id: str,
        *,
        name: str | None = None,
        color: str | None = None,
        is_favorite: bool | None = None,
    ) -> Any:
        fields = {"name": name, "color": color, "is_favorite": is_favorite}
        if self._dry_run:
            return self._simulate("update label", id=label_id, **fields)
        return await self._api.update_label(label_id, **fields)

    async def delete_label(self, label_id: str) -> Any:
        if self._dry_run:
            self._simulate("delete label", id=label_id)
            return True
        return await self._api.delete_label(label_id)

    # =========================================================================
    # Comments
    # =========================================================================

    async def get_comments(
        self,
        *,
        task_id: str | None = None,
        project_id: str | None = None,
    ) -> Any:
        return await self._api.get_comments(task_id=task_id, project_id=project_id)

    async def add_comment(
        self,
        content: str,
        *,
        task_id: str | None = None,
        project_id: str | None = None,
        attachment: dict[str, Any] | None = None,
    ) -> Any:
        fields = {
            "content": content,
            "task_id": task_id,
            "project_id": project_id,
            "attachment": attachment,
        }
        if self._dry_run:
            return self._simulate("create comment", **fields)
        return await self._api.add_comment(**fields)
