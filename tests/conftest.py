"""
Pytest Configuration and Fixtures for Todoist MCP Tests.

This module provides fixtures, payload factories, and shared utilities for
testing the Todoist MCP server without touching the real Todoist API.

Architecture:
    - MockTodoistAPI: In-memory async stand-in for TodoistRestAPI that
      records every call
    - Factories: Generate raw API payloads (tasks, projects, labels, ...)
    - Fixtures: Provide configured clients, settings and dispatchers
    - Markers: Custom pytest markers for test categorization
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, AsyncIterator

import pytest

from todoist_mcp.client import TodoistClient
from todoist_mcp.dispatcher import Dispatcher
from todoist_mcp.exceptions import TodoistNotFoundError
from todoist_mcp.settings import Settings
from todoist_mcp.tools.handlers import registry
from todoist_mcp.tools.registry import ToolContext


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "tasks: Task tool tests")
    config.addinivalue_line("markers", "labels: Label tool tests")
    config.addinivalue_line("markers", "subtasks: Subtask tool tests")
    config.addinivalue_line("markers", "overview: Daily overview tests")
    config.addinivalue_line("markers", "dispatcher: JSON-RPC dispatcher tests")
    config.addinivalue_line("markers", "transport: HTTP transport tests")
    config.addinivalue_line("markers", "errors: Error handling tests")


# =============================================================================
# Time Utilities
# =============================================================================


def today() -> date:
    return date.today()


def days_from_today(n: int) -> date:
    """Date n days from today (negative for the past)."""
    return today() + timedelta(days=n)


# =============================================================================
# ID Generators
# =============================================================================


class IDGenerator:
    """Sequential ID generator for test payloads."""

    _counter: int = 0

    @classmethod
    def reset(cls) -> None:
        cls._counter = 0

    @classmethod
    def next_id(cls) -> str:
        cls._counter += 1
        return f"{6000000000 + cls._counter}"


# =============================================================================
# Test Data Factories
# =============================================================================


class TaskFactory:
    """Factory for raw Todoist task payloads."""

    @staticmethod
    def create(
        id: str | None = None,
        content: str = "Test Task",
        due: date | None = None,
        due_string: str | None = None,
        priority: int | None = None,
        project_id: str | None = "2200000001",
        is_completed: bool = False,
        labels: list[str] | None = None,
        parent_id: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Create a task payload with sensible defaults."""
        payload: dict[str, Any] = {
            "id": id or IDGenerator.next_id(),
            "content": content,
            "description": "",
            "priority": priority,
            "project_id": project_id,
            "section_id": None,
            "parent_id": parent_id,
            "is_completed": is_completed,
            "labels": labels or [],
            "due": None,
        }
        if due is not None:
            payload["due"] = {
                "date": due.isoformat(),
                "string": due_string or due.isoformat(),
                "is_recurring": False,
            }
        payload.update(kwargs)
        return payload

    @staticmethod
    def create_due_in(days: int, **kwargs: Any) -> dict[str, Any]:
        """Create a task due ``days`` from today."""
        return TaskFactory.create(due=days_from_today(days), **kwargs)


class ProjectFactory:
    @staticmethod
    def create(id: str | None = None, name: str = "Test Project", **kwargs: Any) -> dict[str, Any]:
        return {
            "id": id or IDGenerator.next_id(),
            "name": name,
            "color": kwargs.pop("color", "charcoal"),
            "is_favorite": kwargs.pop("is_favorite", False),
            **kwargs,
        }


class LabelFactory:
    @staticmethod
    def create(name: str, id: str | None = None, **kwargs: Any) -> dict[str, Any]:
        return {
            "id": id or IDGenerator.next_id(),
            "name": name,
            "color": kwargs.pop("color", "charcoal"),
            "is_favorite": kwargs.pop("is_favorite", False),
            **kwargs,
        }


# =============================================================================
# Mock API Classes
# =============================================================================


class MockTodoistAPI:
    """
    In-memory mock for TodoistRestAPI.

    Stores raw payloads keyed by id and returns them in the shapes the
    real API uses. Set ``wrap_results`` to return list endpoints inside a
    ``{"results": [...]}`` envelope instead of a bare array.
    """

    def __init__(self):
        self.tasks: dict[str, dict[str, Any]] = {}
        self.projects: dict[str, dict[str, Any]] = {}
        self.sections: dict[str, dict[str, Any]] = {}
        self.labels: dict[str, dict[str, Any]] = {}
        self.comments: dict[str, dict[str, Any]] = {}
        self.wrap_results: bool = False
        self.connected: bool = False

        # Track method calls for verification
        self.call_history: list[tuple[str, tuple, dict]] = []

        # Configurable behaviors
        self.should_fail: dict[str, Exception | None] = {}

    def _record_call(self, method: str, args: tuple, kwargs: dict) -> None:
        self.call_history.append((method, args, kwargs))

    def _check_failure(self, method: str) -> None:
        if method in self.should_fail and self.should_fail[method]:
            raise self.should_fail[method]

    def _list(self, items: list[dict[str, Any]]) -> Any:
        items = [dict(item) for item in items]
        if self.wrap_results:
            return {"results": items, "next_cursor": None}
        return items

    def _require_task(self, task_id: str) -> dict[str, Any]:
        if task_id not in self.tasks:
            raise TodoistNotFoundError(f"Task not found: {task_id}", status_code=404)
        return self.tasks[task_id]

    async def connect(self) -> None:
        self._record_call("connect", (), {})
        self.connected = True

    async def close(self) -> None:
        self._record_call("close", (), {})
        self.connected = False

    # -------------------------------------------------------------------------
    # Task Operations
    # -------------------------------------------------------------------------

    async def get_tasks(self, **filters: Any) -> Any:
        self._record_call("get_tasks", (), filters)
        self._check_failure("get_tasks")

        tasks = list(self.tasks.values())
        for key in ("project_id", "section_id", "parent_id"):
            if filters.get(key):
                tasks = [t for t in tasks if t.get(key) == filters[key]]
        if filters.get("label"):
            tasks = [t for t in tasks if filters["label"] in t.get("labels", [])]
        return self._list(tasks)

    async def get_task(self, task_id: str) -> dict[str, Any]:
        self._record_call("get_task", (task_id,), {})
        self._check_failure("get_task")
        return dict(self._require_task(task_id))

    async def add_task(self, **fields: Any) -> dict[str, Any]:
        self._record_call("add_task", (), fields)
        self._check_failure("add_task")

        due_string = fields.pop("due_string", None)
        task = TaskFactory.create(**{k: v for k, v in fields.items() if v is not None})
        if due_string:
            task["due"] = {"date": None, "string": due_string, "is_recurring": False}
        self.tasks[task["id"]] = task
        return dict(task)

    async def update_task(self, task_id: str, **fields: Any) -> dict[str, Any]:
        self._record_call("update_task", (task_id,), fields)
        self._check_failure("update_task")

        task = self._require_task(task_id)
        due_string = fields.pop("due_string", None)
        task.update({k: v for k, v in fields.items() if v is not None})
        if due_string:
            task["due"] = {"date": None, "string": due_string, "is_recurring": False}
        return dict(task)

    async def close_task(self, task_id: str) -> bool:
        self._record_call("close_task", (task_id,), {})
        self._check_failure("close_task")
        self._require_task(task_id)["is_completed"] = True
        return True

    async def delete_task(self, task_id: str) -> bool:
        self._record_call("delete_task", (task_id,), {})
        self._check_failure("delete_task")
        self._require_task(task_id)
        del self.tasks[task_id]
        return True

    # -------------------------------------------------------------------------
    # Project & Section Operations
    # -------------------------------------------------------------------------

    async def get_projects(self) -> Any:
        self._record_call("get_projects", (), {})
        self._check_failure("get_projects")
        return self._list(list(self.projects.values()))

    async def add_project(self, **fields: Any) -> dict[str, Any]:
        self._record_call("add_project", (), fields)
        self._check_failure("add_project")
        project = ProjectFactory.create(**{k: v for k, v in fields.items() if v is not None})
        self.projects[project["id"]] = project
        return dict(project)

    async def get_sections(self, **filters: Any) -> Any:
        self._record_call("get_sections", (), filters)
        self._check_failure("get_sections")
        sections = [
            s for s in self.sections.values()
            if not filters.get("project_id") or s["project_id"] == filters["project_id"]
        ]
        return self._list(sections)

    async def add_section(self, **fields: Any) -> dict[str, Any]:
        self._record_call("add_section", (), fields)
        self._check_failure("add_section")
        section = {"id": IDGenerator.next_id(), "order": len(self.sections) + 1}
        section.update({k: v for k, v in fields.items() if v is not None})
        self.sections[section["id"]] = section
        return dict(section)

    # -------------------------------------------------------------------------
    # Label Operations
    # -------------------------------------------------------------------------

    async def get_labels(self) -> Any:
        self._record_call("get_labels", (), {})
        self._check_failure("get_labels")
        return self._list(list(self.labels.values()))

    async def add_label(self, **fields: Any) -> dict[str, Any]:
        self._record_call("add_label", (), fields)
        self._check_failure("add_label")
        label = LabelFactory.create(**{k: v for k, v in fields.items() if v is not None})
        self.labels[label["id"]] = label
        return dict(label)

    async def update_label(self, label_id: str, **fields: Any) -> dict[str, Any]:
        self._record_call("update_label", (label_id,), fields)
        self._check_failure("update_label")
        label = self.labels[label_id]
        label.update({k: v for k, v in fields.items() if v is not None})
        return dict(label)

    async def delete_label(self, label_id: str) -> bool:
        self._record_call("delete_label", (label_id,), {})
        self._check_failure("delete_label")
        del self.labels[label_id]
        return True

    # -------------------------------------------------------------------------
    # Comment Operations
    # -------------------------------------------------------------------------

    async def get_comments(self, **filters: Any) -> Any:
        self._record_call("get_comments", (), filters)
        self._check_failure("get_comments")
        comments = [
            c for c in self.comments.values()
            if (filters.get("task_id") and c.get("task_id") == filters["task_id"])
            or (filters.get("project_id") and c.get("project_id") == filters["project_id"])
        ]
        return self._list(comments)

    async def add_comment(self, **fields: Any) -> dict[str, Any]:
        self._record_call("add_comment", (), fields)
        self._check_failure("add_comment")
        comment = {"id": IDGenerator.next_id(), "posted_at": "2025-01-15T10:30:00Z"}
        comment.update({k: v for k, v in fields.items() if v is not None})
        self.comments[comment["id"]] = comment
        return dict(comment)

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def seed_tasks(self, *tasks: dict[str, Any]) -> None:
        for task in tasks:
            self.tasks[task["id"]] = task

    def seed_labels(self, *names: str) -> None:
        for name in names:
            label = LabelFactory.create(name=name)
            self.labels[label["id"]] = label

    def clear_call_history(self) -> None:
        self.call_history.clear()

    def get_calls(self, method_name: str) -> list[tuple[tuple, dict]]:
        """Get all calls to a specific method."""
        return [(args, kwargs) for name, args, kwargs in self.call_history if name == method_name]

    def assert_called(self, method_name: str, times: int | None = None) -> None:
        """Assert a method was called (optionally a specific number of times)."""
        calls = self.get_calls(method_name)
        if times is not None:
            assert len(calls) == times, f"Expected {method_name} to be called {times} times, got {len(calls)}"
        else:
            assert len(calls) > 0, f"Expected {method_name} to be called at least once"

    def assert_not_called(self, method_name: str) -> None:
        """Assert a method was not called."""
        calls = self.get_calls(method_name)
        assert len(calls) == 0, f"Expected {method_name} not to be called, but was called {len(calls)} times"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def id_generator():
    """Reset and provide ID generator."""
    IDGenerator.reset()
    return IDGenerator


@pytest.fixture
def mock_api() -> MockTodoistAPI:
    """Create a fresh mock API instance."""
    return MockTodoistAPI()


@pytest.fixture
def settings() -> Settings:
    return Settings(todoist_api_token="test-todoist-token")


@pytest.fixture
def auth_settings() -> Settings:
    return Settings(todoist_api_token="test-todoist-token", mcp_auth_token="s3cret-token")


@pytest.fixture
async def client(mock_api: MockTodoistAPI) -> AsyncIterator[TodoistClient]:
    """TodoistClient backed by the mock API."""
    async with TodoistClient(mock_api) as client:
        yield client


@pytest.fixture
async def dry_run_client(mock_api: MockTodoistAPI) -> AsyncIterator[TodoistClient]:
    """TodoistClient in dry-run mode backed by the mock API."""
    async with TodoistClient(mock_api, dry_run=True) as client:
        yield client


@pytest.fixture
def ctx(client: TodoistClient, settings: Settings) -> ToolContext:
    return ToolContext(client=client, settings=settings)


@pytest.fixture
def dry_run_ctx(dry_run_client: TodoistClient, settings: Settings) -> ToolContext:
    return ToolContext(client=dry_run_client, settings=settings)


@pytest.fixture
def dispatcher(client: TodoistClient, settings: Settings) -> Dispatcher:
    return Dispatcher(registry, client, settings)


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def task_factory() -> type[TaskFactory]:
    return TaskFactory


@pytest.fixture
def label_factory() -> type[LabelFactory]:
    return LabelFactory


@pytest.fixture
def project_factory() -> type[ProjectFactory]:
    return ProjectFactory
