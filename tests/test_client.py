"""
Todoist Client Tests.

This module tests the TodoistClient adapter:
- Passthrough of reads and writes to the underlying API
- Dry-run interception of every mutating operation
- Error propagation and lifecycle
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from todoist_mcp.client import TodoistClient
from todoist_mcp.exceptions import TodoistAPIError, TodoistNotFoundError
from todoist_mcp.settings import Settings

if TYPE_CHECKING:
    from tests.conftest import MockTodoistAPI, TaskFactory


pytestmark = [pytest.mark.unit]


# =============================================================================
# Passthrough Tests
# =============================================================================


class TestPassthrough:
    """Tests for the non-dry-run client."""

    async def test_add_task_reaches_api(self, client: TodoistClient, mock_api: MockTodoistAPI):
        result = await client.add_task("Buy milk", priority=1, labels=["errands"])

        assert result["content"] == "Buy milk"
        assert result["id"] in mock_api.tasks
        mock_api.assert_called("add_task", times=1)
        _, kwargs = mock_api.get_calls("add_task")[0]
        assert kwargs["priority"] == 1
        assert kwargs["labels"] == ["errands"]

    async def test_get_tasks_forwards_filters(self, client: TodoistClient, mock_api: MockTodoistAPI):
        await client.get_tasks(project_id="p1", label="work")

        _, kwargs = mock_api.get_calls("get_tasks")[0]
        assert kwargs["project_id"] == "p1"
        assert kwargs["label"] == "work"

    async def test_errors_propagate_unchanged(self, client: TodoistClient, mock_api: MockTodoistAPI):
        error = TodoistAPIError("boom", status_code=500)
        mock_api.should_fail["get_projects"] = error

        with pytest.raises(TodoistAPIError) as exc_info:
            await client.get_projects()

        assert exc_info.value is error
        mock_api.assert_called("get_projects", times=1)

    async def test_not_found_propagates(self, client: TodoistClient):
        with pytest.raises(TodoistNotFoundError):
            await client.close_task("missing")

    async def test_lifecycle(self, mock_api: MockTodoistAPI):
        async with TodoistClient(mock_api):
            assert mock_api.connected

        assert not mock_api.connected
        mock_api.assert_called("connect", times=1)
        mock_api.assert_called("close", times=1)

    def test_from_settings(self):
        settings = Settings(todoist_api_token="abc", dry_run=True)

        client = TodoistClient.from_settings(settings)

        assert client.dry_run is True
        assert client.api is not None


# =============================================================================
# Dry-Run Tests
# =============================================================================


class TestDryRun:
    """Tests for dry-run interception."""

    async def test_add_task_is_simulated(self, dry_run_client: TodoistClient, mock_api: MockTodoistAPI):
        result = await dry_run_client.add_task("Buy milk", due_string="tomorrow", priority=2)

        assert result["id"] == "dry-run-1"
        assert result["content"] == "Buy milk"
        assert result["priority"] == 2
        assert result["due"] == {"string": "tomorrow"}
        assert result["is_completed"] is False
        assert "description" not in result
        mock_api.assert_not_called("add_task")

    async def test_generated_ids_are_sequential(self, dry_run_client: TodoistClient):
        first = await dry_run_client.add_project("One")
        second = await dry_run_client.add_label("two")

        assert first["id"] == "dry-run-1"
        assert second["id"] == "dry-run-2"

    async def test_update_echoes_given_id(self, dry_run_client: TodoistClient, mock_api: MockTodoistAPI):
        result = await dry_run_client.update_task("t-42", content="New title")

        assert result == {"id": "t-42", "content": "New title"}
        mock_api.assert_not_called("update_task")

    @pytest.mark.parametrize("method,arg", [
        ("close_task", "t1"),
        ("delete_task", "t1"),
        ("delete_label", "l1"),
    ])
    async def test_destructive_calls_return_true(
        self,
        dry_run_client: TodoistClient,
        mock_api: MockTodoistAPI,
        method: str,
        arg: str,
    ):
        assert await getattr(dry_run_client, method)(arg) is True
        mock_api.assert_not_called(method)

    async def test_all_creates_are_simulated(self, dry_run_client: TodoistClient, mock_api: MockTodoistAPI):
        await dry_run_client.add_section("Backlog", "p1", order=2)
        await dry_run_client.add_comment("Looks good", task_id="t1")
        await dry_run_client.update_label("l1", name="renamed")

        for method in ("add_section", "add_comment", "update_label"):
            mock_api.assert_not_called(method)

    async def test_reads_pass_through(
        self,
        dry_run_client: TodoistClient,
        mock_api: MockTodoistAPI,
        task_factory: type[TaskFactory],
    ):
        mock_api.seed_tasks(task_factory.create(content="Existing"))

        tasks = await dry_run_client.get_tasks()

        assert [t["content"] for t in tasks] == ["Existing"]
        mock_api.assert_called("get_tasks", times=1)

    async def test_dry_run_logs_interception(self, dry_run_client: TodoistClient, caplog):
        with caplog.at_level("INFO", logger="todoist_mcp.client"):
            await dry_run_client.delete_task("t1")

        assert "[DRY-RUN] Would delete task" in caplog.text
