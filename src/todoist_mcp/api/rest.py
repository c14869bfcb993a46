"""
Todoist REST API client.

A thin async wrapper over httpx: one method per endpoint, JSON in, parsed
JSON out. Response shapes are returned untouched (bare arrays and
``{"results": [...]}`` envelopes alike); normalizing them is the caller's
job. HTTP failures are translated into the TodoistAPIError hierarchy.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, TypeVar

import httpx

from todoist_mcp.exceptions import (
    TodoistAPIError,
    TodoistAuthenticationError,
    TodoistNotFoundError,
    TodoistRateLimitError,
)
from todoist_mcp.settings import DEFAULT_API_BASE_URL

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="TodoistRestAPI")

# Upper bound accepted by the paginated list endpoints.
PAGE_LIMIT = 200


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


class TodoistRestAPI:
    """
    Async client for the Todoist REST API.

    Usage:
        async with TodoistRestAPI(token="...") as api:
            tasks = await api.get_tasks(project_id="...")
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def connect(self) -> None:
        """Open the HTTP session."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

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
    # Transport
    # =========================================================================

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        if self._client is None:
            await self.connect()

        logger.debug("%s %s params=%s", method, endpoint, params)

        try:
            response = await self._client.request(  # type: ignore[union-attr]
                method,
                endpoint,
                json=_drop_none(json) if json is not None else None,
                params=_drop_none(params) if params else None,
            )
        except httpx.TimeoutException as e:
            raise TodoistAPIError(
                f"Request to {endpoint} timed out",
                endpoint=endpoint,
            ) from e
        except httpx.HTTPError as e:
            raise TodoistAPIError(
                f"Request to {endpoint} failed: {e}",
                endpoint=endpoint,
            ) from e

        if response.is_error:
            self._raise_for_status(response, endpoint)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _raise_for_status(response: httpx.Response, endpoint: str) -> None:
        status = response.status_code
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text

        kwargs = {"status_code": status, "response_body": body, "endpoint": endpoint}

        if status in (401, 403):
            raise TodoistAuthenticationError(
                f"Todoist rejected the API token (HTTP {status})", **kwargs
            )
        if status == 404:
            raise TodoistNotFoundError(f"Resource not found: {endpoint}", **kwargs)
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise TodoistRateLimitError(
                "Todoist rate limit exceeded. Please wait before making more requests.",
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
                **kwargs,
            )
        if status >= 500:
            raise TodoistAPIError(f"Todoist server error (HTTP {status})", **kwargs)
        raise TodoistAPIError(f"Todoist API request failed (HTTP {status}): {body}", **kwargs)

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
        return await self._request(
            "GET",
            "/tasks",
            params={
                "project_id": project_id,
                "section_id": section_id,
                "parent_id": parent_id,
                "label": label,
                "limit": PAGE_LIMIT,
            },
        )

    async def get_task(self, task_id: str) -> Any:
        return await self._request("GET", f"/tasks/{task_id}")

    async def add_task(self, **fields: Any) -> Any:
        return await self._request("POST", "/tasks", json=fields)

    async def update_task(self, task_id: str, **fields: Any) -> Any:
        return await self._request("POST", f"/tasks/{task_id}", json=fields)

    async def close_task(self, task_id: str) -> Any:
        await self._request("POST", f"/tasks/{task_id}/close")
        return True

    async def delete_task(self, task_id: str) -> Any:
        await self._request("DELETE", f"/tasks/{task_id}")
        return True

    # =========================================================================
    # Projects & Sections
    # =========================================================================

    async def get_projects(self) -> Any:
        return await self._request("GET", "/projects", params={"limit": PAGE_LIMIT})

    async def add_project(self, **fields: Any) -> Any:
        return await self._request("POST", "/projects", json=fields)

    async def get_sections(self, *, project_id: str | None = None) -> Any:
        return await self._request(
            "GET",
            "/sections",
            params={"project_id": project_id, "limit": PAGE_LIMIT},
        )

    async def add_section(self, **fields: Any) -> Any:
        return await self._request("POST", "/sections", json=fields)

    # =========================================================================
    # Labels
    # =========================================================================

    async def get_labels(self) -> Any:
        return await self._request("GET", "/labels", params={"limit": PAGE_LIMIT})

    async def add_label(self, **fields: Any) -> Any:
        return await self._request("POST", "/labels", json=fields)

    async def update_label(self, label_id: str, **fields: Any) -> Any:
        return await self._request("POST", f"/labels/{label_id}", json=fields)

    async def delete_label(self, label_id: str) -> Any:
        await self._request("DELETE", f"/labels/{label_id}")
        return True

    # =========================================================================
    # Comments
    # =========================================================================

    async def get_comments(
        self,
        *,
        task_id: str | None = None,
        project_id: str | None = None,
    ) -> Any:
        return await self._request(
            "GET",
            "/comments",
            params={"task_id": task_id, "project_id": project_id, "limit": PAGE_LIMIT},
        )

    async def add_comment(self, **fields: Any) -> Any:
        return await self._request("POST", "/comments", json=fields)
