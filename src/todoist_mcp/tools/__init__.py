"""
Todoist MCP Tools Package.

This package provides the MCP tool definitions for the Todoist MCP server.
Tools are organized into logical groups:
    - Task tools (create, list, update, complete, delete, bulk variants)
    - Project and section tools
    - Comment tools
    - Label tools (CRUD by name, usage statistics)
    - Subtask tools (create, bulk create, hierarchy)
    - Daily overview
    - Diagnostics (connection, feature and performance tests, health)

Handlers live in ``todoist_mcp.tools.handlers`` and register themselves on
its module-level ``registry``.
"""

from todoist_mcp.tools.inputs import (
    MAX_BULK_SUBTASKS,
    MAX_BULK_TASKS,
    FeatureTestMode,
    ResponseFormat,
)
from todoist_mcp.tools.registry import Tool, ToolContext, ToolRegistry

__all__ = [
    "MAX_BULK_SUBTASKS",
    "MAX_BULK_TASKS",
    "FeatureTestMode",
    "ResponseFormat",
    "Tool",
    "ToolContext",
    "ToolRegistry",
]
