"""
Todoist MCP Server - exposes Todoist to AI agents (Poke) over MCP.

This package wraps the Todoist REST API as a set of Model Context Protocol
tools. Requests arrive as JSON-RPC envelopes, are validated against each
tool's input schema, executed against Todoist (or simulated in dry-run
mode), and rendered back as text.

Architecture:
    HTTP (/mcp, bearer auth) or stdio
         │
         ▼
    Dispatcher (JSON-RPC envelope, validation)
         │
         ▼
    Tool Registry → Handlers → Formatters
         │
         ▼
    TodoistClient (dry-run adapter)
         │
         ▼
    TodoistRestAPI (httpx)
"""

__version__ = "1.0.0"
__author__ = "Todoist MCP Contributors"

from todoist_mcp.exceptions import (
    TodoistError,
    TodoistConfigurationError,
    TodoistValidationError,
    TodoistUnsupportedOperationError,
    TodoistAPIError,
    TodoistAuthenticationError,
    TodoistNotFoundError,
    TodoistRateLimitError,
)

__all__ = [
    "__version__",
    "TodoistError",
    "TodoistConfigurationError",
    "TodoistValidationError",
    "TodoistUnsupportedOperationError",
    "TodoistAPIError",
    "TodoistAuthenticationError",
    "TodoistNotFoundError",
    "TodoistRateLimitError",
]
