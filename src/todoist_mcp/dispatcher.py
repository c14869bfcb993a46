"""
JSON-RPC dispatcher.

Takes one decoded request object and returns the response object (or None
for notifications). Every failure, including exceptions raised by tool
handlers, is turned into a JSON-RPC error; nothing is re-raised to the
transport.

Request lifecycle:
    Received -> Validated -> Executing -> Responded
                    |             |
                    +-> Rejected <+
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.types import LATEST_PROTOCOL_VERSION
from pydantic import BaseModel, ValidationError

from todoist_mcp import __version__
from todoist_mcp.settings import Settings
from todoist_mcp.tools.registry import Tool, ToolContext, ToolRegistry

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
SERVER_NAME = "todoist-mcp"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
UNAUTHORIZED = -32001

ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
    UNAUTHORIZED: "Unauthorized",
}


# =============================================================================
# Envelopes
# =============================================================================


def success_response(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: Any, code: int, data: str | None = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": ERROR_MESSAGES[code]}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def text_result(text: str) -> dict[str, Any]:
    """Tool-call result carrying a single text block."""
    return {"content": [{"type": "text", "text": text}], "isError": False}


def format_validation_error(e: ValidationError) -> str:
    """Render each violation as ``<dotted.path>: <reason>``."""
    parts = []
    for err in e.errors():
        path = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        parts.append(f"{path}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


# =============================================================================
# Dispatcher
# =============================================================================


class Dispatcher:
    """
    Routes JSON-RPC requests to registered tools.

    Usage:
        dispatcher = Dispatcher(registry, client, settings)
        response = await dispatcher.dispatch({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    """

    def __init__(self, registry: ToolRegistry, client: Any, settings: Settings) -> None:
        self.registry = registry
        self.client = client
        self.settings = settings
        self._context = ToolContext(client=client, settings=settings)

    async def dispatch(self, payload: Any) -> dict[str, Any] | None:
        """
        Handle one request.

        Returns:
            The response object, or None when the payload is a notification.
        """
        if not isinstance(payload, dict):
            return error_response(None, INVALID_REQUEST, "Request must be a JSON object")

        request_id = payload.get("id")
        method = payload.get("method")
        if not isinstance(method, str) or not method:
            return error_response(request_id, INVALID_REQUEST, "Request is missing 'method'")

        if "id" not in payload and method.startswith("notifications/"):
            logger.debug("Notification received: %s", method)
            return None

        logger.info("Handling %s (id=%s)", method, request_id)
        params = payload.get("params") or {}

        if method == "initialize":
            return success_response(request_id, self._initialize(params))
        if method == "ping":
            return success_response(request_id, {})
        if method == "tools/list":
            return success_response(request_id, {"tools": self.registry.list_definitions()})
        if method == "tools/call":
            return await self._call_tool(request_id, params)

        return error_response(request_id, METHOD_NOT_FOUND, f"Method {method} not found")

    def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        requested = params.get("protocolVersion") if isinstance(params, dict) else None
        return {
            "protocolVersion": requested if isinstance(requested, str) else LATEST_PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def call_tool(self, name: str, arguments: Any) -> str:
        """
        Validate arguments and run a tool, raising on any failure.

        Raises:
            KeyError: If no tool is registered under ``name``.
            ValidationError: If the arguments do not match the tool's model.
        """
        tool = self.registry.get(name)
        if tool is None:
            raise KeyError(name)
        params = tool.input_model.model_validate(arguments if arguments is not None else {})
        return await self._run(tool, params)

    async def _run(self, tool: Tool, params: BaseModel) -> str:
        logger.info("Executing tool %s", tool.name)
        return await tool.handler(params, self._context)

    async def _call_tool(self, request_id: Any, params: Any) -> dict[str, Any]:
        if not isinstance(params, dict):
            return error_response(request_id, INVALID_PARAMS, "params: must be an object")

        name = params.get("name")
        if not isinstance(name, str) or not name:
            return error_response(request_id, INVALID_PARAMS, "name: Field required")

        tool = self.registry.get(name)
        if tool is None:
            logger.warning("Unknown tool requested: %s", name)
            return error_response(request_id, METHOD_NOT_FOUND, f"Tool {name} not found")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return error_response(request_id, INVALID_PARAMS, "arguments: must be an object")

        try:
            validated = tool.input_model.model_validate(arguments)
        except ValidationError as e:
            detail = format_validation_error(e)
            logger.info("Invalid arguments for %s: %s", name, detail)
            return error_response(request_id, INVALID_PARAMS, detail)

        try:
            text = await self._run(tool, validated)
        except Exception as e:
            return self._handle_error(request_id, e, name)

        return success_response(request_id, text_result(text))

    def _handle_error(self, request_id: Any, e: Exception, operation: str) -> dict[str, Any]:
        """Log a handler failure and convert it into an internal-error response."""
        logger.exception("Error in %s: %s", operation, e)
        return error_response(request_id, INTERNAL_ERROR, str(e) or type(e).__name__)
