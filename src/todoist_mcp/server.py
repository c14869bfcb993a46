#!/usr/bin/env python3
"""
Todoist MCP Server.

Exposes Todoist tasks, projects, sections, labels, comments and subtasks
to an MCP client (Poke) as callable tools.

Transports:
    - HTTP (``todoist-mcp-http``): JSON-RPC over ``POST /mcp`` with bearer
      authentication, plus ``GET /health`` and ``GET /``
    - stdio (``todoist-mcp``): the MCP SDK server, for local clients

Environment Variables:
    Required:
        TODOIST_API_TOKEN

    Optional:
        MCP_AUTH_TOKEN      Shared secret for /mcp (unset disables auth)
        DRYRUN / DRY_RUN    Simulate every mutating Todoist call
        TODOIST_API_URL, TODOIST_TIMEOUT, HOST, PORT, LOG_LEVEL
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator

import mcp.types as types
import uvicorn
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from todoist_mcp import __version__
from todoist_mcp.client import TodoistClient
from todoist_mcp.dispatcher import (
    PARSE_ERROR,
    SERVER_NAME,
    UNAUTHORIZED,
    Dispatcher,
    error_response,
)
from todoist_mcp.exceptions import TodoistConfigurationError
from todoist_mcp.settings import Settings, get_settings
from todoist_mcp.tools.handlers import registry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


# =============================================================================
# Authentication
# =============================================================================


def check_bearer(authorization: str | None, expected: str) -> str | None:
    """
    Compare an Authorization header against the shared secret.

    Returns:
        None when the credential matches, otherwise the rejection reason.
    """
    if not authorization:
        return "Missing Authorization header"
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return "Authorization header must be of the form 'Bearer <token>'"

    token = token.strip()
    if not token or not secrets.compare_digest(token.encode(), expected.encode()):
        return "Invalid bearer token"
    return None


# =============================================================================
# HTTP Application
# =============================================================================


def create_app(settings: Settings, dispatcher: Dispatcher) -> Starlette:
    """
    Build the Starlette application serving the MCP endpoint.

    The Todoist client held by the dispatcher is opened on startup and
    closed on shutdown.
    """
    if not settings.auth_enabled:
        logger.warning(
            "MCP_AUTH_TOKEN is not set: /mcp accepts unauthenticated requests. "
            "Only use this mode for local development."
        )

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info("Initializing Todoist MCP Server...")
        await dispatcher.client.connect()
        logger.info("Todoist client connected (%d tools registered)", len(dispatcher.registry))
        try:
            yield
        finally:
            await dispatcher.client.close()
            logger.info("Todoist client disconnected")

    async def mcp_endpoint(request: Request) -> Response:
        if settings.auth_enabled:
            reason = check_bearer(request.headers.get("authorization"), settings.mcp_auth_token)
            if reason is not None:
                logger.warning("Rejected /mcp request from %s: %s", request.client, reason)
                return JSONResponse(error_response(None, UNAUTHORIZED, reason), status_code=401)

        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse(
                error_response(None, PARSE_ERROR, "Request body is not valid JSON"),
                status_code=400,
            )

        response = await dispatcher.dispatch(payload)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(response)

    async def health(request: Request) -> Response:
        return JSONResponse(
            {
                "status": "healthy",
                "service": SERVER_NAME,
                "version": __version__,
                "authentication": "enabled" if settings.auth_enabled else "disabled",
                "dry_run": settings.dry_run,
                "tools": len(dispatcher.registry),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    async def index(request: Request) -> Response:
        return JSONResponse(
            {
                "service": SERVER_NAME,
                "version": __version__,
                "endpoints": {"mcp": "/mcp", "health": "/health"},
                "tools": dispatcher.registry.names(),
            }
        )

    return Starlette(
        routes=[
            Route("/mcp", mcp_endpoint, methods=["POST"]),
            Route("/health", health, methods=["GET"]),
            Route("/", index, methods=["GET"]),
        ],
        lifespan=lifespan,
    )


# =============================================================================
# stdio Server
# =============================================================================


def create_mcp_server(dispatcher: Dispatcher) -> Server:
    """Wrap the dispatcher's registry in an MCP SDK server."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [types.Tool.model_validate(d) for d in dispatcher.registry.list_definitions()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        text = await dispatcher.call_tool(name, arguments)
        return [types.TextContent(type="text", text=text)]

    return server


async def run_stdio(settings: Settings) -> None:
    async with TodoistClient.from_settings(settings) as client:
        dispatcher = Dispatcher(registry, client, settings)
        server = create_mcp_server(dispatcher)
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


# =============================================================================
# Main Entry Points
# =============================================================================


def _load_settings() -> Settings:
    try:
        settings = get_settings()
    except TodoistConfigurationError as e:
        logger.error("Failed to start Todoist MCP Server: %s", e)
        raise SystemExit(1) from e
    logging.getLogger().setLevel(settings.log_level)
    return settings


def main() -> None:
    """Main entry point for the stdio MCP server."""
    settings = _load_settings()
    asyncio.run(run_stdio(settings))


def main_http() -> None:
    """Main entry point for the HTTP server."""
    settings = _load_settings()
    dispatcher = Dispatcher(registry, TodoistClient.from_settings(settings), settings)
    app = create_app(settings, dispatcher)

    logger.info("Starting Todoist MCP Server on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
