"""MCP server setup for the Splitwise API."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent

from .config import Settings
from .executors import RequestDispatcher
from .models import OperationSpec
from .schemas import input_schema
from .service import ToolInvoker, ToolOutcome
from .tool_registry import OperationRegistry, load_registry

logger = logging.getLogger(__name__)

LIST_OPERATIONS_TOOL = "splitwise_list_operations"

ToolHandler = Callable[[Dict[str, Any]], Awaitable[ToolOutcome]]


class OperationTool(Tool):
    """FastMCP tool whose schema comes from the spec instead of a signature."""

    handler: ToolHandler

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        outcome = await self.handler(arguments)
        # ToolResult has no error flag; ToolError is the only way to set
        # isError, and it carries text only. The text is the full result JSON.
        if outcome.is_error:
            raise ToolError(outcome.text)
        return ToolResult(
            content=[TextContent(type="text", text=outcome.text)],
            structured_content=outcome.structured_content,
        )


async def build_server(settings: Settings) -> tuple[FastMCP, object | None]:
    registry = load_registry(settings)
    dispatcher = RequestDispatcher(
        base_url=settings.base_url(),
        timeout_seconds=settings.splitwise_timeout_seconds,
    )
    invoker = ToolInvoker(registry, dispatcher)

    mcp = FastMCP(
        settings.service_name,
        version=settings.service_version,
        instructions=_instructions(),
    )
    register_tools(mcp, registry, invoker)

    app = _get_http_app(mcp, settings)
    _attach_healthcheck(app)
    return mcp, app


def register_tools(mcp: FastMCP, registry: OperationRegistry, invoker: ToolInvoker) -> None:
    for operation in registry:
        mcp.add_tool(
            OperationTool(
                name=operation.tool_name,
                description=operation.tool_description(),
                parameters=input_schema(invoker.input_model(operation)),
                handler=_operation_handler(invoker, operation),
            )
        )
        logger.debug("Registered tool: %s", operation.tool_name)

    mcp.add_tool(
        OperationTool(
            name=LIST_OPERATIONS_TOOL,
            description="List all Splitwise API operations currently exposed as MCP tools.",
            parameters={"type": "object", "properties": {}},
            handler=_list_operations_handler(invoker),
        )
    )
    logger.info("Registered %s Splitwise tools", len(registry) + 1)


def _operation_handler(invoker: ToolInvoker, operation: OperationSpec) -> ToolHandler:
    async def handler(arguments: Dict[str, Any]) -> ToolOutcome:
        return await invoker.invoke(operation, arguments)

    handler.__name__ = operation.tool_name
    return handler


def _list_operations_handler(invoker: ToolInvoker) -> ToolHandler:
    async def handler(arguments: Dict[str, Any]) -> ToolOutcome:
        return invoker.list_operations()

    handler.__name__ = LIST_OPERATIONS_TOOL
    return handler


def _attach_healthcheck(app) -> None:  # type: ignore[no-untyped-def]
    if not app:
        return

    async def healthcheck(_request):  # type: ignore[no-untyped-def]
        from starlette.responses import JSONResponse

        return JSONResponse({"status": "ok"})

    app.add_route("/health", healthcheck, methods=["GET"])


def _instructions() -> str:
    return (
        "Splitwise API exposed as MCP tools, one tool per path and HTTP method. "
        f"Call {LIST_OPERATIONS_TOOL} to see every available operation."
    )


def _get_http_app(mcp: FastMCP, settings: Settings):  # type: ignore[no-untyped-def]
    transport = settings.splitwise_transport.lower()
    if transport in {"http"}:
        return mcp.http_app(transport="http", stateless_http=True, json_response=True)
    if transport in {"streamable-http", "streamablehttp"}:
        return mcp.http_app(
            transport="streamable-http", stateless_http=True, json_response=True
        )
    if transport in {"sse"}:
        return mcp.http_app(transport="sse")
    return None
