"""CLI entry point for the Splitwise MCP server."""

from __future__ import annotations

import asyncio
import logging
import sys

import uvicorn

from .config import get_settings
from .logging import configure_logging
from .openapi import SpecLoadError
from .server import build_server

logger = logging.getLogger(__name__)


async def _run() -> None:
    settings = get_settings()
    configure_logging(settings.splitwise_log_level)

    mcp, app = await build_server(settings)
    transport = settings.splitwise_transport.lower()

    if transport in {"http", "streamable-http", "streamablehttp", "sse"}:
        if not app:
            raise RuntimeError(f"HTTP app unavailable for transport={transport}")
        config = uvicorn.Config(app, host=settings.splitwise_host, port=settings.splitwise_port)
        server = uvicorn.Server(config)
        await server.serve()
        return
    await mcp.run_stdio_async()


def main() -> None:
    try:
        asyncio.run(_run())
    except SpecLoadError as exc:
        logger.error("splitwise-mcp fatal error: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
