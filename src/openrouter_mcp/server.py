"""
stdio MCP server exposing the send_message tool.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from openrouter_mcp import __version__
from openrouter_mcp.client import OpenRouterLLM
from openrouter_mcp.config import BridgeConfig, ConfigError, load_config
from openrouter_mcp.errors import InvalidArgumentsError
from openrouter_mcp.tool import TOOL_DESCRIPTION, TOOL_NAME, SendMessageTool

__all__ = ["SERVER_NAME", "build_server", "handle_call", "serve", "main"]

SERVER_NAME = "openrouter-mcp"

logger = logging.getLogger(__name__)


class ToolCallFailed(Exception):
    """Raised out of the call_tool handler so the server flags the result as an error."""


async def handle_call(
    tool: SendMessageTool, name: str, arguments: Optional[dict[str, Any]]
) -> list[types.TextContent]:
    """Run one tool call and render the result as a single text block.

    Raises:
        ToolCallFailed: for unknown tools, invalid arguments and error
            results; the message is the text shown to the caller.
    """
    if name != TOOL_NAME:
        raise ToolCallFailed(f"Unknown tool: {name}")
    try:
        result = await tool(arguments or {})
    except InvalidArgumentsError as exc:
        raise ToolCallFailed(f"Invalid arguments: {exc}") from exc
    if result.is_error:
        raise ToolCallFailed(result.text)
    return [types.TextContent(type="text", text=result.text)]


def build_server(tool: SendMessageTool) -> Server:
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=TOOL_NAME,
                description=TOOL_DESCRIPTION,
                inputSchema=tool.input_schema(),
            )
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        return await handle_call(tool, name, arguments)

    return server


async def serve(config: BridgeConfig) -> None:
    async with OpenRouterLLM.from_config(config) as llm:
        tool = SendMessageTool.from_config(config, llm)
        server = build_server(tool)
        logger.info(
            "Starting %s %s (%s mode)", SERVER_NAME, __version__, config.gatekeeper_mode.value
        )
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    try:
        config = load_config()
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)

    # stdout carries the protocol
    logging.basicConfig(
        level=config.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(serve(config))


if __name__ == "__main__":
    main()
