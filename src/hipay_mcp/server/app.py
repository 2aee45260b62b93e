"""HiPayMCPServer — binds the tool registry to an MCP server.

Built on the low-level ``mcp`` server so argument validation and error
normalization stay in :class:`ToolDispatcher` rather than in the transport.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from hipay_mcp import __version__
from hipay_mcp.sdk.client import HiPayClient
from hipay_mcp.server.dispatcher import ToolDispatcher
from hipay_mcp.server.tools import select_tools

if TYPE_CHECKING:
    from hipay_mcp.sdk.models import Environment
    from hipay_mcp.server.tools import ToolDefinition

logger = logging.getLogger(__name__)

SERVER_NAME = "HiPay"


class HiPayMCPServer:
    """MCP server exposing the selected HiPay tools.

    Usage::

        server = HiPayMCPServer(
            username="api-user",
            password="api-pass",
            environment="stage",
            enabled_tools=["transactions.get"],
        )
        await server.run_stdio()
    """

    def __init__(
        self,
        *,
        username: str,
        password: str,
        environment: Environment = "stage",
        enabled_tools: list[str] | None = None,
    ) -> None:
        self._client = HiPayClient(username, password, environment)
        self._dispatcher = ToolDispatcher(self._client, select_tools(enabled_tools))
        self.server: Server[Any, Any] = Server(SERVER_NAME, version=__version__)
        self._register_handlers()
        logger.debug(
            "Registered %d tool(s) for %s: %s",
            len(self.tools),
            environment,
            ", ".join(d.name for d in self.tools),
        )

    @property
    def client(self) -> HiPayClient:
        return self._client

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    @property
    def tools(self) -> list[ToolDefinition]:
        """The registered tool definitions, in registry order."""
        return self._dispatcher.definitions()

    async def list_tools(self) -> list[types.Tool]:
        """Answer ``tools/list``."""
        return [_to_mcp_tool(d) for d in self._dispatcher.definitions()]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        """Answer ``tools/call``."""
        response = await self._dispatcher.dispatch(name, arguments)
        return [types.TextContent(type="text", text=part.text) for part in response.content]

    async def run_stdio(self) -> None:
        """Serve over stdin/stdout until the client disconnects."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )

    def _register_handlers(self) -> None:
        self.server.list_tools()(self.list_tools)
        # Arguments are validated by the dispatcher so failures keep the text envelope
        self.server.call_tool(validate_input=False)(self.call_tool)


def _to_mcp_tool(definition: ToolDefinition) -> types.Tool:
    """Convert a :class:`ToolDefinition` to its MCP ``Tool`` listing."""
    hints = definition.hints
    return types.Tool(
        name=definition.name,
        description=definition.description,
        inputSchema=definition.input_schema(),
        annotations=types.ToolAnnotations(
            title=hints.title,
            readOnlyHint=hints.read_only,
            destructiveHint=hints.destructive,
            idempotentHint=hints.idempotent,
            openWorldHint=hints.open_world,
        ),
    )
