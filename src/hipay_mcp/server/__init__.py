"""Server layer — tool registry, dispatcher and MCP shell."""

from hipay_mcp.server.app import HiPayMCPServer
from hipay_mcp.server.dispatcher import ToolDispatcher, create_text_response, describe_failure
from hipay_mcp.server.models import TextContent, ToolCallResponse, ToolHints
from hipay_mcp.server.tools import TOOL_DEFINITIONS, TOOL_NAMES, ToolDefinition, select_tools

__all__ = [
    "TOOL_DEFINITIONS",
    "TOOL_NAMES",
    "HiPayMCPServer",
    "TextContent",
    "ToolCallResponse",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolHints",
    "create_text_response",
    "describe_failure",
    "select_tools",
]
