"""Response envelope and tool metadata models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class ToolHints(BaseModel):
    """Behaviour hints advertised to MCP clients for a tool."""

    model_config = ConfigDict(frozen=True)

    title: str
    read_only: bool = False
    destructive: bool = False
    idempotent: bool = False
    open_world: bool = True


class TextContent(BaseModel):
    """Plain text content part."""

    type: Literal["text"] = "text"
    text: str


class ToolCallResponse(BaseModel):
    """The envelope every tool call answers with, success or failure."""

    content: list[TextContent] = []

    @classmethod
    def from_text(cls, text: str) -> ToolCallResponse:
        """Create a response with a single text content part."""
        return cls(content=[TextContent(text=text)])

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.content)
