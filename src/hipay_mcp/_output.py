"""Shared CLI output formatters.

Everything goes to stderr: stdout belongs to the stdio transport.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hipay_mcp.server.tools import ToolDefinition

console = Console(stderr=True)


def print_error(title: str, detail: object) -> None:
    """Print a startup failure in the operator's terminal."""
    console.print(f"\n[red]{title}[/red]\n")
    console.print(f"   [yellow]{escape(str(detail))}[/yellow]\n")


def print_tools_table(definitions: Iterable[ToolDefinition]) -> None:
    """Pretty-print the tool registry as a table."""
    table = Table(title="HiPay Tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Hints")
    table.add_column("Description")

    for definition in definitions:
        table.add_row(
            definition.name,
            definition.hints.title,
            _format_hints(definition),
            _truncate(" ".join(definition.description.split())),
        )

    console.print(table)


def _format_hints(definition: ToolDefinition) -> str:
    hints = definition.hints
    flags = []
    if hints.read_only:
        flags.append("read-only")
    if hints.destructive:
        flags.append("destructive")
    if hints.idempotent:
        flags.append("idempotent")
    if hints.open_world:
        flags.append("open-world")
    return ", ".join(flags) or "-"


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
