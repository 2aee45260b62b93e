"""HiPay MCP CLI entrypoint."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from hipay_mcp import __version__
from hipay_mcp._output import console, print_error, print_tools_table

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="hipay-mcp")
@click.option(
    "--tools",
    default=None,
    help="Comma-separated tools to enable, or 'all'.",
)
@click.option("--username", default=None, help="HiPay API username (or HIPAY_USERNAME).")
@click.option("--password", default=None, help="HiPay API password (or HIPAY_PASSWORD).")
@click.option(
    "--environment",
    default=None,
    help="'stage' (default) or 'production' (or HIPAY_ENVIRONMENT).",
)
@click.option("--list-tools", is_flag=True, help="Print the available tools and exit.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (overrides --verbose).",
)
@click.option("--telemetry", is_flag=True, help="Export trace spans to stderr.")
@click.option("--otlp-endpoint", default=None, help="Export trace spans via OTLP/gRPC.")
def main(
    tools: str | None,
    username: str | None,
    password: str | None,
    environment: str | None,
    list_tools: bool,
    verbose: bool,
    log_level: str | None,
    telemetry: bool,
    otlp_endpoint: str | None,
) -> None:
    """Serve HiPay payment operations as MCP tools over stdio."""
    from hipay_mcp.config import load_options
    from hipay_mcp.errors import ConfigurationError
    from hipay_mcp.server.app import HiPayMCPServer
    from hipay_mcp.server.tools import TOOL_DEFINITIONS

    _configure_logging(log_level or ("DEBUG" if verbose else "WARNING"))

    if list_tools:
        print_tools_table(TOOL_DEFINITIONS)
        return

    try:
        options = load_options(
            tools=tools,
            username=username,
            password=password,
            environment=environment,
        )
    except ConfigurationError as exc:
        print_error("Error initializing HiPay MCP server:", exc)
        sys.exit(1)

    if telemetry or otlp_endpoint:
        from hipay_mcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(console=telemetry, otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            print_error("Error initializing telemetry:", exc)
            sys.exit(1)

    server = HiPayMCPServer(
        username=options.username,
        password=options.password,
        environment=options.environment,
        enabled_tools=options.tools,
    )
    console.print("[green]HiPay MCP Server running on stdio[/green]")

    try:
        asyncio.run(server.run_stdio())
    except Exception as exc:
        console.print(f"[red]Server error:[/red] {exc}")
        sys.exit(1)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )


if __name__ == "__main__":
    main()
