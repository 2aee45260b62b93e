"""Startup configuration — tool selection, credentials and environment.

Command-line values take precedence over the ``HIPAY_*`` environment
variables.  Every problem is reported as a :class:`ConfigurationError` before
any transport is bound.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from hipay_mcp.errors import ConfigurationError
from hipay_mcp.sdk.models import Environment
from hipay_mcp.server.tools import TOOL_NAMES

ENV_USERNAME = "HIPAY_USERNAME"
ENV_PASSWORD = "HIPAY_PASSWORD"
ENV_ENVIRONMENT = "HIPAY_ENVIRONMENT"

ENVIRONMENTS: tuple[str, ...] = ("stage", "production")
ACCEPTED_TOOLS: tuple[str, ...] = ("all", *TOOL_NAMES)


class ServerOptions(BaseModel):
    """Validated options the server is started with."""

    model_config = ConfigDict(frozen=True)

    tools: list[str]
    username: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)
    environment: Environment = "stage"


def parse_tools(value: str | None) -> list[str]:
    """Split and validate a comma-separated ``--tools`` value."""
    if value is None:
        raise ConfigurationError("The --tools arguments must be provided.")

    tools = [entry.strip() for entry in value.split(",")]
    for tool in tools:
        if tool not in ACCEPTED_TOOLS:
            msg = f"Invalid tool: {tool}. Accepted tools are: {', '.join(ACCEPTED_TOOLS)}"
            raise ConfigurationError(msg)
    return tools


def load_options(
    *,
    tools: str | None,
    username: str | None = None,
    password: str | None = None,
    environment: str | None = None,
    env: Mapping[str, str] | None = None,
) -> ServerOptions:
    """Resolve server options from command-line values and the environment.

    Raises:
        ConfigurationError: If ``--tools`` is missing or names an unknown tool,
            if credentials are found in neither source, or if the environment
            is not ``stage`` or ``production``.
    """
    source = os.environ if env is None else env
    selected = parse_tools(tools)

    resolved_username = username or source.get(ENV_USERNAME)
    if not resolved_username:
        msg = (
            "Username not provided. Please either pass it as an argument "
            f"--username=$USERNAME or set the {ENV_USERNAME} environment variable."
        )
        raise ConfigurationError(msg)

    resolved_password = password or source.get(ENV_PASSWORD)
    if not resolved_password:
        msg = (
            "Password not provided. Please either pass it as an argument "
            f"--password=$PASSWORD or set the {ENV_PASSWORD} environment variable."
        )
        raise ConfigurationError(msg)

    resolved_environment = environment or source.get(ENV_ENVIRONMENT) or "stage"
    if resolved_environment not in ENVIRONMENTS:
        msg = (
            "Invalid environment. Please either pass it as an argument "
            "--environment=stage or --environment=production."
        )
        raise ConfigurationError(msg)

    return ServerOptions(
        tools=selected,
        username=resolved_username,
        password=resolved_password,
        environment=resolved_environment,  # type: ignore[arg-type]
    )
