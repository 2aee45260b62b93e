"""Shared error types for the HiPay MCP server."""


class HiPayMCPError(Exception):
    """Base error for all server failures."""


class ConfigurationError(HiPayMCPError):
    """Startup configuration is missing or invalid."""


class ToolNotFoundError(HiPayMCPError):
    """Requested tool is not registered on this server."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class HiPayError(HiPayMCPError):
    """Base error for failures reported by, or on the way to, the HiPay API."""


class HiPayApiError(HiPayError):
    """The HiPay API answered with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | int | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class HiPayConnectionError(HiPayError):
    """The request never got an answer from HiPay (DNS, TLS, timeout...)."""
