"""HiPay Enterprise API client used by the MCP tools."""

from hipay_mcp.sdk.client import HiPayClient
from hipay_mcp.sdk.models import (
    MAINTENANCE_OPERATIONS,
    Environment,
    HostedPaymentPageRequest,
    MaintenanceRequest,
)

__all__ = [
    "MAINTENANCE_OPERATIONS",
    "Environment",
    "HiPayClient",
    "HostedPaymentPageRequest",
    "MaintenanceRequest",
]
