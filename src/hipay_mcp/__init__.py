"""HiPay MCP — the HiPay Enterprise payment API as Model Context Protocol tools."""

from __future__ import annotations

__version__ = "0.1.0"
