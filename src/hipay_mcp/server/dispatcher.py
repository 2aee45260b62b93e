"""ToolDispatcher — validates, invokes and normalizes tool calls.

Every call answers with a :class:`ToolCallResponse`.  Handler and validation
failures are folded into an ``{"error": ..., "name": ...}`` payload carried by
the same envelope as a success, so they never surface as protocol faults.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from hipay_mcp.errors import ToolNotFoundError
from hipay_mcp.server.models import ToolCallResponse
from hipay_mcp.utils.telemetry import (
    ATTR_ERROR_NAME,
    ATTR_TOOL_NAME,
    ATTR_TOOL_OUTCOME,
    get_tracer,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hipay_mcp.sdk.client import HiPayClient
    from hipay_mcp.server.tools import ToolDefinition

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

UNKNOWN_ERROR = "Unknown error"
DEFAULT_ERROR_NAME = "Error"


def create_text_response(data: Any) -> ToolCallResponse:
    """Serialize *data* as indented JSON inside a single text content part."""
    return ToolCallResponse.from_text(json.dumps(data, indent=2, default=str))


def describe_failure(failure: object) -> dict[str, str]:
    """Reduce any failure value to an ``{"error", "name"}`` payload.

    Three shapes are recognised, checked in this order:

    * an exception: its message and class name.  The bare ``Exception``
      class carries no information beyond "something failed" and reports
      the generic ``"Error"`` name;
    * a string: the string itself, named ``"Error"``;
    * anything else, including mappings that happen to hold ``name`` or
      ``message`` keys: ``"Unknown error"``, named ``"Error"``.
    """
    if isinstance(failure, BaseException):
        name = type(failure).__name__
        if type(failure) is Exception:
            name = DEFAULT_ERROR_NAME
        return {"error": str(failure) or UNKNOWN_ERROR, "name": name}
    if isinstance(failure, str):
        return {"error": failure or UNKNOWN_ERROR, "name": DEFAULT_ERROR_NAME}
    return {"error": UNKNOWN_ERROR, "name": DEFAULT_ERROR_NAME}


class ToolDispatcher:
    """Routes tool calls by name to their :class:`ToolDefinition`.

    Usage::

        dispatcher = ToolDispatcher(client, select_tools(["transactions.get"]))
        response = await dispatcher.dispatch("transactions.get", {"transactionId": "123"})
        print(response.text)
    """

    def __init__(self, client: HiPayClient, definitions: Iterable[ToolDefinition]) -> None:
        self._client = client
        self._definitions: dict[str, ToolDefinition] = {}
        for definition in definitions:
            if definition.name in self._definitions:
                msg = f"Tool registered twice: {definition.name}"
                raise ValueError(msg)
            self._definitions[definition.name] = definition

    @property
    def client(self) -> HiPayClient:
        return self._client

    def definitions(self) -> list[ToolDefinition]:
        """Registered definitions, in registration order."""
        return list(self._definitions.values())

    def get(self, name: str) -> ToolDefinition:
        definition = self._definitions.get(name)
        if definition is None:
            raise ToolNotFoundError(name)
        return definition

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> ToolCallResponse:
        """Validate *arguments*, run the tool and wrap the outcome."""
        definition = self.get(name)

        with _tracer.start_as_current_span("tool.dispatch") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            logger.debug("Dispatching tool %s", name)
            try:
                args = definition.validate_arguments(arguments)
                result = await definition.handler(self._client, args)
            except Exception as exc:
                payload = describe_failure(exc)
                span.set_attribute(ATTR_TOOL_OUTCOME, "error")
                span.set_attribute(ATTR_ERROR_NAME, payload["name"])
                logger.warning("Tool %s failed: %s: %s", name, payload["name"], payload["error"])
                return create_text_response(payload)

            span.set_attribute(ATTR_TOOL_OUTCOME, "success")
            return create_text_response(result)
