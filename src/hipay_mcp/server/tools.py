"""Tool registry — the fixed set of HiPay operations exposed over MCP.

Each :class:`ToolDefinition` pairs a dotted tool name with the pydantic model
its arguments must satisfy and the coroutine that forwards the validated
arguments to :class:`~hipay_mcp.sdk.client.HiPayClient`.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from hipay_mcp.sdk.models import HostedPaymentPageRequest, MaintenanceRequest
from hipay_mcp.server.models import ToolHints

if TYPE_CHECKING:
    from hipay_mcp.sdk.client import HiPayClient

ToolHandler = Callable[["HiPayClient", Any], Awaitable[Any]]

# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------


class _ToolArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GetTransactionArgs(_ToolArgs):
    transaction_id: str = Field(
        alias="transactionId", description="The ID of the transaction to get"
    )


class GetTransactionsByOrderArgs(_ToolArgs):
    order_id: str = Field(alias="orderId", description="The order ID to get transactions for")


class UpdateTransactionArgs(_ToolArgs):
    transaction_reference: str = Field(
        alias="transactionReference", description="The transaction reference to update"
    )
    maintenance_request: MaintenanceRequest = Field(
        alias="maintenanceRequest",
        description="The maintenance request object (operation, amount, etc.)",
    )


class CreateHostedPaymentPageArgs(_ToolArgs):
    page_request: HostedPaymentPageRequest = Field(
        alias="pageRequest", description="The hosted payment page request object"
    )
    legacy: bool = Field(default=False, description="Use legacy payment page")
    data_id: str | None = Field(
        default=None,
        alias="dataId",
        description="Custom dataId to use in call to Data API",
    )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _get_transaction(client: HiPayClient, args: GetTransactionArgs) -> Any:
    return await client.get_transaction(args.transaction_id)


async def _get_transaction_v1(client: HiPayClient, args: GetTransactionArgs) -> Any:
    return await client.get_transaction_v1(args.transaction_id)


async def _get_transactions_by_order(
    client: HiPayClient, args: GetTransactionsByOrderArgs
) -> Any:
    return await client.get_transactions_by_order(args.order_id)


async def _update_transaction(client: HiPayClient, args: UpdateTransactionArgs) -> Any:
    # Only forward what the caller actually sent
    maintenance_request = args.maintenance_request.model_dump(exclude_unset=True)
    return await client.update_transaction(maintenance_request, args.transaction_reference)


async def _create_hosted_payment_page(
    client: HiPayClient, args: CreateHostedPaymentPageArgs
) -> Any:
    page_request = args.page_request.model_dump(exclude_unset=True)
    return await client.create_hosted_payment_page(
        page_request,
        legacy=args.legacy,
        data_id=args.data_id,
    )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ToolDefinition:
    """A registered tool: name, schema, handler and behaviour hints."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler
    hints: ToolHints

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema of the tool arguments, keyed by their wire names."""
        return self.input_model.model_json_schema(by_alias=True)

    def validate_arguments(self, arguments: dict[str, Any] | None) -> BaseModel:
        """Validate raw call arguments; raises ``pydantic.ValidationError``."""
        return self.input_model.model_validate(arguments or {})


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="transactions.get",
        description="""
Get a transaction by ID (V3 API) using HiPay

Uses 1 parameter:
- transactionId (string, required): Transaction ID""",
        input_model=GetTransactionArgs,
        handler=_get_transaction,
        hints=ToolHints(
            title="Get transaction",
            read_only=True,
            destructive=False,
            idempotent=True,
        ),
    ),
    ToolDefinition(
        name="transactions.getV1",
        description="""
Get a transaction by ID (V1 API) using HiPay

Uses 1 parameter:
- transactionId (string, required): Transaction ID""",
        input_model=GetTransactionArgs,
        handler=_get_transaction_v1,
        hints=ToolHints(
            title="Get transaction (V1)",
            read_only=True,
            destructive=False,
            idempotent=True,
        ),
    ),
    ToolDefinition(
        name="transactions.getByOrder",
        description="""
Get all transactions for an order using HiPay

Uses 1 parameter:
- orderId (string, required): Order ID""",
        input_model=GetTransactionsByOrderArgs,
        handler=_get_transactions_by_order,
        hints=ToolHints(
            title="Get transactions by order",
            read_only=True,
            destructive=False,
            idempotent=True,
        ),
    ),
    ToolDefinition(
        name="transactions.update",
        description="""
Update a transaction (capture, refund, accept, etc.) using HiPay

Uses 2 parameters:
- transactionReference (string, required): Transaction reference
- maintenanceRequest (object, required): Maintenance request object with fields:
  - operation (enum, required): Operation type (capture, refund, cancel, acceptChallenge, denyChallenge, finalize)
  - currency (string, optional): Base currency (ISO 4217)
  - amount (string, optional): Amount for partial operations
  - operation_id (string, optional): Operation merchant ID
  - basket (string, optional): Shopping cart details (JSON string)
  - sub_transaction_reference (string, optional): Subtransaction reference for refunds
  - source (string, optional): Transaction origin identifier""",
        input_model=UpdateTransactionArgs,
        handler=_update_transaction,
        hints=ToolHints(
            title="Update transaction",
            read_only=False,
            destructive=True,
            idempotent=False,
        ),
    ),
    ToolDefinition(
        name="hostedPaymentPages.create",
        description="""Create a hosted payment page using HiPay

Uses 3 parameters:
- pageRequest (object, required): Hosted payment page request object with fields:
  - orderid (string, required): Unique order ID
  - description (string, required): Order short description
  - currency (string, required): Base currency (ISO 4217)
  - amount (number, required): Total order amount
  - payment_product (string, optional): Payment method for checkout
  - email (string, optional): Customer email address
  - phone (string, optional): Customer phone number
  - accept_url (string, optional): URL after successful payment
  - decline_url (string, optional): URL after declined payment
  - pending_url (string, optional): URL when payment is pending
  - exception_url (string, optional): URL after system failure
  - cancel_url (string, optional): URL after cancellation
  - notify_url (string, optional): Override notification URL
  - basket (string, optional): Shopping cart details (JSON string)
  - custom_data (string, optional): Custom data (JSON string)
  - language (string, optional): Locale code of customer
- legacy (boolean, optional): Use legacy payment page
- dataId (string, optional): Custom dataId for Data API""",
        input_model=CreateHostedPaymentPageArgs,
        handler=_create_hosted_payment_page,
        hints=ToolHints(
            title="Create hosted payment page",
            read_only=False,
            destructive=False,
            idempotent=False,
        ),
    ),
)

TOOL_NAMES: tuple[str, ...] = tuple(d.name for d in TOOL_DEFINITIONS)

if len(set(TOOL_NAMES)) != len(TOOL_NAMES):
    msg = f"Duplicate tool names in registry: {TOOL_NAMES}"
    raise RuntimeError(msg)


def select_tools(enabled_tools: list[str] | None = None) -> list[ToolDefinition]:
    """Return the registry entries to expose, in registry order.

    An empty selection or one containing ``"all"`` exposes everything.
    Names that are not in the registry are ignored.
    """
    if not enabled_tools or "all" in enabled_tools:
        return list(TOOL_DEFINITIONS)
    wanted = set(enabled_tools)
    return [d for d in TOOL_DEFINITIONS if d.name in wanted]
