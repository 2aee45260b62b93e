"""Request models for the HiPay Enterprise API.

Field sets follow the HiPay OpenAPI definitions for the maintenance and
hosted payment page endpoints.  Only the fields the server validates are
declared; hosted payment page requests pass any extra field through.
"""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator

Environment = Literal["stage", "production"]

MaintenanceOperation = Literal[
    "capture",
    "refund",
    "cancel",
    "acceptChallenge",
    "denyChallenge",
    "finalize",
]

MAINTENANCE_OPERATIONS: tuple[str, ...] = get_args(MaintenanceOperation)

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_URL_PATTERN = r"^[A-Za-z][A-Za-z0-9+.-]*://\S+$"


class _HiPayRequest(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        # Optional fields may be omitted but never sent as null
        if value is None:
            msg = "must be omitted rather than null"
            raise ValueError(msg)
        return value


class MaintenanceRequest(_HiPayRequest):
    """A maintenance operation applied to an existing transaction."""

    operation: MaintenanceOperation = Field(
        description="The operation to perform on the transaction",
    )
    currency: str | None = Field(
        default=None, description="Base currency for this order (ISO 4217)"
    )
    amount: str | None = Field(
        default=None,
        description=(
            "Amount is required for partial maintenances. "
            "Do not specify amount for full captures or refunds"
        ),
    )
    operation_id: str | None = Field(default=None, description="Operation merchant ID")
    basket: str | None = Field(default=None, description="Shopping cart details (JSON string)")
    sub_transaction_reference: str | None = Field(
        default=None, description="Number of the subtransaction to be refunded"
    )
    source: str | None = Field(
        default=None, description="To identify the origin of the transaction"
    )


class HostedPaymentPageRequest(_HiPayRequest):
    """Order details used to build a HiPay hosted payment page."""

    model_config = ConfigDict(extra="allow")

    orderid: str = Field(description="Unique order ID")
    description: str = Field(description="The order short description")
    currency: str = Field(description="Base currency for this order (ISO 4217)")
    amount: StrictInt | StrictFloat = Field(description="Total order amount")
    payment_product: str | None = Field(
        default=None, description="The payment method used to proceed checkout"
    )
    email: str | None = Field(
        default=None, pattern=_EMAIL_PATTERN, description="Customer email address"
    )
    phone: str | None = Field(default=None, description="Customer phone number")
    accept_url: str | None = Field(
        default=None,
        pattern=_URL_PATTERN,
        description="URL to return customer after successful payment",
    )
    decline_url: str | None = Field(
        default=None,
        pattern=_URL_PATTERN,
        description="URL to return customer after declined payment",
    )
    pending_url: str | None = Field(
        default=None,
        pattern=_URL_PATTERN,
        description="URL to return customer when payment is pending",
    )
    exception_url: str | None = Field(
        default=None,
        pattern=_URL_PATTERN,
        description="URL to return customer after system failure",
    )
    cancel_url: str | None = Field(
        default=None,
        pattern=_URL_PATTERN,
        description="URL to return customer after cancellation",
    )
    notify_url: str | None = Field(
        default=None, pattern=_URL_PATTERN, description="Override notification URL"
    )
    basket: str | None = Field(default=None, description="Shopping cart details (JSON string)")
    custom_data: str | None = Field(default=None, description="Custom data (JSON string)")
    language: str | None = Field(default=None, description="Locale code of customer")
