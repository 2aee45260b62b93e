"""HiPayClient — async façade over the HiPay Enterprise REST API.

Covers the five calls the MCP tools need.  The client holds only the
credentials and the environment; every call opens its own
``httpx.AsyncClient``, so one instance is safe to share between concurrent
tool calls.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from hipay_mcp import __version__
from hipay_mcp.errors import HiPayApiError, HiPayConnectionError
from hipay_mcp.sdk.models import Environment
from hipay_mcp.utils.telemetry import (
    ATTR_ENVIRONMENT,
    ATTR_HTTP_ENDPOINT,
    ATTR_HTTP_METHOD,
    ATTR_HTTP_STATUS,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

# ---------------------------------------------------------------------------
# Hosts and endpoints
# ---------------------------------------------------------------------------

GATEWAY_URLS: dict[str, str] = {
    "stage": "https://stage-secure-gateway.hipay-tpp.com/rest/",
    "production": "https://secure-gateway.hipay-tpp.com/rest/",
}
API_GATEWAY_URLS: dict[str, str] = {
    "stage": "https://stage-api-gateway.hipay.com/",
    "production": "https://api-gateway.hipay.com/",
}
HPAYMENT_URLS: dict[str, str] = {
    "stage": "https://stage-api.hipay.com/",
    "production": "https://api.hipay.com/",
}

ENDPOINT_TRANSACTION_V3 = "v3/transaction/{transaction}"
ENDPOINT_TRANSACTION = "v1/transaction/{transaction}"
ENDPOINT_ORDER_TRANSACTIONS = "v1/transaction"
ENDPOINT_MAINTENANCE = "v1/maintenance/transaction/{transaction}"
ENDPOINT_HOSTED_PAYMENT_PAGE = "v2/hpayment"
ENDPOINT_HOSTED_PAYMENT_PAGE_LEGACY = "v1/hpayment"

DATA_ID_HEADER = "X-HIPAY-DATA-ID"
USER_AGENT = f"HiPayMCPServer/{__version__}"


class HiPayClient:
    """Calls the HiPay Enterprise API with HTTP Basic credentials.

    Usage::

        client = HiPayClient("api-user", "api-pass", "stage")
        transaction = await client.get_transaction("800000000001")
        page = await client.create_hosted_payment_page(
            {"orderid": "A-1", "description": "Mug", "currency": "EUR", "amount": 12.5}
        )
    """

    def __init__(self, username: str, password: str, environment: Environment = "stage") -> None:
        if environment not in GATEWAY_URLS:
            msg = f"Unknown HiPay environment: {environment!r}"
            raise ValueError(msg)
        self._username = username
        self._password = password
        self._environment = environment

    @property
    def environment(self) -> Environment:
        return self._environment

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def get_transaction(self, transaction_id: str) -> dict[str, Any] | None:
        """Fetch a transaction through the v3 API, or ``None`` if unknown."""
        url = self._url(API_GATEWAY_URLS, ENDPOINT_TRANSACTION_V3, transaction=transaction_id)
        data = await self._request("GET", url, not_found_ok=True)
        if not data:
            return None
        return data

    async def get_transaction_v1(self, transaction_id: str) -> dict[str, Any] | None:
        """Fetch a transaction through the v1 API, or ``None`` if unknown."""
        url = self._url(GATEWAY_URLS, ENDPOINT_TRANSACTION, transaction=transaction_id)
        data = await self._request("GET", url, not_found_ok=True)
        if not data:
            return None
        transaction = data.get("transaction", data)
        return transaction or None

    async def get_transactions_by_order(self, order_id: str) -> list[dict[str, Any]]:
        """List every transaction attached to *order_id*."""
        url = self._url(GATEWAY_URLS, ENDPOINT_ORDER_TRANSACTIONS)
        data = await self._request("GET", url, params={"orderid": order_id}, not_found_ok=True)
        if not data:
            return []
        transactions = data.get("transaction")
        if transactions is None:
            return []
        # A single match comes back as an object rather than a list
        if isinstance(transactions, dict):
            return [transactions]
        return list(transactions)

    async def update_transaction(
        self,
        maintenance_request: dict[str, Any],
        transaction_reference: str,
    ) -> dict[str, Any]:
        """Apply a maintenance operation (capture, refund...) to a transaction."""
        url = self._url(GATEWAY_URLS, ENDPOINT_MAINTENANCE, transaction=transaction_reference)
        data = await self._request("POST", url, form=maintenance_request)
        return data or {}

    # ------------------------------------------------------------------
    # Hosted payment pages
    # ------------------------------------------------------------------

    async def create_hosted_payment_page(
        self,
        page_request: dict[str, Any],
        *,
        legacy: bool = False,
        data_id: str | None = None,
    ) -> dict[str, Any]:
        """Create a hosted payment page for an order.

        The legacy page lives on the secure gateway and takes a form body;
        the current page lives on the HPayment API and takes JSON.
        """
        headers = {DATA_ID_HEADER: data_id} if data_id else None
        if legacy:
            url = self._url(GATEWAY_URLS, ENDPOINT_HOSTED_PAYMENT_PAGE_LEGACY)
            data = await self._request("POST", url, form=page_request, headers=headers)
        else:
            url = self._url(HPAYMENT_URLS, ENDPOINT_HOSTED_PAYMENT_PAGE)
            data = await self._request("POST", url, json_body=page_request, headers=headers)
        return data or {}

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _url(self, hosts: dict[str, str], endpoint: str, **path: str) -> str:
        return hosts[self._environment] + endpoint.format(**path)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        form: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        not_found_ok: bool = False,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Returns ``None`` for an empty body, or for a 404 when *not_found_ok*.
        """
        request_headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if headers:
            request_headers.update(headers)

        with _tracer.start_as_current_span("hipay.request") as span:
            span.set_attribute(ATTR_HTTP_METHOD, method)
            span.set_attribute(ATTR_HTTP_ENDPOINT, url)
            span.set_attribute(ATTR_ENVIRONMENT, self._environment)
            logger.debug("HiPay %s %s", method, url)

            try:
                async with httpx.AsyncClient(auth=(self._username, self._password)) as client:
                    response = await client.request(
                        method=method,
                        url=url,
                        params=params,
                        data=_form_fields(form) if form is not None else None,
                        json=json_body,
                        headers=request_headers,
                    )
            except httpx.HTTPError as exc:
                raise HiPayConnectionError(str(exc) or exc.__class__.__name__) from exc

            span.set_attribute(ATTR_HTTP_STATUS, response.status_code)

            if response.status_code == 404 and not_found_ok:
                return None
            if response.is_error:
                raise _api_error(response)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                msg = f"HiPay returned a non-JSON body (HTTP {response.status_code})"
                raise HiPayApiError(msg, status_code=response.status_code) from exc


def _form_fields(values: dict[str, Any]) -> dict[str, str]:
    """Flatten a request mapping into form fields, dropping unset values."""
    fields: dict[str, str] = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, bool):
            fields[key] = "1" if value else "0"
        else:
            fields[key] = str(value)
    return fields


def _api_error(response: httpx.Response) -> HiPayApiError:
    """Build an error from a HiPay error body (``code``/``message``/``description``)."""
    message = ""
    code: str | int | None = None
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        code = body.get("code")
        message = str(body.get("message") or body.get("description") or "")

    if not message:
        message = f"HiPay API error: HTTP {response.status_code}"
        if response.reason_phrase:
            message += f" {response.reason_phrase}"
    return HiPayApiError(message, status_code=response.status_code, code=code)
