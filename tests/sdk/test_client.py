"""Tests for HiPayClient with a mocked httpx client."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from hipay_mcp.errors import HiPayApiError, HiPayConnectionError
from hipay_mcp.sdk.client import DATA_ID_HEADER, USER_AGENT, HiPayClient


def _response(status_code: int = 200, body: Any = None, text: str | None = None) -> httpx.Response:
    if text is not None:
        return httpx.Response(status_code, text=text)
    if body is None:
        return httpx.Response(status_code)
    return httpx.Response(status_code, json=body)


def _mock_http(
    response: httpx.Response | None = None,
    side_effect: BaseException | None = None,
) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.request = AsyncMock(return_value=response, side_effect=side_effect)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    return mock_client


_PATCH_TARGET = "hipay_mcp.sdk.client.httpx.AsyncClient"


class TestHiPayClientInit:
    def test_default_environment_is_stage(self) -> None:
        assert HiPayClient("u", "p").environment == "stage"

    def test_unknown_environment_raises(self) -> None:
        with pytest.raises(ValueError, match="dev"):
            HiPayClient("u", "p", "dev")  # type: ignore[arg-type]

    async def test_uses_basic_auth_and_headers(self) -> None:
        mock_client = _mock_http(_response(body={"id": "1"}))
        client = HiPayClient("api-user", "api-pass", "stage")
        with patch(_PATCH_TARGET, return_value=mock_client) as mock_cls:
            await client.get_transaction("1")

        assert mock_cls.call_args.kwargs["auth"] == ("api-user", "api-pass")
        headers = mock_client.request.call_args.kwargs["headers"]
        assert headers["Accept"] == "application/json"
        assert headers["User-Agent"] == USER_AGENT


class TestGetTransaction:
    async def test_v3_request(self) -> None:
        mock_client = _mock_http(_response(body={"id": "abc123", "amount": 100}))
        client = HiPayClient("u", "p", "stage")
        with patch(_PATCH_TARGET, return_value=mock_client):
            result = await client.get_transaction("abc123")

        assert result == {"id": "abc123", "amount": 100}
        kwargs = mock_client.request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "https://stage-api-gateway.hipay.com/v3/transaction/abc123"

    async def test_production_host(self) -> None:
        mock_client = _mock_http(_response(body={"id": "abc123"}))
        client = HiPayClient("u", "p", "production")
        with patch(_PATCH_TARGET, return_value=mock_client):
            await client.get_transaction("abc123")

        url = mock_client.request.call_args.kwargs["url"]
        assert url == "https://api-gateway.hipay.com/v3/transaction/abc123"

    async def test_not_found_returns_none(self) -> None:
        mock_client = _mock_http(_response(status_code=404))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            assert await client.get_transaction("missing") is None

    async def test_empty_body_returns_none(self) -> None:
        mock_client = _mock_http(_response(status_code=200))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            assert await client.get_transaction("missing") is None


class TestGetTransactionV1:
    async def test_unwraps_transaction(self) -> None:
        body = {"transaction": {"transactionReference": "800000000001", "state": "completed"}}
        mock_client = _mock_http(_response(body=body))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            result = await client.get_transaction_v1("800000000001")

        assert result == body["transaction"]
        url = mock_client.request.call_args.kwargs["url"]
        assert url == "https://stage-secure-gateway.hipay-tpp.com/rest/v1/transaction/800000000001"

    async def test_not_found_returns_none(self) -> None:
        mock_client = _mock_http(_response(status_code=404))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            assert await client.get_transaction_v1("missing") is None


class TestGetTransactionsByOrder:
    async def test_list_response(self) -> None:
        body = {"transaction": [{"id": "tx_1"}, {"id": "tx_2"}]}
        mock_client = _mock_http(_response(body=body))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            result = await client.get_transactions_by_order("order_1")

        assert result == [{"id": "tx_1"}, {"id": "tx_2"}]
        kwargs = mock_client.request.call_args.kwargs
        assert kwargs["url"] == "https://stage-secure-gateway.hipay-tpp.com/rest/v1/transaction"
        assert kwargs["params"] == {"orderid": "order_1"}

    async def test_single_object_becomes_list(self) -> None:
        mock_client = _mock_http(_response(body={"transaction": {"id": "tx_1"}}))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            assert await client.get_transactions_by_order("order_1") == [{"id": "tx_1"}]

    async def test_no_transactions(self) -> None:
        mock_client = _mock_http(_response(status_code=404))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            assert await client.get_transactions_by_order("order_1") == []


class TestUpdateTransaction:
    async def test_posts_form(self) -> None:
        mock_client = _mock_http(_response(body={"operation": "capture", "status": "118"}))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            result = await client.update_transaction(
                {"operation": "capture", "amount": "50.00", "source": None},
                "tx_ref_123",
            )

        assert result == {"operation": "capture", "status": "118"}
        kwargs = mock_client.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == (
            "https://stage-secure-gateway.hipay-tpp.com/rest/v1/maintenance/transaction/tx_ref_123"
        )
        assert kwargs["data"] == {"operation": "capture", "amount": "50.00"}
        assert kwargs["json"] is None


class TestCreateHostedPaymentPage:
    _PAGE = {"orderid": "A-1", "description": "Mug", "currency": "EUR", "amount": 12.5}

    async def test_default_page_posts_json(self) -> None:
        mock_client = _mock_http(_response(body={"forwardUrl": "https://pay.example"}))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            result = await client.create_hosted_payment_page(dict(self._PAGE))

        assert result == {"forwardUrl": "https://pay.example"}
        kwargs = mock_client.request.call_args.kwargs
        assert kwargs["url"] == "https://stage-api.hipay.com/v2/hpayment"
        assert kwargs["json"] == self._PAGE
        assert kwargs["data"] is None
        assert DATA_ID_HEADER not in kwargs["headers"]

    async def test_legacy_page_posts_form(self) -> None:
        mock_client = _mock_http(_response(body={"forwardUrl": "https://pay.example"}))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            await client.create_hosted_payment_page(dict(self._PAGE), legacy=True)

        kwargs = mock_client.request.call_args.kwargs
        assert kwargs["url"] == "https://stage-secure-gateway.hipay-tpp.com/rest/v1/hpayment"
        assert kwargs["data"]["amount"] == "12.5"
        assert kwargs["json"] is None

    async def test_data_id_header(self) -> None:
        mock_client = _mock_http(_response(body={}))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            await client.create_hosted_payment_page(dict(self._PAGE), data_id="data-42")

        headers = mock_client.request.call_args.kwargs["headers"]
        assert headers[DATA_ID_HEADER] == "data-42"


class TestErrors:
    async def test_api_error_body(self) -> None:
        body = {"code": 3000002, "message": "Transaction not found", "description": "..."}
        mock_client = _mock_http(_response(status_code=400, body=body))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            with pytest.raises(HiPayApiError, match="Transaction not found") as exc_info:
                await client.update_transaction({"operation": "capture"}, "tx")

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == 3000002

    async def test_description_used_without_message(self) -> None:
        body = {"code": 1, "description": "Insufficient permissions"}
        mock_client = _mock_http(_response(status_code=403, body=body))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            with pytest.raises(HiPayApiError, match="Insufficient permissions"):
                await client.get_transaction("tx")

    async def test_non_json_error(self) -> None:
        mock_client = _mock_http(_response(status_code=502, text="<html>Bad Gateway</html>"))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            with pytest.raises(HiPayApiError, match="HTTP 502") as exc_info:
                await client.get_transaction("tx")

        assert exc_info.value.status_code == 502

    async def test_unauthorized_is_not_treated_as_missing(self) -> None:
        mock_client = _mock_http(_response(status_code=401, body={"message": "Bad credentials"}))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            with pytest.raises(HiPayApiError, match="Bad credentials"):
                await client.get_transaction_v1("tx")

    async def test_success_with_non_json_body(self) -> None:
        mock_client = _mock_http(_response(status_code=200, text="OK"))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            with pytest.raises(HiPayApiError, match="non-JSON"):
                await client.get_transaction("tx")

    async def test_connection_error(self) -> None:
        mock_client = _mock_http(side_effect=httpx.ConnectError("connection refused"))
        client = HiPayClient("u", "p")
        with patch(_PATCH_TARGET, return_value=mock_client):
            with pytest.raises(HiPayConnectionError, match="connection refused"):
                await client.get_transaction("tx")
