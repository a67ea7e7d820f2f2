"""
Tests for the Business Central API client.
"""

import asyncio
import json
from decimal import Decimal

import httpx
import pytest
from pydantic import SecretStr

from mdf_cpq.config.settings import BusinessCentralSettings
from mdf_cpq.models.business_central import SalesQuoteLine, SalesQuoteRequest
from mdf_cpq.services.business_central import (
    ApiError,
    ApiErrorKind,
    BusinessCentralClient,
    BusinessCentralConfig,
    ClientConfigurationError,
    create_client_from_settings,
)

from conftest import API_ROOT, BASE_URL, COMPANY_ID, json_response


class TestConfiguration:
    """Tests for client configuration."""

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"base_url": ""}, "base_url"),
            ({"company_id": ""}, "company_id"),
            ({"access_token": None, "api_key": None}, "access_token or api_key"),
            ({"timeout_ms": 0}, "timeout_ms"),
            ({"max_retries": 0}, "max_retries"),
        ],
    )
    def test_invalid_configuration(self, overrides, message):
        values = {"base_url": BASE_URL, "company_id": COMPANY_ID, "access_token": "t"}
        values.update(overrides)

        with pytest.raises(ClientConfigurationError, match=message):
            BusinessCentralClient(BusinessCentralConfig(**values))

    def test_base_path(self, client_config):
        client_config.base_url = f"{BASE_URL}/"
        client = BusinessCentralClient(client_config)

        assert client.base_path == API_ROOT
        assert client.build_url("items") == f"{API_ROOT}/items"
        assert client.build_url("/items") == f"{API_ROOT}/items"

    def test_from_settings(self):
        bc_settings = BusinessCentralSettings(
            base_url=BASE_URL,
            company_id=COMPANY_ID,
            api_key=SecretStr("key-1"),
            max_retries=5,
        )

        client = create_client_from_settings(bc_settings)

        assert client.config.api_key == "key-1"
        assert client.config.access_token is None
        assert client.config.max_retries == 5

    def test_from_incomplete_settings(self):
        with pytest.raises(ClientConfigurationError):
            create_client_from_settings(BusinessCentralSettings(base_url=None, company_id=None))


class TestRequests:
    """Tests for successful requests."""

    @pytest.mark.asyncio
    async def test_get_sends_auth_and_params(self, make_client):
        client = make_client(lambda request: json_response(200, {"value": []}))

        result = await client.get("/items", params={"$filter": "number eq 'P101'"})

        request = client.requests[0]
        assert result == {"value": []}
        assert request.method == "GET"
        assert request.url.path == "/api/v2.0/companies(company-1)/items"
        assert request.url.params["$filter"] == "number eq 'P101'"
        assert request.headers["Authorization"] == "Bearer test-token"
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_api_key_when_no_token(self, make_client, client_config):
        client_config.access_token = None
        client_config.api_key = "key-1"
        client = make_client(lambda request: json_response(200, {}), config=client_config)

        await client.get("/items")

        assert client.requests[0].headers["Authorization"] == "Bearer key-1"

    @pytest.mark.asyncio
    async def test_rotated_token(self, make_client):
        client = make_client(lambda request: json_response(200, {}))

        client.update_access_token("new-token")
        await client.get("/items")

        assert client.requests[0].headers["Authorization"] == "Bearer new-token"

    @pytest.mark.asyncio
    async def test_custom_headers(self, make_client):
        client = make_client(lambda request: json_response(200, {}))

        await client.get("/items", headers={"If-Match": "*"})

        assert client.requests[0].headers["If-Match"] == "*"

    @pytest.mark.asyncio
    async def test_post_serializes_models_with_camel_case(self, make_client):
        client = make_client(lambda request: json_response(201, {"id": "q1"}))
        body = SalesQuoteRequest(
            customer_number="C-100",
            currency_code="EUR",
            sales_quote_lines=[
                SalesQuoteLine(
                    line_number=1,
                    item_number="P101(07)",
                    description="Board",
                    quantity=5,
                    unit_price=Decimal("83.00"),
                    line_amount=Decimal("415.00"),
                    currency_code="EUR",
                )
            ],
        )

        result = await client.post("/salesQuotes", body)

        request = client.requests[0]
        payload = json.loads(request.content)
        assert result == {"id": "q1"}
        assert request.headers["Content-Type"] == "application/json"
        assert payload["customerNumber"] == "C-100"
        assert payload["salesQuoteLines"][0]["unitPrice"] == 83.0
        assert payload["salesQuoteLines"][0]["lineAmount"] == 415.0
        assert "externalDocumentNumber" not in payload

    @pytest.mark.asyncio
    async def test_verbs(self, make_client):
        client = make_client(lambda request: json_response(200, {"ok": True}))

        await client.patch("/items(1)", {"a": 1})
        await client.put("/items(1)", {"a": 2})
        await client.delete("/items(1)")

        assert [request.method for request in client.requests] == ["PATCH", "PUT", "DELETE"]
        assert "Content-Type" not in client.requests[2].headers

    @pytest.mark.asyncio
    async def test_empty_body_returns_empty_dict(self, make_client):
        client = make_client(lambda request: httpx.Response(204))

        assert await client.delete("/items(1)") == {}

    @pytest.mark.asyncio
    async def test_non_json_body_returns_empty_dict(self, make_client):
        client = make_client(lambda request: httpx.Response(200, text="ok"))

        assert await client.get("/items") == {}

    @pytest.mark.asyncio
    async def test_malformed_json(self, make_client):
        client = make_client(
            lambda request: httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})
        )

        with pytest.raises(ApiError) as exc_info:
            await client.get("/items")

        assert exc_info.value.kind == ApiErrorKind.UNKNOWN

    @pytest.mark.asyncio
    async def test_async_context_manager(self, client_config):
        transport = httpx.MockTransport(lambda request: json_response(200, {"value": []}))

        async with BusinessCentralClient(client_config, transport=transport) as client:
            assert await client.get("/items") == {"value": []}

        assert client._http.is_closed


class TestRetries:
    """Tests for retry behavior."""

    @pytest.mark.asyncio
    async def test_server_error_retried_with_backoff(self, make_client, recording_sleep):
        """Test three attempts on 503 with 200 ms and 400 ms waits."""
        client = make_client(lambda request: json_response(503, {"error": {"message": "down"}}))

        with pytest.raises(ApiError) as exc_info:
            await client.get("/items")

        assert len(client.requests) == 3
        assert recording_sleep.delays == [0.2, 0.4]
        assert exc_info.value.kind == ApiErrorKind.SERVER_ERROR
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self, make_client, recording_sleep):
        responses = iter([json_response(500), json_response(429), json_response(200, {"value": [1]})])
        client = make_client(lambda request: next(responses))

        result = await client.get("/items")

        assert result == {"value": [1]}
        assert len(client.requests) == 3
        assert recording_sleep.delays == [0.2, 0.4]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, kind",
        [
            (400, ApiErrorKind.BAD_REQUEST),
            (401, ApiErrorKind.AUTHENTICATION_FAILED),
            (403, ApiErrorKind.AUTHORIZATION_FAILED),
            (404, ApiErrorKind.NOT_FOUND),
        ],
    )
    async def test_client_errors_not_retried(self, make_client, recording_sleep, status_code, kind):
        client = make_client(lambda request: json_response(status_code, {"error": {"message": "no"}}))

        with pytest.raises(ApiError) as exc_info:
            await client.get("/items")

        assert len(client.requests) == 1
        assert recording_sleep.delays == []
        assert exc_info.value.kind == kind

    @pytest.mark.asyncio
    async def test_retry_disabled(self, make_client, client_config, recording_sleep):
        client_config.enable_retry = False
        client = make_client(lambda request: json_response(503), config=client_config)

        with pytest.raises(ApiError):
            await client.get("/items")

        assert len(client.requests) == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_network_error_retried(self, make_client, recording_sleep):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(ApiError) as exc_info:
            await client.get("/items")

        assert exc_info.value.kind == ApiErrorKind.NETWORK_ERROR
        assert len(client.requests) == 3
        assert recording_sleep.delays == [0.2, 0.4]

    @pytest.mark.asyncio
    async def test_transport_timeout(self, make_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(ApiError) as exc_info:
            await client.get("/items")

        assert exc_info.value.kind == ApiErrorKind.TIMEOUT
        assert exc_info.value.message == "Request timeout"
        assert len(client.requests) == 3

    @pytest.mark.asyncio
    async def test_deadline_cancels_attempt(self, make_client):
        """Test an attempt running past its deadline is cancelled and classified."""
        async def slow_handler(request):
            await asyncio.sleep(5)
            return json_response(200, {})

        client = make_client(slow_handler)

        with pytest.raises(ApiError) as exc_info:
            await client.request("GET", "/items", timeout_ms=10)

        assert exc_info.value.kind == ApiErrorKind.TIMEOUT
        assert len(client.requests) == 3
