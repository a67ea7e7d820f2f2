"""
Business Central API client.

Async HTTP client with authentication, per-attempt deadlines and
exponential-backoff retries. Every failure leaves this module as an
``ApiError``; domain services build on top of it.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx
from pydantic import BaseModel
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt

from mdf_cpq.config.settings import BusinessCentralSettings, settings
from mdf_cpq.services.business_central.errors import (
    ApiError,
    ApiErrorKind,
    ClientConfigurationError,
    classify,
)
from mdf_cpq.utils.logging import ServiceLogger

DEFAULT_API_VERSION = "v2.0"
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_BASE_MS = 100

Sleep = Callable[[float], Awaitable[Any]]


@dataclass
class BusinessCentralConfig:
    """
    Configuration for the Business Central API client.

    Either ``access_token`` or ``api_key`` must be set; both are sent
    as a bearer credential, the token taking precedence.
    """
    base_url: str
    company_id: str
    api_version: str = DEFAULT_API_VERSION
    access_token: str | None = None
    api_key: str | None = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    enable_retry: bool = True
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_base_ms: int = DEFAULT_BACKOFF_BASE_MS

    def validate(self) -> None:
        if not self.base_url:
            raise ClientConfigurationError("Business Central API base_url is required")
        if not self.company_id:
            raise ClientConfigurationError("Business Central API company_id is required")
        if not self.access_token and not self.api_key:
            raise ClientConfigurationError(
                "Either access_token or api_key must be provided for Business Central API authentication"
            )
        if self.timeout_ms <= 0:
            raise ClientConfigurationError("timeout_ms must be positive")
        if self.max_retries < 1:
            raise ClientConfigurationError("max_retries must be at least 1")

    @classmethod
    def from_settings(cls, bc_settings: BusinessCentralSettings) -> "BusinessCentralConfig":
        return cls(
            base_url=bc_settings.base_url or "",
            company_id=bc_settings.company_id or "",
            api_version=bc_settings.api_version,
            access_token=(
                bc_settings.access_token.get_secret_value() if bc_settings.access_token else None
            ),
            api_key=bc_settings.api_key.get_secret_value() if bc_settings.api_key else None,
            timeout_ms=bc_settings.timeout_ms,
            enable_retry=bc_settings.enable_retry,
            max_retries=bc_settings.max_retries,
            backoff_base_ms=bc_settings.backoff_base_ms,
        )


def _should_retry(error: BaseException) -> bool:
    return isinstance(error, ApiError) and error.is_retryable


class BusinessCentralClient:
    """
    Typed HTTP client for the Business Central API.

    Provides:
    - URL construction for ``{base}/api/{version}/companies({company})``
    - Bearer authentication and JSON content negotiation
    - A deadline per attempt (the in-flight call is cancelled on expiry)
    - Sequential retries for retryable errors with a
      ``2^attempt * backoff_base_ms`` delay
    """

    def __init__(
        self,
        config: BusinessCentralConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        config.validate()
        self.config = config
        self.logger = ServiceLogger("business_central.client")
        self._sleep = sleep
        self._http = httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(config.timeout_ms / 1000),
        )

    async def __aenter__(self) -> "BusinessCentralClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def update_access_token(self, token: str) -> None:
        self.config.access_token = token

    def update_api_key(self, key: str) -> None:
        self.config.api_key = key

    @property
    def base_path(self) -> str:
        base_url = self.config.base_url.rstrip("/")
        return f"{base_url}/api/{self.config.api_version}/companies({self.config.company_id})"

    def build_url(self, endpoint: str) -> str:
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{self.base_path}{endpoint}"

    async def get(self, endpoint: str, params: dict[str, str] | None = None, headers: dict[str, str] | None = None) -> Any:
        return await self.request("GET", endpoint, params=params, headers=headers)

    async def post(self, endpoint: str, body: Any, headers: dict[str, str] | None = None) -> Any:
        return await self.request("POST", endpoint, body=body, headers=headers)

    async def patch(self, endpoint: str, body: Any, headers: dict[str, str] | None = None) -> Any:
        return await self.request("PATCH", endpoint, body=body, headers=headers)

    async def put(self, endpoint: str, body: Any, headers: dict[str, str] | None = None) -> Any:
        return await self.request("PUT", endpoint, body=body, headers=headers)

    async def delete(self, endpoint: str, headers: dict[str, str] | None = None) -> Any:
        return await self.request("DELETE", endpoint, headers=headers)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        body: Any = None,
        headers: dict[str, str] | None = None,
        timeout_ms: int | None = None,
    ) -> Any:
        """
        Execute a request with retry logic.

        Returns the decoded JSON body, or an empty dict for responses
        without a JSON body.

        Raises:
            ApiError: classified failure once retries are exhausted or
                the failure is not retryable
        """
        url = self.build_url(endpoint)
        request_headers = self._build_headers(headers)
        timeout = (timeout_ms or self.config.timeout_ms) / 1000
        max_attempts = self.config.max_retries if self.config.enable_retry else 1

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=self._backoff,
            retry=retry_if_exception(_should_retry),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    result = await self._execute(method, url, request_headers, params, body, timeout)
        except ApiError as e:
            self.logger.log_api_failure("business_central_request", e, method=method, endpoint=endpoint)
            raise

        return result

    async def _execute(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        params: dict[str, str] | None,
        body: Any,
        timeout: float,
    ) -> Any:
        """Execute a single HTTP attempt under a deadline."""
        headers = dict(headers)
        payload = None
        if body is not None:
            payload = self._serialize(body)
            headers["Content-Type"] = "application/json"

        try:
            response = await asyncio.wait_for(
                self._http.request(method, url, headers=headers, params=params, json=payload),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.HTTPError, OSError) as e:
            raise classify(e) from e

        if not response.is_success:
            raise classify(response)

        content_type = response.headers.get("content-type", "")
        if not response.content or "application/json" not in content_type:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                ApiErrorKind.UNKNOWN,
                message="Business Central returned malformed JSON",
                status_code=response.status_code,
            ) from e

    def _backoff(self, retry_state: RetryCallState) -> float:
        # attempt_number is the attempt that just failed: 1 -> 200ms, 2 -> 400ms
        return (2 ** retry_state.attempt_number) * self.config.backoff_base_ms / 1000

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else None
        self.logger.log_retry(
            "business_central_request",
            attempt=retry_state.attempt_number,
            delay_s=delay,
            kind=error.kind if isinstance(error, ApiError) else None,
        )

    def _build_headers(self, custom_headers: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            **self._get_auth_headers(),
            "Accept": "application/json",
        }
        if custom_headers:
            headers.update(custom_headers)
        return headers

    def _get_auth_headers(self) -> dict[str, str]:
        credential = self.config.access_token or self.config.api_key
        return {"Authorization": f"Bearer {credential}"}

    @staticmethod
    def _serialize(body: Any) -> Any:
        if isinstance(body, BaseModel):
            return body.model_dump(mode="json", by_alias=True, exclude_none=True)
        return body


def create_client_from_settings(
    bc_settings: BusinessCentralSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> BusinessCentralClient:
    """
    Build a client from ``BC_*`` environment settings.

    Raises:
        ClientConfigurationError: if base URL, company or credentials are missing
    """
    bc_settings = bc_settings or settings.business_central
    return BusinessCentralClient(BusinessCentralConfig.from_settings(bc_settings), transport=transport)
