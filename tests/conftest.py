"""
Shared fixtures for the configurator tests.
"""

from decimal import Decimal

import httpx
import pytest

from mdf_cpq.models.configuration import CoatingSide, MdfConfiguration
from mdf_cpq.models.pricing import PriceResult
from mdf_cpq.services.business_central import BusinessCentralClient, BusinessCentralConfig

BASE_URL = "https://bc.example.com"
COMPANY_ID = "company-1"
API_ROOT = f"{BASE_URL}/api/v2.0/companies({COMPANY_ID})"


def make_configuration(**overrides) -> MdfConfiguration:
    """Build a valid configuration, 1000x500x18 mm, 5 pieces, top and bottom."""
    values = {
        "length_mm": 1000,
        "width_mm": 500,
        "height_mm": 18,
        "quantity": 5,
        "coating_sides": [CoatingSide.TOP, CoatingSide.BOTTOM],
    }
    values.update(overrides)
    return MdfConfiguration(**values)


def make_price(unit_price: str, quantity: int = 1, currency: str = "EUR") -> PriceResult:
    unit = Decimal(unit_price)
    return PriceResult(
        unit_price=unit,
        total_price=unit * quantity,
        currency=currency,
        item_number="P101(07)",
        quantity=quantity,
    )


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def json_response(status_code: int, body=None) -> httpx.Response:
    if body is None:
        return httpx.Response(status_code)
    return httpx.Response(status_code, json=body)


@pytest.fixture
def configuration() -> MdfConfiguration:
    return make_configuration()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def client_config() -> BusinessCentralConfig:
    return BusinessCentralConfig(
        base_url=BASE_URL,
        company_id=COMPANY_ID,
        access_token="test-token",
    )


@pytest.fixture
def make_client(client_config, recording_sleep):
    """
    Factory for a client backed by ``httpx.MockTransport``.

    The handler receives each ``httpx.Request``; every request is also
    appended to the returned client's ``requests`` list.
    """
    def factory(handler, config: BusinessCentralConfig | None = None) -> BusinessCentralClient:
        requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request):
            requests.append(request)
            return handler(request)

        client = BusinessCentralClient(
            config or client_config,
            transport=httpx.MockTransport(recording_handler),
            sleep=recording_sleep,
        )
        client.requests = requests
        return client

    return factory
