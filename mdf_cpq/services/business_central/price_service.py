"""
Price lookups against Business Central.

Uses the item's unit price (``GET /items`` filtered by number). Unlike
catalog browsing, a missing item is an error here: a price needs a
known item.
"""

from decimal import Decimal

from mdf_cpq.config.settings import settings
from mdf_cpq.models.business_central import BusinessCentralItem, PriceRequest
from mdf_cpq.models.pricing import PriceResult
from mdf_cpq.services.business_central.client import BusinessCentralClient
from mdf_cpq.services.business_central.errors import ApiError, ApiErrorKind, validate_payload
from mdf_cpq.services.business_central.product_service import odata_literal
from mdf_cpq.utils.logging import ServiceLogger
from mdf_cpq.utils.money import round2

ITEM_PRICE_FIELDS = "id,number,unitPrice,currencyCode,unitOfMeasure"


class PriceService:
    """Service for fetching prices from Business Central."""

    def __init__(self, client: BusinessCentralClient, default_currency: str | None = None):
        self.client = client
        self.default_currency = default_currency or settings.pricing.currency
        self.logger = ServiceLogger("business_central.pricing")

    async def calculate_price(self, request: PriceRequest) -> PriceResult:
        """
        Price a quantity of an item.

        Args:
            request: item number, quantity and optional customer/variant/configuration

        Returns:
            PriceResult with the item's unit price and the rounded total

        Raises:
            ApiError: NOT_FOUND when the item does not exist, otherwise the
                classified upstream failure
        """
        started = self.logger.log_operation_start(
            "calculate_price",
            item_number=request.item_number,
            quantity=request.quantity,
        )

        try:
            response = await self.client.get(
                "/items",
                params={
                    "$filter": f"number eq {odata_literal(request.item_number)}",
                    "$select": ITEM_PRICE_FIELDS,
                },
            )
        except ApiError as e:
            if e.kind == ApiErrorKind.NOT_FOUND:
                raise e.with_message(
                    f"Product {request.item_number} not found in Business Central"
                ) from e
            raise e.with_message(
                f"Failed to calculate price for product {request.item_number}"
            ) from e

        items = response.get("value") or []
        if not items:
            raise ApiError(
                ApiErrorKind.NOT_FOUND,
                message=f"Product {request.item_number} not found in Business Central",
            )

        item = validate_payload(
            BusinessCentralItem, items[0], f"Unexpected item payload for {request.item_number}"
        )
        unit_price = item.unit_price
        total_price = round2(unit_price * request.quantity)

        result = PriceResult(
            unit_price=unit_price,
            total_price=total_price,
            currency=item.currency_code or self.default_currency,
            item_number=item.number,
            quantity=request.quantity,
            unit_of_measure=request.unit_of_measure or item.unit_of_measure,
            details={
                "item_id": item.id,
                "variant_code": request.variant_code,
                "customer_number": request.customer_number,
                "configuration_id": request.configuration.id if request.configuration else None,
            },
        )

        self.logger.log_operation_complete(
            "calculate_price",
            started=started,
            item_number=result.item_number,
            unit_price=str(result.unit_price),
            total_price=str(result.total_price),
        )
        return result

    async def get_unit_price(self, item_number: str, customer_number: str | None = None) -> Decimal:
        """Unit price of a single item."""
        result = await self.calculate_price(
            PriceRequest(item_number=item_number, quantity=1, customer_number=customer_number)
        )
        return result.unit_price
