"""
Product catalog lookups against Business Central.

Absence is an expected outcome when browsing the catalog: lookups by
number or id return ``None`` instead of raising.
"""

from mdf_cpq.models.business_central import BusinessCentralItem
from mdf_cpq.services.business_central.client import BusinessCentralClient
from mdf_cpq.services.business_central.errors import ApiError, ApiErrorKind, validate_payload
from mdf_cpq.utils.logging import ServiceLogger


def odata_literal(value: str) -> str:
    """Quote a string for an OData ``$filter`` expression."""
    return "'" + value.replace("'", "''") + "'"


class ProductService:
    """Service for fetching items from Business Central."""

    def __init__(self, client: BusinessCentralClient):
        self.client = client
        self.logger = ServiceLogger("business_central.products")

    async def list_products(self) -> list[BusinessCentralItem]:
        """
        Get all items.

        Raises:
            ApiError: if the request fails
        """
        try:
            response = await self.client.get("/items")
        except ApiError as e:
            raise e.with_message("Failed to fetch products from Business Central") from e

        return [
            validate_payload(BusinessCentralItem, item, "Unexpected item payload in product list")
            for item in response.get("value") or []
        ]

    async def find_by_number(self, item_number: str) -> BusinessCentralItem | None:
        """
        Get an item by its number (product code).

        Returns:
            The item, or None when Business Central has no such item
        """
        try:
            response = await self.client.get(
                "/items",
                params={"$filter": f"number eq {odata_literal(item_number)}"},
            )
        except ApiError as e:
            if e.kind == ApiErrorKind.NOT_FOUND:
                return None
            raise e.with_message(f"Failed to fetch product {item_number} from Business Central") from e

        items = response.get("value") or []
        if not items:
            self.logger.log_event("product_not_found", item_number=item_number)
            return None
        return validate_payload(BusinessCentralItem, items[0], f"Unexpected item payload for {item_number}")

    async def find_by_id(self, item_id: str) -> BusinessCentralItem | None:
        """
        Get an item by its id (UUID).

        Returns:
            The item, or None when Business Central answers 404
        """
        try:
            response = await self.client.get(f"/items({item_id})")
        except ApiError as e:
            if e.kind == ApiErrorKind.NOT_FOUND:
                return None
            raise e.with_message(f"Failed to fetch product {item_id} from Business Central") from e

        if not response:
            return None
        return validate_payload(BusinessCentralItem, response, f"Unexpected item payload for {item_id}")
