"""
Pricing API routes.
"""

from fastapi import APIRouter

from mdf_cpq.api.dependencies import PriceServiceDep
from mdf_cpq.models.business_central import PriceRequest
from mdf_cpq.schemas import PriceCalculationRequest, PriceLookupRequest, PriceResponse
from mdf_cpq.services.pricing import calculate_price

router = APIRouter()


@router.post("/calculate", response_model=PriceResponse)
async def calculate(body: PriceCalculationRequest):
    """Price a configuration with the powder coating engine."""
    result = calculate_price(
        body.configuration,
        base_price_per_m2=body.base_price_per_m2,
        item_number=body.item_number,
    )
    return PriceResponse.from_result(result)


@router.post("/lookup", response_model=PriceResponse)
async def lookup(body: PriceLookupRequest, service: PriceServiceDep):
    """Look up the price of a catalog item in Business Central."""
    result = await service.calculate_price(
        PriceRequest(
            item_number=body.item_number,
            quantity=body.quantity,
            customer_number=body.customer_number,
            variant_code=body.variant_code,
            unit_of_measure=body.unit_of_measure,
        )
    )
    return PriceResponse.from_result(result)
