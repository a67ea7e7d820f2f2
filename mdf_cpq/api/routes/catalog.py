"""
Product catalog API routes.
"""

from fastapi import APIRouter, HTTPException, status

from mdf_cpq.api.dependencies import ProductServiceDep
from mdf_cpq.schemas import ProductListResponse, ProductResponse

router = APIRouter()


@router.get("/products", response_model=ProductListResponse)
async def list_products(service: ProductServiceDep):
    """List the items available in Business Central."""
    items = await service.list_products()
    products = [ProductResponse.from_item(item) for item in items]
    return ProductListResponse(items=products, total=len(products))


@router.get("/products/{number}", response_model=ProductResponse)
async def get_product(number: str, service: ProductServiceDep):
    """Get a specific item by its number."""
    item = await service.find_by_number(number)

    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    return ProductResponse.from_item(item)
