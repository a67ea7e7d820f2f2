"""
FastAPI dependencies for the Business Central client and domain services.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from mdf_cpq.services.business_central import (
    BusinessCentralClient,
    PriceService,
    ProductService,
    QuoteSubmissionService,
)
from mdf_cpq.services.quote import ArdisExportService, QuoteBuilder


def get_client(request: Request) -> BusinessCentralClient:
    """
    Get the Business Central client opened for the application lifespan.

    Raises:
        HTTPException: If no connection is configured
    """
    client = getattr(request.app.state, "business_central", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Business Central connection is not configured",
        )
    return client


ClientDep = Annotated[BusinessCentralClient, Depends(get_client)]


def get_product_service(client: ClientDep) -> ProductService:
    return ProductService(client)


def get_price_service(client: ClientDep) -> PriceService:
    return PriceService(client)


def get_quote_submission_service(client: ClientDep) -> QuoteSubmissionService:
    return QuoteSubmissionService(client)


def get_quote_builder() -> QuoteBuilder:
    return QuoteBuilder()


def get_export_service() -> ArdisExportService:
    return ArdisExportService()


ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
PriceServiceDep = Annotated[PriceService, Depends(get_price_service)]
QuoteSubmissionDep = Annotated[QuoteSubmissionService, Depends(get_quote_submission_service)]
QuoteBuilderDep = Annotated[QuoteBuilder, Depends(get_quote_builder)]
ExportServiceDep = Annotated[ArdisExportService, Depends(get_export_service)]
