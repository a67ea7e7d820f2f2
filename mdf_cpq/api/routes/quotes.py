"""
Quote API routes.

Each request carries the configured lines; the quote is built, priced
with the powder coating engine and then previewed, submitted to
Business Central or exported as an Ardis document.
"""

from fastapi import APIRouter, Response

from mdf_cpq.api.dependencies import ExportServiceDep, QuoteBuilderDep, QuoteSubmissionDep
from mdf_cpq.models.quote import Quote
from mdf_cpq.schemas import (
    QuoteBuildRequest,
    QuoteExportRequest,
    QuoteResponse,
    QuoteSubmitRequest,
    QuoteSubmitResponse,
    SalesQuoteSummary,
)
from mdf_cpq.services.pricing import calculate_price
from mdf_cpq.services.quote import CustomerInfo, QuoteBuilder, default_header

router = APIRouter()

XML_MEDIA_TYPE = "application/xml; charset=windows-1252"


def build_quote(builder: QuoteBuilder, body: QuoteBuildRequest) -> Quote:
    """Price every requested line and assemble the quote."""
    quote = builder.create_quote(currency=body.currency)

    for line in body.lines:
        price = calculate_price(
            line.configuration,
            base_price_per_m2=line.base_price_per_m2,
            currency=body.currency,
            item_number=line.product_id,
        )
        quote = builder.add_line_item(
            quote,
            product_id=line.product_id,
            product_name=line.product_name,
            configuration=line.configuration,
            price=price,
        )

    return quote


@router.post("/preview", response_model=QuoteResponse)
async def preview_quote(body: QuoteBuildRequest, builder: QuoteBuilderDep):
    """Build and price a quote without sending it anywhere."""
    return QuoteResponse.from_quote(build_quote(builder, body))


@router.post("/submit", response_model=QuoteSubmitResponse)
async def submit_quote(
    body: QuoteSubmitRequest,
    builder: QuoteBuilderDep,
    service: QuoteSubmissionDep,
):
    """Build a quote and create it as a sales quote in Business Central."""
    quote = build_quote(builder, body)
    contract = builder.prepare_for_submission(quote, body.customer_number)

    created = await service.submit_quote(contract)
    quote = builder.mark_submitted(quote)

    return QuoteSubmitResponse(
        quote=QuoteResponse.from_quote(quote),
        sales_quote=SalesQuoteSummary.from_response(created),
    )


@router.post("/export")
async def export_quote(
    body: QuoteExportRequest,
    builder: QuoteBuilderDep,
    exporter: ExportServiceDep,
):
    """Build a quote and return it as an Ardis XML document."""
    quote = build_quote(builder, body)

    customer = CustomerInfo(
        name=body.customer_name,
        number=body.customer_number,
        reference=body.customer_reference,
    )
    filename = body.filename or f"quote-{quote.id}.xml"
    header = default_header(filename, customer, export_date=body.export_date)

    content = exporter.export_bytes(quote, header, customer)

    return Response(
        content=content,
        media_type=XML_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
