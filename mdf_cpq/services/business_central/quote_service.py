"""
Sales quote submission to Business Central.

Maps the neutral submission contract onto the ``salesQuotes`` request
shape and posts it. Client errors are re-wrapped with messages a sales
user can act on.
"""

from mdf_cpq.models.business_central import SalesQuoteLine, SalesQuoteRequest, SalesQuoteResponse
from mdf_cpq.models.submission import SubmissionContract
from mdf_cpq.services.business_central.client import BusinessCentralClient
from mdf_cpq.services.business_central.errors import ApiError, ApiErrorKind, validate_payload
from mdf_cpq.services.business_central.product_service import odata_literal
from mdf_cpq.utils.logging import ServiceLogger

INVALID_QUOTE_MESSAGE = "Invalid quote data. Please check customer number, item numbers, and quantities."
NOT_FOUND_MESSAGE = "Customer or product not found in Business Central."
SUBMIT_FAILED_MESSAGE = "Failed to create sales quote in Business Central"


def build_sales_quote_request(contract: SubmissionContract) -> SalesQuoteRequest:
    """Transform the submission contract into the Business Central request body."""
    lines = [
        SalesQuoteLine(
            line_number=line.line_number or index,
            item_number=line.item_number,
            description=line.description,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_amount=line.line_amount,
            currency_code=line.currency_code,
        )
        for index, line in enumerate(contract.lines, start=1)
    ]

    return SalesQuoteRequest(
        customer_number=contract.customer_number,
        currency_code=contract.currency_code,
        sales_quote_lines=lines,
    )


class QuoteSubmissionService:
    """Service for creating and reading sales quotes in Business Central."""

    def __init__(self, client: BusinessCentralClient):
        self.client = client
        self.logger = ServiceLogger("business_central.quotes")

    async def submit_quote(self, contract: SubmissionContract) -> SalesQuoteResponse:
        """
        Create a sales quote.

        Returns:
            The created quote (id, number, status)

        Raises:
            ApiError: with a business-level message for 400/404, otherwise
                the classified upstream failure
        """
        started = self.logger.log_operation_start(
            "submit_quote",
            customer_number=contract.customer_number,
            line_count=len(contract.lines),
        )

        request = build_sales_quote_request(contract)

        try:
            response = await self.client.post("/salesQuotes", request)
        except ApiError as e:
            if e.kind == ApiErrorKind.BAD_REQUEST:
                raise e.with_message(INVALID_QUOTE_MESSAGE) from e
            if e.kind == ApiErrorKind.NOT_FOUND:
                raise e.with_message(NOT_FOUND_MESSAGE) from e
            raise e.with_message(SUBMIT_FAILED_MESSAGE) from e

        created = validate_payload(
            SalesQuoteResponse, response, "Business Central did not return the created quote"
        )

        self.logger.log_operation_complete(
            "submit_quote",
            started=started,
            quote_id=created.id,
            quote_number=created.number,
            status=created.status,
        )
        return created

    async def get_quote_by_number(self, quote_number: str) -> SalesQuoteResponse | None:
        """Fetch a quote by its human-readable number; None when absent."""
        try:
            response = await self.client.get(
                "/salesQuotes",
                params={"$filter": f"number eq {odata_literal(quote_number)}"},
            )
        except ApiError as e:
            if e.kind == ApiErrorKind.NOT_FOUND:
                return None
            raise e.with_message(f"Failed to fetch quote {quote_number} from Business Central") from e

        quotes = response.get("value") or []
        if not quotes:
            return None
        return validate_payload(SalesQuoteResponse, quotes[0], f"Unexpected quote payload for {quote_number}")

    async def get_quote_by_id(self, quote_id: str) -> SalesQuoteResponse | None:
        """Fetch a quote by id; None when absent."""
        try:
            response = await self.client.get(f"/salesQuotes({quote_id})")
        except ApiError as e:
            if e.kind == ApiErrorKind.NOT_FOUND:
                return None
            raise e.with_message(f"Failed to fetch quote {quote_id} from Business Central") from e

        if not response:
            return None
        return validate_payload(SalesQuoteResponse, response, f"Unexpected quote payload for {quote_id}")
