"""
Quote builder service.

Combines configuration and pricing into quote line items and derives
new Quote values with recalculated totals. No operation mutates its
input; every operation that changes line items also recomputes totals.

Status lifecycle: DRAFT -> READY -> SUBMITTED. Adding a line makes a
quote READY, removing the last line returns it to DRAFT, and SUBMITTED
is terminal.
"""

from dataclasses import replace
from decimal import Decimal
from typing import Callable
from uuid import uuid4

from mdf_cpq.config.settings import settings
from mdf_cpq.models.configuration import MdfConfiguration
from mdf_cpq.models.pricing import PriceResult
from mdf_cpq.models.quote import (
    Quote,
    QuoteLineItem,
    QuoteStatus,
    calculate_quote_totals,
    generate_line_description,
    utcnow,
)
from mdf_cpq.models.submission import SubmissionContract
from mdf_cpq.services.quote.errors import (
    CurrencyMismatchError,
    EmptyQuoteError,
    InvalidQuantityError,
    LineItemNotFoundError,
    QuoteAlreadySubmittedError,
)
from mdf_cpq.services.quote.submission_mapper import prepare_for_submission
from mdf_cpq.utils.logging import ServiceLogger


def generate_line_item_id() -> str:
    return f"line-{uuid4().hex}"


class QuoteBuilder:
    """
    Service for building quotes.

    Provides:
    - Quote creation
    - Line item add / remove / quantity update
    - Submission preparation and the submitted transition
    """

    def __init__(
        self,
        tax_rate: Decimal | None = None,
        id_factory: Callable[[], str] = generate_line_item_id,
    ):
        # Tax is 0 for this flow; Business Central calculates the real tax
        self.tax_rate = tax_rate if tax_rate is not None else settings.pricing.tax_rate
        self.id_factory = id_factory
        self.logger = ServiceLogger("quote_builder")

    def create_quote(self, quote_id: str | None = None, currency: str | None = None) -> Quote:
        """Create an empty DRAFT quote with zero totals."""
        now = utcnow()
        currency = currency or settings.pricing.currency

        return Quote(
            id=quote_id or uuid4().hex,
            line_items=(),
            totals=calculate_quote_totals([], currency, self.tax_rate),
            status=QuoteStatus.DRAFT,
            created_at=now,
            updated_at=now,
        )

    def add_line_item(
        self,
        quote: Quote,
        product_id: str,
        product_name: str,
        configuration: MdfConfiguration,
        price: PriceResult,
    ) -> Quote:
        """
        Add a priced configuration as a new line item.

        Raises:
            CurrencyMismatchError: the quote already holds lines in another currency
            QuoteAlreadySubmittedError: the quote is submitted
        """
        self._ensure_editable(quote)

        if not quote.is_empty and quote.totals.currency != price.currency:
            raise CurrencyMismatchError(quote.totals.currency, price.currency)

        line_item = QuoteLineItem(
            id=self.id_factory(),
            product_id=product_id,
            product_name=product_name,
            configuration=configuration,
            quantity=configuration.quantity,
            unit_price=price.unit_price,
            description=generate_line_description(product_name, configuration),
            currency=price.currency,
        )

        updated = self._with_line_items(
            quote,
            quote.line_items + (line_item,),
            currency=price.currency,
            status=QuoteStatus.READY,
        )

        self.logger.log_event(
            "quote_line_added",
            quote_id=quote.id,
            line_item_id=line_item.id,
            product_id=product_id,
            line_total=str(line_item.line_total),
        )
        return updated

    def remove_line_item(self, quote: Quote, line_item_id: str) -> Quote:
        """Remove a line item; the quote returns to DRAFT when it becomes empty."""
        self._ensure_editable(quote)

        remaining = tuple(item for item in quote.line_items if item.id != line_item_id)
        status = QuoteStatus.DRAFT if not remaining else QuoteStatus.READY

        self.logger.log_event("quote_line_removed", quote_id=quote.id, line_item_id=line_item_id)
        return self._with_line_items(quote, remaining, status=status)

    def update_line_item_quantity(self, quote: Quote, line_item_id: str, new_quantity: int) -> Quote:
        """
        Change the quantity of a line item.

        The unit price is kept as it is; there is no re-pricing on
        quantity edits. Line total, description and quote totals are
        recalculated.

        Raises:
            InvalidQuantityError: new_quantity is not positive
            LineItemNotFoundError: no line item with that id
        """
        self._ensure_editable(quote)

        if new_quantity <= 0:
            raise InvalidQuantityError(new_quantity)

        if quote.find_line_item(line_item_id) is None:
            raise LineItemNotFoundError(line_item_id)

        updated_items = []
        for item in quote.line_items:
            if item.id == line_item_id:
                configuration = item.configuration.with_quantity(new_quantity)
                item = replace(
                    item,
                    configuration=configuration,
                    quantity=new_quantity,
                    description=generate_line_description(item.product_name, configuration),
                )
            updated_items.append(item)

        return self._with_line_items(quote, tuple(updated_items), status=quote.status)

    def prepare_for_submission(self, quote: Quote, customer_number: str) -> SubmissionContract:
        """Reduce the quote to the neutral submission contract."""
        return prepare_for_submission(quote, customer_number)

    def mark_submitted(self, quote: Quote) -> Quote:
        """
        Move a READY quote to SUBMITTED.

        Raises:
            EmptyQuoteError: the quote has no line items
            QuoteAlreadySubmittedError: the quote was submitted before
        """
        if quote.is_empty:
            raise EmptyQuoteError()
        self._ensure_editable(quote)

        self.logger.log_event("quote_submitted", quote_id=quote.id, total=str(quote.totals.total))
        return replace(quote, status=QuoteStatus.SUBMITTED, updated_at=utcnow())

    def _with_line_items(
        self,
        quote: Quote,
        line_items: tuple[QuoteLineItem, ...],
        status: QuoteStatus,
        currency: str | None = None,
    ) -> Quote:
        totals = calculate_quote_totals(
            (item.line_total for item in line_items),
            currency or quote.totals.currency,
            self.tax_rate,
        )
        return replace(
            quote,
            line_items=line_items,
            totals=totals,
            status=status,
            updated_at=utcnow(),
        )

    @staticmethod
    def _ensure_editable(quote: Quote) -> None:
        if quote.status == QuoteStatus.SUBMITTED:
            raise QuoteAlreadySubmittedError(quote.id)
