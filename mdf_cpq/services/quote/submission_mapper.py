"""
Quote to submission contract mapping.

Mapping decisions:
1. Line descriptions: the generated description of each line item, so the
   ERP shows dimensions, faces and quantity.
2. Item identification: the product id is used as the ERP item number.
3. Prices: unit price and line total are copied as already rounded.
4. Currency: single currency per quote, copied from the totals.
5. Customer number: not part of the quote, supplied by the caller.
"""

from mdf_cpq.models.quote import Quote, QuoteStatus
from mdf_cpq.models.submission import SubmissionContract, SubmissionLine, SubmissionTotals
from mdf_cpq.services.quote.errors import EmptyQuoteError, QuoteAlreadySubmittedError


def prepare_for_submission(quote: Quote, customer_number: str) -> SubmissionContract:
    """
    Reduce a quote to the neutral submission contract.

    Raises:
        EmptyQuoteError: the quote has no line items
        QuoteAlreadySubmittedError: the quote was submitted before
    """
    if quote.is_empty:
        raise EmptyQuoteError()

    if quote.status == QuoteStatus.SUBMITTED:
        raise QuoteAlreadySubmittedError(quote.id)

    lines = tuple(
        SubmissionLine(
            line_number=index,
            item_number=item.product_id,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_amount=item.line_total,
            currency_code=item.currency,
        )
        for index, item in enumerate(quote.line_items, start=1)
    )

    return SubmissionContract(
        customer_number=customer_number,
        currency_code=quote.totals.currency,
        lines=lines,
        totals=SubmissionTotals(
            subtotal=quote.totals.subtotal,
            tax=quote.totals.tax,
            total=quote.totals.total,
        ),
    )
