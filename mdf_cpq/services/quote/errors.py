"""Validation failures raised while assembling or exporting quotes."""


class QuoteError(ValueError):
    """Base class for quote assembly failures."""


class CurrencyMismatchError(QuoteError):
    def __init__(self, quote_currency: str, price_currency: str):
        self.quote_currency = quote_currency
        self.price_currency = price_currency
        super().__init__(
            f"Currency mismatch: Quote uses {quote_currency}, but price is in {price_currency}"
        )


class InvalidQuantityError(QuoteError):
    def __init__(self, quantity: int):
        self.quantity = quantity
        super().__init__("Quantity must be greater than 0")


class EmptyQuoteError(QuoteError):
    def __init__(self, message: str = "Cannot submit quote with no line items"):
        super().__init__(message)


class QuoteAlreadySubmittedError(QuoteError):
    def __init__(self, quote_id: str):
        self.quote_id = quote_id
        super().__init__(f"Quote {quote_id} has already been submitted")


class LineItemNotFoundError(QuoteError):
    def __init__(self, line_item_id: str):
        self.line_item_id = line_item_id
        super().__init__(f"Line item not found: {line_item_id}")


class EmptyQuoteExportError(EmptyQuoteError):
    def __init__(self):
        super().__init__("Cannot export quote with no line items")
