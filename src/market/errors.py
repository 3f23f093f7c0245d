# exceptions raised by the marketplace core


class MarketplaceError(Exception):
    """Base class for every recoverable marketplace failure."""


class EmptyCartError(MarketplaceError):
    def __init__(self, message: str = "Cart is empty.") -> None:
        super().__init__(message)


class ProductNotFoundError(MarketplaceError):
    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product ID {product_id} not found.")
        self.product_id = product_id


class InsufficientStockError(MarketplaceError):
    def __init__(self, product_id: int, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, only {available} available."
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class LoadError(MarketplaceError):
    """
    Raised when a persisted line has enough fields but one of them
    cannot be parsed as a number. Aborts the whole load.
    """

    def __init__(self, source: str, line_no: int, line: str, reason: str) -> None:
        super().__init__(f"{source}:{line_no}: {reason} in line {line!r}")
        self.source = source
        self.line_no = line_no
        self.line = line
        self.reason = reason
