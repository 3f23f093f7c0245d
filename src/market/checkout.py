# settling a customer's cart into a receipt

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional, Union

from market.errors import EmptyCartError
from market.models import CartItem, Customer, LineFailure, Receipt, ReceiptLine
from market.persistence import FlatFileStore
from market.records import RecordStore
from utils.logger import get_logger

_logger = get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5

INSUFFICIENT_STOCK = "insufficient stock"
PRODUCT_NOT_FOUND = "product not found"

# called with the settled item and the 1-based attempt number; returns the
# raw answer, which is asked for again until it parses
RatingSource = Callable[[CartItem, int], Union[int, str, None]]


def parse_rating(raw) -> Optional[int]:
    """Return the rating if `raw` is a whole number from 1 to 5, else None."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except (TypeError, ValueError):
            return None
    if MIN_RATING <= value <= MAX_RATING:
        return value
    return None


class CheckoutProcessor:
    """
    Drains a customer's ledger oldest-first and settles each item against
    the live product records.

    Settlement is committed per item, not per cart: once it starts, the
    ledger is empty whatever the outcome, and a shortfall on one line never
    rolls back the lines settled before it.
    """

    def __init__(
        self, records: RecordStore, persistence: FlatFileStore, rate: RatingSource
    ) -> None:
        self.records = records
        self.persistence = persistence
        self.rate = rate

    def settle(self, customer: Customer, when: Optional[datetime] = None) -> Receipt:
        if not customer.cart:
            raise EmptyCartError("Cart is empty. Add items before checking out.")

        queue = customer.cart.drain_to_arrival_order()
        lines: List[ReceiptLine] = []
        failures: List[LineFailure] = []
        total = 0.0

        for item in queue:
            live = self.records.find_product_by_id(item.product.id)
            if live is None:
                failures.append(self._failure(item, PRODUCT_NOT_FOUND))
                continue
            if live.quantity < item.buy_qty:
                failures.append(self._failure(item, INSUFFICIENT_STOCK))
                continue

            live.quantity -= item.buy_qty
            line_total = item.line_total
            total += line_total
            rating = self._ask_rating(item)
            live.add_rating(rating)
            lines.append(
                ReceiptLine(
                    product_id=live.id,
                    product_name=item.product.name,
                    qty=item.buy_qty,
                    unit_price=item.product.price,
                    line_total=line_total,
                    rating=rating,
                )
            )

        self.persistence.save(self.records)
        _logger.info(
            f"Customer {customer.id} checked out: {len(lines)} settled, "
            f"{len(failures)} failed, total {total:.2f}"
        )
        return Receipt(
            timestamp=when or datetime.now(),
            lines=lines,
            total=total,
            failures=failures,
        )

    def _ask_rating(self, item: CartItem) -> int:
        attempt = 1
        while True:
            rating = parse_rating(self.rate(item, attempt))
            if rating is not None:
                return rating
            _logger.warning(
                f"Invalid rating for '{item.product.name}', "
                f"expected {MIN_RATING}-{MAX_RATING}"
            )
            attempt += 1

    @staticmethod
    def _failure(item: CartItem, reason: str) -> LineFailure:
        _logger.warning(f"Could not settle '{item.product.name}': {reason}")
        return LineFailure(
            product_id=item.product.id,
            product_name=item.product.name,
            qty=item.buy_qty,
            reason=reason,
        )
