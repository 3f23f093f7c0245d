# per-customer LIFO staging of cart items

from __future__ import annotations

from typing import TYPE_CHECKING, List

from market.errors import EmptyCartError
from utils.logger import get_logger

if TYPE_CHECKING:
    from market.models import CartItem

_logger = get_logger(__name__)


class CartLedger:
    """
    Stack of staged purchases for one customer.

    The most recently pushed item is the only one that can be undone.
    Enumeration never mutates the stack; draining it for checkout does.
    """

    def __init__(self) -> None:
        self._items: List[CartItem] = []  # bottom -> top

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CartLedger):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"CartLedger({self.peek_all()!r})"

    def push(self, item: CartItem) -> None:
        self._items.append(item)
        _logger.debug(
            f"Pushed {item.buy_qty} x product {item.product.id} (depth {len(self)})"
        )

    def undo(self) -> CartItem:
        """Remove and return the most recently pushed item."""
        if not self._items:
            raise EmptyCartError("Cart is already empty.")
        item = self._items.pop()
        _logger.debug(f"Undid product {item.product.id} (depth {len(self)})")
        return item

    def peek_all(self) -> List[CartItem]:
        """Most recently added first."""
        return self._items[::-1]

    def drain_to_arrival_order(self) -> List[CartItem]:
        """Empty the ledger, returning its items oldest first."""
        popped = []
        while self._items:
            popped.append(self._items.pop())
        popped.reverse()
        return popped

    def estimated_total(self) -> float:
        return sum(item.line_total for item in self._items)
