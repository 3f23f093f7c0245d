# staging and un-staging purchases on a customer's ledger

from market.errors import InsufficientStockError, ProductNotFoundError
from market.models import CartItem, Customer
from market.records import RecordStore
from utils.logger import get_logger

_logger = get_logger(__name__)


def add_to_cart(
    records: RecordStore, customer: Customer, product_id: int, qty: int
) -> CartItem:
    """
    Stage `qty` units of a product on the customer's ledger.

    Stock is checked against the live product but not reserved; checkout
    checks it again. The staged item keeps a snapshot of the product, so
    later price or name changes do not reach it.
    """
    if qty <= 0:
        raise ValueError("Quantity must be at least 1.")
    product = records.find_product_by_id(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    if qty > product.quantity:
        raise InsufficientStockError(product_id, qty, product.quantity)

    item = CartItem(product=product.snapshot(), buy_qty=qty)
    customer.cart.push(item)
    _logger.info(f"Customer {customer.id} staged {qty} x '{product.name}'")
    return item


def undo_last_item(customer: Customer) -> CartItem:
    """Drop the most recently staged item. Raises EmptyCartError if none."""
    item = customer.cart.undo()
    _logger.info(f"Customer {customer.id} removed '{item.product.name}' from cart")
    return item
