import unittest

from market.cart import add_to_cart, undo_last_item
from market.errors import EmptyCartError, InsufficientStockError, ProductNotFoundError
from market.records import RecordStore


class CartOperationsTestCase(unittest.TestCase):
    def setUp(self):
        self.records = RecordStore()
        sid = self.records.add_seller("Sam", "sam@example.com")
        self.pid = self.records.add_product("Widget", 10.0, "Tools", 5, sid)
        cid = self.records.add_customer("Cat", "1 Road", "555", "cat@example.com")
        self.customer = self.records.find_customer_by_id(cid)

    def test_add_to_cart_stages_a_snapshot(self):
        item = add_to_cart(self.records, self.customer, self.pid, 3)
        self.assertEqual(item.buy_qty, 3)
        self.assertEqual(self.customer.cart.peek_all(), [item])

        live = self.records.find_product_by_id(self.pid)
        # nothing is reserved at staging time
        self.assertEqual(live.quantity, 5)

        live.price = 99.0
        live.name = "Renamed"
        self.assertEqual(item.product.price, 10.0)
        self.assertEqual(item.product.name, "Widget")
        self.assertEqual(item.line_total, 30.0)

    def test_add_to_cart_validation(self):
        with self.assertRaises(ProductNotFoundError):
            add_to_cart(self.records, self.customer, 404, 1)
        with self.assertRaises(InsufficientStockError) as ctx:
            add_to_cart(self.records, self.customer, self.pid, 6)
        self.assertEqual(ctx.exception.available, 5)
        with self.assertRaises(ValueError):
            add_to_cart(self.records, self.customer, self.pid, 0)
        self.assertEqual(len(self.customer.cart), 0)

    def test_staging_does_not_count_earlier_staged_items(self):
        add_to_cart(self.records, self.customer, self.pid, 5)
        add_to_cart(self.records, self.customer, self.pid, 5)
        self.assertEqual(len(self.customer.cart), 2)

    def test_undo_last_item(self):
        first = add_to_cart(self.records, self.customer, self.pid, 1)
        second = add_to_cart(self.records, self.customer, self.pid, 2)
        self.assertIs(undo_last_item(self.customer), second)
        self.assertIs(undo_last_item(self.customer), first)
        with self.assertRaises(EmptyCartError):
            undo_last_item(self.customer)


if __name__ == "__main__":
    unittest.main()
