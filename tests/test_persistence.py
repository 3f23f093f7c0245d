import os
import tempfile
import unittest
from unittest import mock

from market.cart import add_to_cart
from market.errors import LoadError
from market.persistence import (
    CARTS_FILE,
    CUSTOMERS_FILE,
    MALFORMED,
    PRODUCTS_FILE,
    SELLERS_FILE,
    UNKNOWN_CUSTOMER,
    UNKNOWN_PRODUCT,
    FlatFileStore,
)
from market.records import RecordStore


def _cart_of(records, cid):
    return [
        (i.product.id, i.buy_qty) for i in records.find_customer_by_id(cid).cart.peek_all()
    ]


class FlatFileStoreTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.data_dir = self.temp_dir.name
        self.store = FlatFileStore(self.data_dir)

        self.records = RecordStore()
        self.records.add_seller("Sam", "sam@example.com")
        self.records.add_seller("Sue", "sue@example.com")
        self.records.add_customer("Cat", "1 Road, Town", "555-0100", "cat@example.com")
        self.records.add_customer("Cal", "2 Road", "555-0101", "cal@example.com")
        self.records.add_product("Widget", 10.0, "Tools", 5, 1)
        self.records.add_product("Gadget", 0.1 + 0.2, "Toys", 7, 2)
        self.records.add_product("Gizmo", 3.25, "Tools", 0, 2)
        widget = self.records.find_product_by_id(1)
        widget.add_rating(4)
        widget.add_rating(5)

    def tearDown(self):
        self.temp_dir.cleanup()

    def write(self, name, text):
        with open(os.path.join(self.data_dir, name), "w", encoding="utf-8") as f:
            f.write(text)

    def read(self, name):
        with open(os.path.join(self.data_dir, name), "r", encoding="utf-8") as f:
            return f.read()

    def test_round_trip(self):
        cat = self.records.find_customer_by_id(1)
        cal = self.records.find_customer_by_id(2)
        add_to_cart(self.records, cat, 1, 2)
        add_to_cart(self.records, cat, 2, 1)
        add_to_cart(self.records, cat, 1, 3)
        add_to_cart(self.records, cal, 2, 4)

        self.store.save(self.records)
        result = self.store.load()
        loaded = result.records

        self.assertEqual(result.rejected, [])
        self.assertEqual(loaded.sellers, self.records.sellers)
        self.assertEqual(loaded.products, self.records.products)
        self.assertEqual(len(loaded.customers), 2)
        for before, after in zip(self.records.customers, loaded.customers):
            self.assertEqual(
                (before.id, before.name, before.address, before.phone, before.email),
                (after.id, after.name, after.address, after.phone, after.email),
            )
        self.assertEqual(_cart_of(loaded, 1), [(1, 3), (2, 1), (1, 2)])
        self.assertEqual(_cart_of(loaded, 2), [(2, 4)])

        # undo still removes the most recent item after a reload
        self.assertEqual(loaded.find_customer_by_id(1).cart.undo().buy_qty, 3)

        # counters continue from the loaded ids
        self.assertEqual(loaded.add_product("New", 1.0, "Tools", 1, 1), 4)
        self.assertEqual(loaded.add_seller("New", "new@example.com"), 3)
        self.assertEqual(loaded.add_customer("New", "a", "b", "c"), 3)

    def test_file_format(self):
        add_to_cart(self.records, self.records.find_customer_by_id(1), 1, 2)
        add_to_cart(self.records, self.records.find_customer_by_id(1), 2, 3)

        self.store.save(self.records)

        self.assertEqual(
            self.read(SELLERS_FILE), "1|Sam|sam@example.com\n2|Sue|sue@example.com\n"
        )
        self.assertEqual(
            self.read(CUSTOMERS_FILE).splitlines()[0],
            "1|Cat|1 Road, Town|555-0100|cat@example.com",
        )
        self.assertEqual(
            self.read(PRODUCTS_FILE).splitlines()[0], "1|Widget|10.0|Tools|5|1|9.0|2"
        )
        # most recently staged first
        self.assertEqual(self.read(CARTS_FILE), "1|2|3\n1|1|2\n")

    def test_save_rewrites_files_and_leaves_no_temp_files(self):
        self.store.save(self.records)
        self.records.add_seller("Sid", "sid@example.com")
        self.store.save(self.records)

        self.assertEqual(len(self.read(SELLERS_FILE).splitlines()), 3)
        self.assertEqual(
            sorted(os.listdir(self.data_dir)),
            sorted([SELLERS_FILE, CUSTOMERS_FILE, PRODUCTS_FILE, CARTS_FILE]),
        )

    def test_listed_products_always_reload(self):
        with self.assertRaises(ValueError):
            self.records.add_product("Bad", float("inf"), "Tools", 1, 1)
        self.store.save(self.records)
        self.assertEqual(self.store.load().records.products, self.records.products)

    def test_failed_staging_leaves_no_temp_files(self):
        # a lone surrogate cannot be encoded as utf-8
        self.records.find_customer_by_id(1).name = "Cat\ud800"
        with self.assertRaises(UnicodeEncodeError):
            self.store.save(self.records)
        self.assertEqual(os.listdir(self.data_dir), [])

    def test_failed_swap_leaves_no_temp_files(self):
        real_replace = os.replace
        calls = []

        def replace_once(src, dst):
            calls.append(dst)
            if len(calls) > 1:
                raise OSError("disk full")
            real_replace(src, dst)

        with mock.patch("market.persistence.os.replace", side_effect=replace_once):
            with self.assertRaises(OSError):
                self.store.save(self.records)
        self.assertEqual(os.listdir(self.data_dir), [SELLERS_FILE])

    def test_save_creates_missing_directory(self):
        store = FlatFileStore(os.path.join(self.data_dir, "nested", "dir"))
        store.save(self.records)
        self.assertEqual(len(store.load().records.products), 3)

    def test_missing_files_load_empty(self):
        result = self.store.load()
        self.assertEqual(result.records.sellers, [])
        self.assertEqual(result.records.customers, [])
        self.assertEqual(result.records.products, [])
        self.assertEqual(result.rejected, [])
        self.assertEqual(result.records.add_product("First", 1.0, "c", 1, 1), 1)

    def test_malformed_lines_are_rejected_not_fatal(self):
        self.write(SELLERS_FILE, "1|Sam|sam@example.com\n2|Sue\n\n3|Sid|sid@x|extra\n")
        self.write(PRODUCTS_FILE, "1|Widget|10.0|Tools|5|1|0.0\n")

        result = self.store.load()

        self.assertEqual([s.id for s in result.records.sellers], [1, 3])
        self.assertEqual(result.records.products, [])
        rejected = [(r.source, r.line_no, r.reason) for r in result.rejected]
        self.assertEqual(
            rejected,
            [
                (SELLERS_FILE, 2, MALFORMED),
                (SELLERS_FILE, 3, MALFORMED),
                (PRODUCTS_FILE, 1, MALFORMED),
            ],
        )
        self.assertEqual(result.rejected[0].line, "2|Sue")

    def test_unresolvable_cart_lines_are_dropped(self):
        self.store.save(self.records)
        self.write(CARTS_FILE, "1|1|2\n9|1|1\n1|99|1\n2|2|1\n")

        result = self.store.load()

        self.assertEqual(_cart_of(result.records, 1), [(1, 2)])
        self.assertEqual(_cart_of(result.records, 2), [(2, 1)])
        self.assertEqual(
            [(r.line_no, r.reason) for r in result.rejected],
            [(2, UNKNOWN_CUSTOMER), (3, UNKNOWN_PRODUCT)],
        )

    def test_cart_items_snapshot_the_live_product(self):
        self.store.save(self.records)
        self.write(CARTS_FILE, "1|2|1\n")

        loaded = self.store.load().records
        item = loaded.find_customer_by_id(1).cart.peek_all()[0]
        live = loaded.find_product_by_id(2)

        self.assertEqual(item.product, live)
        self.assertIsNot(item.product, live)

    def test_non_numeric_field_is_fatal(self):
        self.write(PRODUCTS_FILE, "1|Widget|ten|Tools|5|1|0.0|0\n")
        with self.assertRaises(LoadError) as ctx:
            self.store.load()
        self.assertEqual(ctx.exception.source, PRODUCTS_FILE)
        self.assertEqual(ctx.exception.line_no, 1)
        self.assertIn("ten", str(ctx.exception))

    def test_other_fatal_lines(self):
        cases = [
            (SELLERS_FILE, "x|Sam|sam@example.com\n"),
            (CUSTOMERS_FILE, "1.5|Cat|a|b|c\n"),
            (PRODUCTS_FILE, "1|Widget|10.0|Tools|-1|1|0.0|0\n"),
            (PRODUCTS_FILE, "1|Widget|nan|Tools|1|1|0.0|0\n"),
            (CARTS_FILE, "1|1|abc\n"),
        ]
        for name, text in cases:
            with self.subTest(name=name, text=text):
                for other in (SELLERS_FILE, CUSTOMERS_FILE, PRODUCTS_FILE, CARTS_FILE):
                    self.write(other, "")
                self.write(name, text)
                with self.assertRaises(LoadError):
                    self.store.load()


if __name__ == "__main__":
    unittest.main()
