import unittest
from datetime import datetime

from market.models import CartItem, LineFailure, Product, Receipt, ReceiptLine
from utils.pure import cart_markdown, generate_markdown_table, receipt_markdown


class MarkdownHelpersTestCase(unittest.TestCase):
    def test_generate_markdown_table(self):
        md = generate_markdown_table(["A", "B"], [[1, "x|y"]], ["l", "r"])
        self.assertEqual(md, "| A | B |\n| :--- | ---: |\n| 1 | x\\|y |")
        self.assertEqual(generate_markdown_table(["A"], []), "")
        with self.assertRaises(ValueError):
            generate_markdown_table(["A", "B"], [[1, 2]], ["l"])

    def test_first_row_as_headers(self):
        md = generate_markdown_table(None, [["K", "V"], ["a", "b"]])
        self.assertTrue(md.startswith("| K | V |\n| :---: | :---: |"))

    def test_cart_markdown(self):
        self.assertIn("empty", cart_markdown([], "Cart", 0.0))
        product = Product(1, "Widget", 2.5, "Tools", 3, 1)
        md = cart_markdown([CartItem(product, 2)], "Cart", 5.0)
        self.assertIn("| Widget | $2.50 | 2 | $5.00 |", md)
        self.assertIn("**Total Estimate:** $5.00", md)

    def test_receipt_markdown(self):
        receipt = Receipt(
            timestamp=datetime(2025, 11, 2, 9, 30),
            lines=[ReceiptLine(1, "Widget", 3, 10.0, 30.0, 4)],
            total=30.0,
            failures=[LineFailure(2, "Gadget", 1, "insufficient stock")],
        )
        md = receipt_markdown(receipt)
        self.assertIn("2025-11-02 09:30:00", md)
        self.assertIn("| Widget | 3 | $30.00 | 4/5 |", md)
        self.assertIn("- Gadget x 1: insufficient stock", md)
        self.assertIn("**TOTAL PAID:** $30.00", md)


if __name__ == "__main__":
    unittest.main()
