from __future__ import annotations

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.validation import Number
from textual.widgets import Button, DataTable, Input, Label

from market.persistence import DELIMITER
from market.ranker import rank_by_rating
from utils.messages import CatalogChangedMessage, ModeSwitchedMessage
from utils.pure import product_rows
from views.base_screen import BaseScreen
from views.scr_catalog import PRODUCT_COLUMNS


class SellerProductsScreen(BaseScreen):
    """
    Sellers list new products and see their own listings by rating.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            with Horizontal(id="hort-new-product"):
                with Vertical():
                    yield Label("Product Name")
                    yield Input(id="input-name", placeholder="Widget")
                with Vertical():
                    yield Label("Category")
                    yield Input(id="input-category", placeholder="Tools")
                with Vertical():
                    yield Label("Price ($)")
                    yield Input(
                        id="input-price",
                        type="number",
                        validators=[Number(minimum=0.0)],
                    )
                with Vertical():
                    yield Label("Quantity")
                    yield Input(
                        id="input-qty",
                        type="integer",
                        validators=[Number(minimum=0)],
                    )
                with Horizontal(id="div-button"):
                    yield Button("Add Product", id="btn-add", variant="success")
            yield Label("Your products (by rating)")
            yield DataTable(id="table-my-products")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns(*PRODUCT_COLUMNS)
        self.handle_reload()
        self.query_one("#input-name", Input).focus()

    @on(CatalogChangedMessage)
    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    def handle_reload(self) -> None:
        seller = self.app.state.seller
        if seller is None:
            return
        mine = self.app.state.records.products_by_seller(seller.id)
        table = self.query_one(DataTable)
        table.clear()
        table.add_rows(product_rows(rank_by_rating(mine)))

    @on(Button.Pressed, "#btn-add")
    def handle_add(self) -> None:
        name_input = self.query_one("#input-name", Input)
        category_input = self.query_one("#input-category", Input)
        price_input = self.query_one("#input-price", Input)
        qty_input = self.query_one("#input-qty", Input)

        name = name_input.value.strip()
        category = category_input.value.strip()
        if not name or not category:
            self.notify("Name and category are required.", severity="error")
            return
        if DELIMITER in name or DELIMITER in category:
            self.notify(f"Inputs cannot contain '{DELIMITER}'.", severity="error")
            return

        for field_input in (price_input, qty_input):
            if not field_input.value or not field_input.is_valid:
                field_input.focus()
                field_input.add_class("-invalid")
                self.notify("Enter a non-negative price and quantity.", severity="error")
                return

        state = self.app.state
        try:
            pid = state.records.add_product(
                name,
                float(price_input.value),
                category,
                int(qty_input.value),
                state.seller.id,
            )
        except ValueError as e:
            self.notify(str(e), severity="error")
            return
        state.save()

        self.notify(f"Product '{name}' added successfully (ID {pid}).")
        for field_input in (name_input, category_input, price_input, qty_input):
            field_input.value = ""
        name_input.focus()
        self.app.post_message(CatalogChangedMessage())
        self.handle_reload()
