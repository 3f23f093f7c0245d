from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, MarkdownViewer

from market.cart import add_to_cart
from market.errors import MarketplaceError
from market.models import Product
from utils.pure import generate_markdown_table, money


class AddToCartModal(ModalScreen[bool]):
    """
    Product detail plus a quantity picker.
    Returns True if an item was staged, False if not.
    """

    order_qty = reactive(1)

    def __init__(self, pid: int) -> None:
        super().__init__()
        self._pid = pid
        self._prod: Product | None = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-prod-detail"):
            yield MarkdownViewer("", show_table_of_contents=False)
            with Vertical():
                yield Label("Quantity")
                with Horizontal():
                    yield Button("-", id="btn-sub-qty")
                    yield Input(value="1", id="input-order-qty", type="integer")
                    yield Button("+", id="btn-add-qty")
                with Horizontal():
                    yield Button("Go Back", id="btn-quit")
                    yield Button("Add to Cart", id="btn-addcart", variant="primary")

    async def on_mount(self):
        records = self.app.state.records
        self._prod = records.find_product_by_id(self._pid)
        if self._prod is None:
            self.notify(f"Product ID {self._pid} not found.", severity="error")
            self.dismiss(False)
            return

        seller = records.find_seller_by_id(self._prod.seller_id)
        rows = [
            ["ID", self._prod.id],
            ["Category", self._prod.category],
            ["Price", money(self._prod.price)],
            ["In Stock", self._prod.quantity],
            [
                "Rating",
                f"{self._prod.average_rating:.2f} ({self._prod.rating_count} ratings)",
            ],
            ["Seller", seller.name if seller else "-"],
        ]
        md = generate_markdown_table(["Attribute", "Value"], rows, ["l", "l"])
        await self.query_one(MarkdownViewer).document.update(
            f"### {self._prod.name}\n\n{md}"
        )

        if self._prod.quantity < 1:
            order_btn = self.query_one("#btn-addcart", Button)
            order_btn.label = "Out of Stock"
            order_btn.disabled = True
            order_btn.variant = "warning"

        qty_input = self.query_one("#input-order-qty", Input)
        qty_input.validators = [Number(minimum=1, maximum=max(self._prod.quantity, 1))]
        qty_input.focus()
        self.watch_order_qty(self.order_qty)

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    def on_input_changed(self, message: Input.Changed) -> None:
        if (
            message.input.id == "input-order-qty"
            and message.value
            and message.input.is_valid
            and self.focused == message.input
        ):
            self.order_qty = int(message.value)

    def watch_order_qty(self, qty: int) -> None:
        if self._prod is None:
            return
        self.query_one("#btn-sub-qty").disabled = qty <= 1
        self.query_one("#btn-add-qty").disabled = qty >= self._prod.quantity
        qty_input = self.query_one("#input-order-qty", Input)
        if qty_input.value != str(qty):
            qty_input.value = str(qty)

    @on(Button.Pressed, "#btn-add-qty")
    def handle_add_qty(self):
        self.order_qty += 1

    @on(Button.Pressed, "#btn-sub-qty")
    def handle_sub_qty(self):
        self.order_qty -= 1

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)

    @on(Button.Pressed, "#btn-addcart")
    def handle_addcart(self):
        state = self.app.state
        try:
            item = add_to_cart(state.records, state.customer, self._pid, self.order_qty)
        except (MarketplaceError, ValueError) as e:
            self.notify(str(e), severity="error")
            return

        state.save()
        self.app.notify(f"Added {item.buy_qty} x {item.product.name} to cart.")
        self.dismiss(True)
