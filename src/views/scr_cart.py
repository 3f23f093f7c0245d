from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.widgets import Button, MarkdownViewer, Rule

from market.cart import undo_last_item
from market.errors import EmptyCartError
from utils.messages import CartChangedMessage, CatalogChangedMessage, ModeSwitchedMessage
from utils.pure import cart_markdown
from views.base_screen import BaseScreen
from views.modal_checkout import CheckoutModal


class CartScreen(BaseScreen):
    """
    Staged items, most recently added first, with undo and checkout.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield MarkdownViewer(id="md-cart", show_table_of_contents=False)
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Undo Last Item", id="btn-undo", variant="warning")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    def on_mount(self):
        self.handle_cart_change()

    @on(CartChangedMessage)
    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    @work(exclusive=True)
    async def handle_cart_change(self):
        customer = self.app.state.customer
        if customer is None:
            return
        md = cart_markdown(
            customer.cart.peek_all(),
            "Your Shopping Cart",
            customer.cart.estimated_total(),
        )
        await self.query_one("#md-cart", MarkdownViewer).document.update(md)
        self.query_one("#btn-undo").disabled = not customer.cart
        self.query_one("#btn-checkout").disabled = not customer.cart

    @on(Button.Pressed, "#btn-undo")
    def handle_undo(self) -> None:
        state = self.app.state
        try:
            item = undo_last_item(state.customer)
        except EmptyCartError as e:
            self.notify(str(e), severity="warning")
            return
        state.save()
        self.notify(f"{item.product.name} removed from cart.")
        self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-checkout")
    @work()
    async def handle_checkout(self) -> None:
        if not self.app.state.customer.cart:
            self.notify("Cart is empty. Add items before checking out.", severity="warning")
            return

        if await self.app.push_screen_wait(CheckoutModal()):
            self.app.post_message(CatalogChangedMessage())
        self.post_message(CartChangedMessage())
