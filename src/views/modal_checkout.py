import asyncio

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, MarkdownViewer

from market.checkout import CheckoutProcessor
from market.errors import EmptyCartError
from market.models import CartItem, Receipt
from utils.logger import get_logger
from utils.pure import cart_markdown, receipt_markdown
from views.modal_dialog import DialogModal
from views.modal_rating import RatingModal

_logger = get_logger(__name__)


class CheckoutModal(ModalScreen[bool]):
    """
    Order summary in the order items will be processed, then the receipt.
    Return True if the cart was settled, False if the customer backed out.
    """

    def __init__(self):
        super().__init__()
        self._settled = False

    def compose(self) -> ComposeResult:
        with Vertical():
            yield MarkdownViewer("", show_table_of_contents=False)
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Place Order", id="btn-submit", variant="primary")

    async def on_mount(self):
        # items are settled oldest first
        cart = self.app.state.customer.cart
        items = cart.peek_all()[::-1]
        await self.query_one(MarkdownViewer).document.update(
            cart_markdown(items, "Order Summary", cart.estimated_total())
        )

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape" and not self.query_one("#btn-quit").disabled:
            self.dismiss(self._settled)

    @on(Button.Pressed, "#btn-submit")
    @work()
    async def handle_submit(self):
        if not await self.app.push_screen_wait(
            DialogModal(
                "Place order? Items that cannot be fulfilled will be dropped.",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        self.query_one("#btn-submit").disabled = True
        self.query_one("#btn-quit").disabled = True
        self.settle()

    @work(thread=True, exclusive=True)
    def settle(self) -> None:
        state = self.app.state
        processor = CheckoutProcessor(state.records, state.persistence, self._rate)
        try:
            receipt = processor.settle(state.customer)
        except EmptyCartError as e:
            self.app.call_from_thread(self.notify, str(e), severity="warning")
            self.app.call_from_thread(self.dismiss, False)
            return
        self.app.call_from_thread(self._show_receipt, receipt)

    def _rate(self, item: CartItem, attempt: int) -> str:
        # runs on the worker thread; blocks until the modal is answered
        return self.app.call_from_thread(self._ask_rating, item, attempt)

    async def _ask_rating(self, item: CartItem, attempt: int) -> str:
        answer = asyncio.get_running_loop().create_future()
        self.app.push_screen(RatingModal(item, attempt), answer.set_result)
        return await answer

    async def _show_receipt(self, receipt: Receipt) -> None:
        self._settled = True
        await self.query_one(MarkdownViewer).document.update(receipt_markdown(receipt))
        if receipt.failures:
            self.notify(
                f"{len(receipt.failures)} item(s) could not be processed.",
                severity="warning",
            )
        quit_btn = self.query_one("#btn-quit", Button)
        quit_btn.label = "Done"
        quit_btn.disabled = False
        quit_btn.focus()

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(self._settled)
