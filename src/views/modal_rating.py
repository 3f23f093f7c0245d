from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label

from market.checkout import MAX_RATING, MIN_RATING
from market.models import CartItem


class RatingModal(ModalScreen[str]):
    """
    Ask for a rating of a settled item. Returns the raw answer; the checkout
    processor decides whether it is valid and asks again if not.
    """

    def __init__(self, item: CartItem, attempt: int = 1) -> None:
        super().__init__()
        self.item = item
        self.attempt = attempt

    def compose(self) -> ComposeResult:
        with Vertical(classes="div-dialog"):
            yield Label(
                f"Rate {self.item.product.name} ({MIN_RATING}-{MAX_RATING})",
                classes="caption",
            )
            if self.attempt > 1:
                yield Label(
                    f"Invalid rating. Please enter {MIN_RATING}-{MAX_RATING}.",
                    id="label-rating-invalid",
                )
            yield Input(placeholder=str(MAX_RATING), id="input-rating", type="integer")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Submit", id="btn-submit", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#input-rating").focus()

    @on(Input.Submitted, "#input-rating")
    @on(Button.Pressed, "#btn-submit")
    def handle_submit(self) -> None:
        self.dismiss(self.query_one("#input-rating", Input).value)
