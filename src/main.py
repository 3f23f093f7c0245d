from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from market.errors import LoadError
from utils.logger import get_logger
from utils.messages import ModeSwitchedMessage, QuitRequestedMessage, UserLogoutMessage
from utils.state import GlobalState
from views.scr_cart import CartScreen
from views.scr_catalog import CatalogScreen
from views.scr_login import LoginScreen
from views.scr_seller_products import SellerProductsScreen

_logger = get_logger(__name__)


class MarketplaceApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "catalog": CatalogScreen,
        "cart": CartScreen,
        "seller_products": SellerProductsScreen,
    }

    SELLER_MODES = {"seller_products": "Seller Dashboard"}
    CUSTOMER_MODES = {
        "catalog": "Browse Products",
        "cart": "Cart",
    }

    CSS_PATH = [
        "styles/index.tcss",
        "styles/login.tcss",
        "styles/catalog.tcss",
        "styles/cart.tcss",
        "styles/seller.tcss",
    ]

    state: GlobalState

    def __init__(self, state: GlobalState | None = None):
        super().__init__()
        self.state = state or GlobalState()

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        try:
            self.state.load()
        except LoadError as e:
            _logger.error(f"Could not load marketplace data: {e}")
            self.exit(return_code=1, message=f"Could not load marketplace data: {e}")
            return
        if self.state.rejected:
            self.notify(
                f"{len(self.state.rejected)} saved records could not be restored.",
                severity="warning",
            )
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        self.state.save()
        self.state.logout()
        self.notify("Logout successful.")
        self.main_flow()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.state.save()
        self.exit()

    @work
    async def main_flow(self):
        await self.push_screen_wait(LoginScreen())
        if self.state.role == "customer":
            new_mode = "catalog"
        elif self.state.role == "seller":
            new_mode = "seller_products"
        else:
            return
        self.post_message(ModeSwitchedMessage(self.current_mode, new_mode))
        await self.switch_mode(new_mode)


def run() -> None:
    MarketplaceApp().run()


if __name__ == "__main__":
    run()
