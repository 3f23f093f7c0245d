from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.widgets import DataTable, Input, Label, Select

from market.ranker import rank_by_rating
from utils.messages import CartChangedMessage, CatalogChangedMessage, ModeSwitchedMessage
from utils.pure import product_rows
from views.base_screen import BaseScreen
from views.modal_add_to_cart import AddToCartModal

PRODUCT_COLUMNS = ["ID", "Name", "Category", "Price", "Stock", "Rating"]


class CatalogScreen(BaseScreen):
    """
    Browse products, for customers only.

    With no filter the table shows every product by rating, best first.
    Searching by name or filtering by category lists matches in catalogue
    order instead.
    """

    # only here to be displayed in footer
    BINDINGS = [
        Binding("enter", "noop", "Add to Cart", show=True, key_display="⏎"),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-filters"):
            yield Input(id="input-search", placeholder="Search by name...")
            yield Select([], prompt="All categories", id="select-category")
        yield Label("Recommended products (by rating)", id="label-listing", markup=False)
        yield DataTable(id="table-products")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns(*PRODUCT_COLUMNS)

        self.handle_catalog_change()
        self.query_one("#input-search").focus()

    def action_noop(self) -> None:
        pass

    @on(Input.Changed, "#input-search")
    @on(Select.Changed, "#select-category")
    def handle_filter_change(self) -> None:
        self.refresh_listing()

    @on(CatalogChangedMessage)
    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    def handle_catalog_change(self) -> None:
        select = self.query_one("#select-category", Select)
        selected = select.value
        categories = self.app.state.records.categories()
        select.set_options((c, c) for c in categories)
        if selected in categories:
            select.value = selected
        self.refresh_listing()

    def refresh_listing(self) -> None:
        records = self.app.state.records
        fragment = self.query_one("#input-search", Input).value
        category = self.query_one("#select-category", Select).value
        label = self.query_one("#label-listing", Label)

        if fragment:
            products = records.search_products(fragment)
            label.update(f"Products matching '{fragment}'")
        elif isinstance(category, str):
            products = records.products_in_category(category)
            label.update(f"Products in '{category}'")
        else:
            products = rank_by_rating(records.products)
            label.update("Recommended products (by rating)")

        if not products:
            label.update("No products found.")

        table = self.query_one(DataTable)
        table.clear()
        table.add_rows(product_rows(products))

    @on(DataTable.RowSelected, "#table-products")
    @work()
    async def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        pid = int(event.data_table.get_row(event.row_key)[0])
        if await self.app.push_screen_wait(AddToCartModal(pid)):
            self.app.post_message(CartChangedMessage())
