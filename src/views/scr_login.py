from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Input, Label, Select, TabbedContent, TabPane

from market.persistence import DELIMITER
from utils.messages import UserLoginMessage
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal, QuitDialogModal

ROLE_OPTIONS = [("Customer", "customer"), ("Seller", "seller")]


class LoginScreen(BaseScreen):
    """
    Log in by email as a customer or a seller, or register a new account.
    Dismissed once a user is logged in; the role is on app.state.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-loginscr"):
            with TabPane("Login", id="tab-login"):
                with Vertical(id="div-login"):
                    yield Label("I am a")
                    yield Select(
                        ROLE_OPTIONS,
                        value="customer",
                        allow_blank=False,
                        id="select-login-role",
                    )
                    yield Label("Email")
                    yield Input(placeholder="user@example.com", id="input-login-email")
                    with Horizontal(id="div-login-btns"):
                        yield Button("Quit", id="btn-quit")
                        yield Button("Login", id="btn-login", variant="primary")

            with TabPane("Sign up", id="tab-signup"):
                with Vertical(id="div-reg"):
                    yield Label("Register as")
                    yield Select(
                        ROLE_OPTIONS,
                        value="customer",
                        allow_blank=False,
                        id="select-reg-role",
                    )
                    yield Label("Name")
                    yield Input(placeholder="Jane Doe", id="input-reg-name")
                    yield Label("Email")
                    yield Input(placeholder="user@example.com", id="input-reg-email")
                    with Vertical(id="div-reg-customer"):
                        yield Label("Address")
                        yield Input(
                            placeholder="123 Main St, Anytown", id="input-reg-address"
                        )
                        yield Label("Phone")
                        yield Input(placeholder="555-0100", id="input-reg-phone")
                    with Container(id="div-reg-btns"):
                        yield Button("Register", id="btn-reg", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-email").focus()

    @on(Select.Changed, "#select-reg-role")
    def handle_reg_role_changed(self, event: Select.Changed) -> None:
        # sellers only give a name and an email
        self.query_one("#div-reg-customer").display = event.value == "customer"

    @on(Input.Submitted, "#input-login-email")
    @on(Button.Pressed, "#btn-login")
    def handle_login_submit(self) -> None:
        role = self.query_one("#select-login-role", Select).value
        email_input = self.query_one("#input-login-email", Input)
        email = email_input.value.strip()

        if not email:
            self.notify("Email cannot be empty!", severity="error")
            return

        if self.app.state.login(role, email):
            name = (self.app.state.customer or self.app.state.seller).name
            self.notify(f"Welcome back, {name}!")
            self.app.post_message(UserLoginMessage())
            self.dismiss()
        else:
            self.notify("Email not found.", severity="error")
            email_input.focus()
            email_input.add_class("-invalid")

    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        records = self.app.state.records
        role = self.query_one("#select-reg-role", Select).value
        fields = {
            "name": self.query_one("#input-reg-name", Input).value.strip(),
            "email": self.query_one("#input-reg-email", Input).value.strip(),
        }
        if role == "customer":
            fields["address"] = self.query_one("#input-reg-address", Input).value.strip()
            fields["phone"] = self.query_one("#input-reg-phone", Input).value.strip()

        if not all(fields.values()):
            self.notify("Make sure all inputs are filled.", severity="error")
            return
        if any(DELIMITER in v for v in fields.values()):
            self.notify(f"Inputs cannot contain '{DELIMITER}'.", severity="error")
            return

        if role == "customer":
            if not records.customer_email_available(fields["email"]):
                self.notify("Email already taken.", severity="error")
                return
            uid = records.add_customer(
                fields["name"], fields["address"], fields["phone"], fields["email"]
            )
        else:
            if not records.seller_email_available(fields["email"]):
                self.notify("Email already taken.", severity="error")
                return
            uid = records.add_seller(fields["name"], fields["email"])
        self.app.state.save()

        await self.app.push_screen_wait(
            DialogModal(f"Welcome, {fields['name']}! Your {role} id is {uid}.")
        )

        self.get_child_by_type(TabbedContent).active = "tab-login"
        self.query_one("#select-login-role", Select).value = role
        login_email = self.query_one("#input-login-email", Input)
        login_email.value = fields["email"]
        login_email.focus()

        self.notify("Registration successful.")

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())
