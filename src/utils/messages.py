from textual.message import Message


class QuitRequestedMessage(Message):
    """
    Posted to the app once the user confirms quitting; the app saves and exits.
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    Posted by the sidebar after the user confirms logging out.
    The app saves, forgets the user and shows the login screen again.
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Posted by the login screen once a customer or seller is logged in.
    """

    bubble = True


class CartChangedMessage(Message):
    """
    The customer's ledger changed: an item was staged, undone, or the whole
    cart was settled. Screens showing the ledger re-render it.
    """

    bubble = True


class CatalogChangedMessage(Message):
    """
    Live product records changed, either stock and ratings after a checkout
    or a new listing from a seller. Product tables reload.
    """

    bubble = True


class ModeSwitchedMessage(Message):
    """
    Carries the old and new mode names whenever the app switches between
    the customer or seller screens.
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
