from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the admin logs out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired when the admin logged in, so the screen can refresh
    """

    bubble = True


class OrderUpdatedMessage(Message):
    """
    Fired when an order's status changed.
    Listened to by the orders list and the dashboard
    """

    bubble = True


class RoleChangedMessage(Message):
    """
    Fired after the admin claim was granted to an account
    """

    bubble = True

    def __init__(self, email: str) -> None:
        super().__init__()
        self.email = email


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
