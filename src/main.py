import argparse

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from db.client import PlatformClient
from utils.config import Settings
from utils.messages import ModeSwitchedMessage, QuitRequestedMessage, UserLogoutMessage
from utils.state import GlobalState
from views.scr_customers import CustomersScreen
from views.scr_dashboard import DashboardScreen
from views.scr_login import LoginScreen
from views.scr_orders import OrdersScreen


class ShopAdminApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "dashboard": DashboardScreen,
        "orders": OrdersScreen,
        "customers": CustomersScreen,
    }

    ADMIN_MODES = {
        "dashboard": "Dashboard",
        "orders": "Orders",
        "customers": "Customers",
    }

    CSS_PATH = [
        "styles/index.tcss",
        "styles/login.tcss",
        "styles/orders.tcss",
    ]

    state: GlobalState

    def __init__(self, client: PlatformClient):
        super().__init__()
        self.state = GlobalState(client=client)

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(UserLogoutMessage)
    def handle_user_logout(self):
        self.state.logout()
        self.notify("Logout successful.")
        self.main_flow()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.state.logout()
        self.exit()

    @work
    async def main_flow(self):
        await self.push_screen_wait(LoginScreen())
        if self.state.user is not None:
            self.post_message(ModeSwitchedMessage(self.current_mode, "dashboard"))
            await self.switch_mode("dashboard")


def main(argv=None) -> None:
    settings = Settings.from_env()
    p = argparse.ArgumentParser(description="Shop admin console")
    p.add_argument("--db", default=settings.db_path, help="sqlite file of the stores")
    args = p.parse_args(argv)

    app = ShopAdminApp(PlatformClient.open(args.db))
    app.run()


if __name__ == "__main__":
    main()
