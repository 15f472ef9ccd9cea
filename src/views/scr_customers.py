from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, MarkdownViewer, Select

import db.crud as crud
from db.models import CustomerSummary, Profile
from functions.admin_role import add_admin_role
from functions.https import HttpsError
from utils.messages import ModeSwitchedMessage, RoleChangedMessage
from utils.pure import format_money, format_ts, generate_markdown_table
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal

CUSTOMER_STATUSES = ["active", "inactive"]


class CustomersScreen(BaseScreen):
    """
    Customer profiles with per-customer order totals; admins can narrow the
    list by name/email and status, and promote any listed account to admin.
    """

    BINDINGS = [
        Binding("a", "make_admin", "Make Admin", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._customers: List[CustomerSummary] = []
        self._search: str = ""
        self._status: str = "all"

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-customer-detail", show_table_of_contents=False)
            with Horizontal(id="hort-customer-filters"):
                yield Select(
                    [("All statuses", "all")] + [(s.title(), s) for s in CUSTOMER_STATUSES],
                    value="all",
                    allow_blank=False,
                    id="select-customer-status",
                )
                yield Input(placeholder="Search by name or email...", id="input-customer-search")
            yield DataTable(id="table-customers")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Button("Make Admin", id="btn-make-admin", variant="warning")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Email", "Phone", "Joined", "Status", "Orders", "Spent ($)")

    @on(Select.Changed, "#select-customer-status")
    def handle_status_filter(self, ev: Select.Changed) -> None:
        self._status = str(ev.value)
        self.handle_refresh()

    @on(Input.Submitted, "#input-customer-search")
    def handle_search(self, ev: Input.Submitted) -> None:
        self._search = ev.value.strip()
        self.handle_refresh()

    @on(Button.Pressed, "#btn-refresh")
    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    @on(RoleChangedMessage)
    @work(exclusive=True, group="customers")
    async def handle_refresh(self) -> None:
        self._customers = await crud.search_customers(
            self.app.state.client, self._search, self._status
        )
        table = self.query_one(DataTable)
        table.clear()
        for summary in self._customers:
            p = summary.profile
            table.add_row(
                p.displayName or "Guest User",
                p.email,
                p.phoneNumber,
                format_ts(p.createdAt),
                p.status,
                summary.orders,
                f"{summary.total_spent:.2f}",
                key=p.uid,
            )
        if self._customers:
            table.cursor_coordinate = (0, 0)
        self._render_detail(self._selected())

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self) -> None:
        self._render_detail(self._selected())

    def _selected(self) -> Optional[CustomerSummary]:
        table = self.query_one(DataTable)
        if table.row_count == 0 or table.cursor_row is None:
            return None
        if 0 <= table.cursor_row < len(self._customers):
            return self._customers[table.cursor_row]
        return None

    def _render_detail(self, summary: Optional[CustomerSummary]) -> None:
        viewer = self.query_one("#md-customer-detail", MarkdownViewer)
        if summary is None:
            viewer.document.update("### No matching customers.")
            return

        profile: Profile = summary.profile
        addr = profile.shippingAddress
        rows = [
            ["User ID", profile.uid],
            ["Email", profile.email],
            ["Phone", profile.phoneNumber],
            ["Address", f"{addr.address1} {addr.address2}, {addr.city}, {addr.state} {addr.zip}" if addr else None],
            ["Last Login", format_ts(profile.lastLogin)],
            ["Orders", summary.orders],
            ["Total Spent", format_money(summary.total_spent)],
            ["Last Order", format_ts(summary.last_order)],
        ]
        viewer.document.update(
            f"### {profile.displayName or 'Guest User'}\n\n"
            + generate_markdown_table(["Field", "Value"], rows, ["l", "l"])
        )

    @on(Button.Pressed, "#btn-make-admin")
    def handle_make_admin_button(self) -> None:
        self.action_make_admin()

    @work()
    async def action_make_admin(self) -> None:
        summary = self._selected()
        if summary is None:
            return
        email = summary.profile.email
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Grant admin access to {email}?",
                primary_text="Grant",
                secondary_text="Cancel",
                tone="warning",
            )
        ):
            return

        try:
            result = await add_admin_role(
                self.app.state.client,
                {"email": email},
                self.app.state.call_context(),
            )
        except HttpsError as e:
            self.notify(f"{e.message}: {e.details or e.code}", severity="error")
            return
        self.notify(result["message"])
        self.post_message(RoleChangedMessage(email))
