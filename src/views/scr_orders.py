from math import ceil
from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.reactive import reactive
from textual.validation import Number
from textual.widgets import Button, DataTable, Input, Label, MarkdownViewer, Select

import db.crud
from db.errors import PlatformError
from db.models import Order
from seed.orders import ORDER_STATUSES
from utils.messages import ModeSwitchedMessage, OrderUpdatedMessage
from utils.pure import format_ts, generate_markdown_table
from views.base_screen import BaseScreen
from views.modal_dialog import StatusPickerModal

PAGE_SIZE = 8


class OrdersScreen(BaseScreen):
    """
    Admins browse every order, newest first, and move orders between statuses.

    Layout:
    - Markdown detail view at the top, showing the selected order.
    - Filter row: status select and an email / order id search box.
    - Orders table with Prev/Next paging.
    """

    BINDINGS = [
        Binding("enter", "noop", "View Order Detail", show=True, key_display="⏎"),
        Binding("u", "update_status", "Update Status", show=True),
    ]

    page_idx = reactive(1)
    page_cnt = reactive(1)
    status_filter = reactive("all")

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []
        self._search: str = ""

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            with Horizontal(id="hort-order-filters"):
                yield Select(
                    [("All statuses", "all")] + [(s.title(), s) for s in ORDER_STATUSES],
                    value="all",
                    allow_blank=False,
                    id="select-status",
                )
                yield Input(placeholder="Search by email or order id...", id="input-search")
            yield DataTable(id="table-orders")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Button("Update Status", id="btn-status", variant="warning")
            yield Button("<", id="btn-prev")
            yield Input("1", id="input-page", type="integer")
            yield Label(" / 1", id="label-total-page-cnt")
            yield Button(">", id="btn-next")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Date", "Customer", "Status", "Total ($)")

        self.page_idx = 1

    @on(Button.Pressed, "#btn-refresh")
    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    @on(OrderUpdatedMessage)
    async def handle_refresh(self):
        self._load_orders(self.page_idx)

    @on(DataTable.RowHighlighted)
    async def handle_row_highlight(self) -> None:
        self._render_detail(self._selected_order())

    @on(Select.Changed, "#select-status")
    def handle_status_filter(self, ev: Select.Changed) -> None:
        self.status_filter = str(ev.value)

    @on(Input.Submitted, "#input-search")
    def handle_search(self, ev: Input.Submitted) -> None:
        self._search = ev.value.strip()
        self._first_page()

    def watch_status_filter(self, old: str, new: str) -> None:
        self._first_page()

    def _first_page(self) -> None:
        # the page_idx watcher reloads; it does not fire when the value is unchanged
        if self.page_idx == 1:
            self._load_orders(1)
        else:
            self.page_idx = 1

    def watch_page_idx(self, old: int, new: int) -> None:
        self.query_one("#input-page", Input).value = str(new)
        self._refresh_buttons()
        self._load_orders(new)

    def _refresh_buttons(self) -> None:
        self.query_one("#btn-prev", Button).disabled = self.page_idx <= 1
        self.query_one("#btn-next", Button).disabled = self.page_idx >= self.page_cnt
        self.query_one("#input-page", Input).validators = [
            Number(minimum=1, maximum=self.page_cnt)
        ]

    @on(Button.Pressed, "#btn-prev")
    def handle_prev(self) -> None:
        if self.page_idx > 1:
            self.page_idx -= 1

    @on(Button.Pressed, "#btn-next")
    def handle_next(self) -> None:
        if self.page_idx < self.page_cnt:
            self.page_idx += 1

    @on(Input.Changed, "#input-page")
    def handle_page_input(self, ev: Input.Changed) -> None:
        if ev.value and ev.value.isdigit():
            new_idx = max(1, min(int(ev.value), self.page_cnt))
            if new_idx != self.page_idx:
                self.page_idx = new_idx

    def _selected_order(self) -> Optional[Order]:
        table = self.query_one(DataTable)
        if table.row_count == 0 or table.cursor_row is None:
            return None
        if 0 <= table.cursor_row < len(self._orders):
            return self._orders[table.cursor_row]
        return None

    @work(exclusive=True, group="orders")
    async def _load_orders(self, page: int) -> None:
        client = self.app.state.client
        if self._search:
            orders = await db.crud.search_orders(client, self._search)
            if self.status_filter != "all":
                orders = [o for o in orders if o.status == self.status_filter]
            total = len(orders)
            orders = orders[(page - 1) * PAGE_SIZE : page * PAGE_SIZE]
        else:
            orders, total = await db.crud.list_orders(
                client, page, PAGE_SIZE, self.status_filter
            )

        table = self.query_one(DataTable)
        table.clear()
        for o in orders:
            table.add_row(
                o.id[:8],
                format_ts(o.createdAt),
                o.userEmail,
                o.status,
                f"{o.total:.2f}",
                key=o.id,
            )
        self._orders = orders
        self.page_cnt = max(ceil(total / PAGE_SIZE), 1)
        self.query_one("#label-total-page-cnt", Label).update(f" / {self.page_cnt}")
        self._refresh_buttons()
        if orders:
            table.cursor_coordinate = (0, 0)
        self._render_detail(orders[0] if orders else None)

    def _render_detail(self, order: Optional[Order]) -> None:
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        if not order:
            viewer.document.update("### Select an order to view its details.")
            return

        addr = order.shippingAddress
        header = (
            f"### Order {order.id}\n"
            f"Customer: {order.userName} <{order.userEmail}>  \n"
            f"Placed: {format_ts(order.createdAt)} · Updated: {format_ts(order.updatedAt)}  \n"
            f"Status: **{order.status}** · Payment: {order.paymentMethod} ({order.paymentStatus})  \n"
            f"Tracking: {order.trackingNumber or '-'}  \n"
            f"Ship To: {addr.name}, {addr.street}, {addr.city}, {addr.state} {addr.zip}\n\n"
        )
        rows = [
            [item.name, item.quantity, f"{item.price:.2f}", f"{item.line_total:.2f}"]
            for item in order.items
        ]
        items_md = generate_markdown_table(
            ["Product", "Qty", "Unit Price", "Line Total"], rows, ["l", "r", "r", "r"]
        )
        footer = (
            f"\n\nSubtotal: ${order.subtotal:.2f} · Shipping: ${order.shipping:.2f}"
            f" · Tax: ${order.tax:.2f}  \n**Total:** ${order.total:.2f}"
        )
        viewer.document.update(header + items_md + footer)

    @on(Button.Pressed, "#btn-status")
    def handle_status_button(self) -> None:
        self.action_update_status()

    @work()
    async def action_update_status(self) -> None:
        order = self._selected_order()
        if order is None:
            self.notify("Select an order first.", severity="warning")
            return

        status = await self.app.push_screen_wait(
            StatusPickerModal(order.status, ORDER_STATUSES)
        )
        if not status:
            return
        try:
            await db.crud.update_order_status(self.app.state.client, order.id, status)
        except PlatformError as e:
            self.notify(f"Update failed: {e.message}", severity="error")
            return
        self.notify(f"Order {order.id[:8]} is now {status}.")
        self.app.post_message(OrderUpdatedMessage())
        self._load_orders(self.page_idx)
