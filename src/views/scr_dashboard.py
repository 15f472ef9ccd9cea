import asyncio

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import ScreenResume
from textual.widgets import Button, MarkdownViewer

import db.crud as crud
from utils.messages import ModeSwitchedMessage, OrderUpdatedMessage
from utils.pure import format_money, format_ts, generate_markdown_table
from views.base_screen import BaseScreen

RECENT_ORDERS = 5


class DashboardScreen(BaseScreen):
    """
    Store overview: order totals, status breakdown, customers, recent orders.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-dashboard", show_table_of_contents=False)
            yield Button("Refresh", id="btn-refresh", variant="primary")

    def on_mount(self) -> None:
        self.handle_reload()

    @on(Button.Pressed, "#btn-refresh")
    @on(OrderUpdatedMessage)
    @on(ScreenResume)
    @on(ModeSwitchedMessage)
    @work(exclusive=True)
    async def handle_reload(self) -> None:
        client = self.app.state.client
        stats, cust, (recent, _) = await asyncio.gather(
            crud.order_stats(client),
            crud.customer_stats(client),
            crud.list_orders(client, page=1, page_size=RECENT_ORDERS),
        )

        overview_md = (
            "### Orders\n\n"
            f"- Total Orders: {stats['total_orders']}\n"
            f"- Total Revenue: {format_money(stats['total_revenue'])}\n"
            f"- Average Order Value: {format_money(stats['average_order_value'])}\n\n"
            "### Customers\n\n"
            f"- Total: {cust['total_customers']}\n"
            f"- New (last 30 days): {cust['new_customers']}\n"
            f"- Active: {cust['active_customers']}\n"
            f"- Inactive: {cust['inactive_customers']}\n\n"
        )
        status_md = generate_markdown_table(
            ["Status", "Orders"],
            [[s.title(), n] for s, n in stats["status_counts"].items()],
            ["l", "r"],
        )
        recent_md = generate_markdown_table(
            ["Order", "Date", "Customer", "Status", "Total"],
            [
                [o.id[:8], format_ts(o.createdAt), o.userEmail, o.status, format_money(o.total)]
                for o in recent
            ],
            ["l", "l", "l", "c", "r"],
        )

        md = (
            overview_md
            + "### By Status\n\n"
            + status_md
            + "\n\n### Recent Orders\n\n"
            + (recent_md if recent else "_No orders yet. Run the seed script._")
        )
        self.query_one("#md-dashboard", MarkdownViewer).document.update(md)
