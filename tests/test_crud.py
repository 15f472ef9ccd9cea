import os
import random
import sys
import tempfile
import unittest
from unittest import mock
from dataclasses import replace
from datetime import datetime, timedelta, timezone

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

import check_orders  # noqa: E402
import create_admin  # noqa: E402
from db import crud, errors  # noqa: E402
from db.client import ORDERS, USERS, PlatformClient  # noqa: E402
from seed.catalog import SAMPLE_CUSTOMERS, SAMPLE_PRODUCTS  # noqa: E402
from seed.workflow import seed_customer, seed_data  # noqa: E402
from utils.config import DEFAULT_DB_PATH, Settings  # noqa: E402
from utils.pure import format_ts, generate_markdown_table  # noqa: E402
from utils.state import GlobalState  # noqa: E402

NOW = datetime(2025, 6, 1, 9, 30, tzinfo=timezone.utc)


class CrudTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # Point the stores at a temporary file
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "test.sqlite")
        self.client = PlatformClient.open(self.db_path)

    async def asyncSetUp(self):
        self.report = await seed_data(
            self.client, SAMPLE_CUSTOMERS, SAMPLE_PRODUCTS, random.Random(11), NOW
        )
        self.total_orders = self.report.orders_created

    def tearDown(self):
        self.temp_dir.cleanup()

    # ---------- Auth ----------

    async def test_login_admin_requires_claim(self):
        email, pwd = SAMPLE_CUSTOMERS[0].email, SAMPLE_CUSTOMERS[0].password
        self.assertIsNone(await crud.login_admin(self.client, email, pwd))

        user = await self.client.auth.get_user_by_email(email)
        await self.client.auth.set_custom_user_claims(user.uid, {"admin": True})
        self.assertEqual((await crud.login_admin(self.client, email, pwd)).uid, user.uid)
        self.assertIsNone(await crud.login_admin(self.client, email, "wrong"))

    async def test_state_login_and_call_context(self):
        await create_admin.create_admin_user(self.client, "admin@example.com", "Admin@123")
        state = GlobalState(client=self.client)
        self.assertIsNone(state.call_context().auth)

        user = await state.login("admin@example.com", "Admin@123")
        self.assertIsNotNone(user)
        self.assertEqual(state.call_context().auth.uid, user.uid)
        self.assertTrue(state.call_context().auth.token["admin"])

        state.logout()
        self.assertIsNone(state.user)

    # ---------- Orders ----------

    async def test_list_orders_newest_first_with_paging(self):
        orders, total = await crud.list_orders(self.client, page=1, page_size=4)
        self.assertEqual(total, self.total_orders)
        self.assertEqual(len(orders), 4)
        created = [o.createdAt for o in orders]
        self.assertEqual(created, sorted(created, reverse=True))

        everything, total_all = await crud.list_orders(self.client, page_size=None)
        self.assertEqual(len(everything), total_all)
        page2, _ = await crud.list_orders(self.client, page=2, page_size=4)
        self.assertEqual([o.id for o in page2], [o.id for o in everything[4:8]])

    async def test_list_orders_status_filter(self):
        delivered, total = await crud.list_orders(
            self.client, page_size=None, status="delivered"
        )
        self.assertEqual(len(delivered), total)
        self.assertTrue(all(o.status == "delivered" for o in delivered))
        _, total_all = await crud.list_orders(self.client, page_size=None, status="all")
        self.assertEqual(total_all, self.total_orders)

    async def test_update_order_status(self):
        order_id = self.report.results[0].order_ids[0]
        when = NOW + timedelta(hours=1)
        await crud.update_order_status(self.client, order_id, "cancelled", when)
        order = await crud.get_order(self.client, order_id)
        self.assertEqual(order.status, "cancelled")
        self.assertEqual(order.updatedAt, when)

        with self.assertRaises(ValueError):
            await crud.update_order_status(self.client, order_id, "lost")
        with self.assertRaises(errors.DocumentNotFoundError):
            await crud.update_order_status(self.client, "missing", "shipped")
        self.assertIsNone(await crud.get_order(self.client, "missing"))

    async def test_search_orders(self):
        first = self.report.results[0]
        by_email = await crud.search_orders(self.client, "  " + first.email.upper())
        self.assertEqual(sorted(o.id for o in by_email), sorted(first.order_ids))

        by_id = await crud.search_orders(self.client, first.order_ids[0])
        self.assertEqual([o.id for o in by_id], [first.order_ids[0]])
        self.assertEqual(await crud.search_orders(self.client, ""), [])
        self.assertEqual(await crud.search_orders(self.client, "no-such-id"), [])
        self.assertEqual(await crud.search_orders(self.client, "nobody@example.com"), [])

    async def test_search_orders_mixed_case_email(self):
        customer = replace(SAMPLE_CUSTOMERS[0], email="Mixed.Case@Example.com")
        result = await seed_customer(
            self.client, customer, SAMPLE_PRODUCTS, random.Random(12), NOW
        )
        found = await crud.search_orders(self.client, "mixed.case@example.com")
        self.assertEqual(sorted(o.id for o in found), sorted(result.order_ids))
        self.assertTrue(all(o.userEmail == "Mixed.Case@Example.com" for o in found))

    async def test_order_stats(self):
        stats = await crud.order_stats(self.client)
        docs = await self.client.firestore.query(ORDERS)
        revenue = round(sum(d["total"] for _, d in docs), 2)
        self.assertEqual(stats["total_orders"], self.total_orders)
        self.assertAlmostEqual(stats["total_revenue"], revenue, places=2)
        self.assertAlmostEqual(
            stats["average_order_value"], round(revenue / self.total_orders, 2), places=2
        )
        self.assertEqual(sum(stats["status_counts"].values()), self.total_orders)
        self.assertEqual(stats["status_counts"]["cancelled"], 0)

    # ---------- Customers ----------

    async def test_customers(self):
        profiles = await crud.list_customers(self.client)
        self.assertEqual(len(profiles), 5)
        self.assertEqual(
            {p.email for p in profiles}, {c.email for c in SAMPLE_CUSTOMERS}
        )

        first = self.report.results[0]
        summary = await crud.get_customer(self.client, first.user_id)
        self.assertEqual(summary.orders, len(first.order_ids))
        orders = await crud.search_orders(self.client, first.email)
        self.assertAlmostEqual(
            summary.total_spent, round(sum(o.total for o in orders), 2), places=2
        )
        self.assertEqual(summary.last_order, max(o.createdAt for o in orders))
        self.assertIsNone(await crud.get_customer(self.client, "missing"))

        stats = await crud.customer_stats(self.client, now=NOW)
        self.assertEqual(stats["total_customers"], 5)
        self.assertEqual(stats["active_customers"], 5)
        self.assertEqual(stats["inactive_customers"], 0)
        self.assertTrue(0 <= stats["new_customers"] <= 5)

    async def test_search_customers(self):
        everyone = await crud.search_customers(self.client)
        self.assertEqual(len(everyone), 5)
        self.assertEqual(sum(s.orders for s in everyone), self.total_orders)

        # substring of the display name, any case
        by_name = await crud.search_customers(self.client, "  dOE ")
        self.assertEqual([s.profile.email for s in by_name], ["john.doe@example.com"])
        first = self.report.results[0]
        self.assertEqual(by_name[0].orders, len(first.order_ids))
        expected = await crud.get_customer(self.client, first.user_id)
        self.assertAlmostEqual(by_name[0].total_spent, expected.total_spent, places=2)
        self.assertEqual(by_name[0].last_order, expected.last_order)

        # substring of the email
        by_email = await crud.search_customers(self.client, "EXAMPLE.COM")
        self.assertEqual(len(by_email), 5)
        self.assertEqual(await crud.search_customers(self.client, "zzz"), [])

        await self.client.firestore.update_document(
            USERS, first.user_id, {"status": "inactive"}
        )
        inactive = await crud.search_customers(self.client, status="inactive")
        self.assertEqual([s.profile.uid for s in inactive], [first.user_id])
        active = await crud.search_customers(self.client, "doe", status="active")
        self.assertEqual(active, [])
        self.assertEqual(len(await crud.search_customers(self.client, status="all")), 5)

    # ---------- Scripts ----------

    async def test_create_admin_is_idempotent(self):
        user = await create_admin.create_admin_user(
            self.client, "admin@example.com", "Admin@123"
        )
        self.assertTrue(user.is_admin)
        self.assertTrue(user.email_verified)
        again = await create_admin.create_admin_user(
            self.client, "admin@example.com", "ignored"
        )
        self.assertEqual(again.uid, user.uid)

        # promoting an existing customer keeps its password
        customer = SAMPLE_CUSTOMERS[1]
        await create_admin.create_admin_user(self.client, customer.email, "ignored")
        self.assertIsNotNone(
            await crud.login_admin(self.client, customer.email, customer.password)
        )

    async def test_check_orders(self):
        self.assertEqual(await check_orders.check_orders(self.client), self.total_orders)

        empty = PlatformClient.open(os.path.join(self.temp_dir.name, "empty.sqlite"))
        self.assertEqual(await check_orders.check_orders(empty), 0)


class PureHelpersTestCase(unittest.TestCase):
    def test_markdown_table(self):
        md = generate_markdown_table(["A", "B"], [["x|y", None]], ["l", "r"])
        self.assertEqual(md.splitlines(), ["| A | B |", "| :--- | ---: |", "| x\\|y | - |"])
        self.assertEqual(
            generate_markdown_table(None, [["k", "v"], [1, 2]]).splitlines()[2], "| 1 | 2 |"
        )
        self.assertEqual(generate_markdown_table(None, []), "")
        with self.assertRaises(ValueError):
            generate_markdown_table(["A"], [["x"]], ["l", "r"])

    def test_format_ts(self):
        self.assertEqual(format_ts(None), "-")
        self.assertEqual(format_ts(datetime(2025, 1, 2, 3, 4)), "2025-01-02 03:04")

    def test_settings_from_env(self):
        with mock.patch.dict(os.environ, {"SHOPADMIN_DB_PATH": "/tmp/x.sqlite"}):
            self.assertEqual(Settings.from_env().db_path, "/tmp/x.sqlite")
        with mock.patch.dict(os.environ, {"SHOPADMIN_DB_PATH": ""}):
            self.assertEqual(Settings.from_env().db_path, DEFAULT_DB_PATH)


if __name__ == "__main__":
    unittest.main()
