import os
import sys
import tempfile
import unittest
from unittest import mock
from datetime import datetime, timezone

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

import aiosqlite  # noqa: E402

from db import errors  # noqa: E402
from db.client import PlatformClient  # noqa: E402
from db.database import Database  # noqa: E402
from db.documents import DocumentStore  # noqa: E402


class StoreTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "nested", "test.sqlite")
        self.client = PlatformClient.open(self.db_path)

    def tearDown(self):
        self.temp_dir.cleanup()

    # ---------- Identity store ----------

    async def test_create_and_lookup_user(self):
        user = await self.client.auth.create_user(
            "john.doe@example.com", "password123", "John Doe", email_verified=True
        )
        self.assertTrue(user.uid)
        self.assertTrue(user.email_verified)
        self.assertEqual(user.custom_claims, {})
        self.assertFalse(user.is_admin)

        found = await self.client.auth.get_user_by_email("john.doe@example.com")
        self.assertEqual(found.uid, user.uid)
        self.assertEqual(found.display_name, "John Doe")
        self.assertEqual((await self.client.auth.get_user(user.uid)).email, user.email)
        self.assertEqual(len(await self.client.auth.list_users()), 1)

    async def test_duplicate_email_is_rejected(self):
        await self.client.auth.create_user("jane@example.com", "pw")
        with self.assertRaises(errors.EmailAlreadyExistsError) as ctx:
            await self.client.auth.create_user("jane@example.com", "other")
        self.assertEqual(ctx.exception.code, errors.EMAIL_ALREADY_EXISTS)

        # emails compare case-insensitively
        with self.assertRaises(errors.EmailAlreadyExistsError):
            await self.client.auth.create_user("JANE@example.com", "pw")

    async def test_lookup_failures(self):
        with self.assertRaises(errors.UserNotFoundError) as ctx:
            await self.client.auth.get_user_by_email("nobody@example.com")
        self.assertEqual(ctx.exception.code, errors.USER_NOT_FOUND)

        with self.assertRaises(errors.PlatformError) as ctx:
            await self.client.auth.get_user_by_email(None)
        self.assertEqual(ctx.exception.code, errors.INVALID_EMAIL)

        with self.assertRaises(errors.UserNotFoundError):
            await self.client.auth.get_user("missing-uid")

    async def test_custom_claims(self):
        user = await self.client.auth.create_user("bob@example.com", "pw")
        await self.client.auth.set_custom_user_claims(user.uid, {"admin": True})
        self.assertTrue((await self.client.auth.get_user(user.uid)).is_admin)

        with self.assertRaises(errors.UserNotFoundError):
            await self.client.auth.set_custom_user_claims("missing-uid", {"admin": True})

    async def test_verify_password(self):
        await self.client.auth.create_user("alice@example.com", "secret")
        self.assertIsNotNone(
            await self.client.auth.verify_password("alice@example.com", "secret")
        )
        self.assertIsNone(
            await self.client.auth.verify_password("alice@example.com", "wrong")
        )
        self.assertIsNone(await self.client.auth.verify_password("", "secret"))

    # ---------- Document store ----------

    async def test_set_get_and_overwrite(self):
        fs = self.client.firestore
        self.assertIsNone(await fs.get_document("users", "u1"))
        await fs.set_document("users", "u1", {"email": "a@example.com", "n": 1})
        await fs.set_document("users", "u1", {"email": "b@example.com"})
        self.assertEqual(await fs.get_document("users", "u1"), {"email": "b@example.com"})

    async def test_add_document_generates_ids(self):
        fs = self.client.firestore
        when = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
        first = await fs.add_document("orders", {"total": 1.5, "createdAt": when})
        second = await fs.add_document("orders", {"total": 2.5, "createdAt": when})
        self.assertEqual(len(first), 20)
        self.assertNotEqual(first, second)
        self.assertEqual(await fs.count("orders"), 2)

        # datetimes are stored as ISO-8601 strings
        data = await fs.get_document("orders", first)
        self.assertEqual(data["createdAt"], when.isoformat())

    async def test_update_document(self):
        fs = self.client.firestore
        await fs.set_document("orders", "o1", {"status": "processing", "total": 10})
        await fs.update_document("orders", "o1", {"status": "shipped"})
        self.assertEqual(
            await fs.get_document("orders", "o1"), {"status": "shipped", "total": 10}
        )
        with self.assertRaises(errors.DocumentNotFoundError):
            await fs.update_document("orders", "missing", {"status": "shipped"})

    async def test_query_filters_orders_and_pages(self):
        fs = self.client.firestore
        for i, status in enumerate(["shipped", "delivered", "delivered", "processing"]):
            await fs.set_document(
                "orders", f"o{i}", {"status": status, "createdAt": f"2025-01-0{i + 1}"}
            )
        await fs.set_document("users", "u1", {"status": "delivered"})

        delivered = await fs.query("orders", [("status", "delivered")])
        self.assertEqual([doc_id for doc_id, _ in delivered], ["o1", "o2"])
        self.assertEqual(await fs.count("orders", [("status", "delivered")]), 2)

        newest = await fs.query("orders", order_by="createdAt", descending=True, limit=2)
        self.assertEqual([doc_id for doc_id, _ in newest], ["o3", "o2"])
        page2 = await fs.query(
            "orders", order_by="createdAt", descending=True, limit=2, offset=2
        )
        self.assertEqual([doc_id for doc_id, _ in page2], ["o1", "o0"])

        with self.assertRaises(ValueError):
            await fs.query("orders", [("status') OR 1=1 --", "x")])

    # ---------- Database ----------

    async def test_connection_closed_when_init_fails(self):
        database = Database(os.path.join(self.temp_dir.name, "init.sqlite"))
        opened = []
        real_connect = aiosqlite.connect

        def tracking_connect(*args, **kwargs):
            conn = real_connect(*args, **kwargs)
            conn.close = mock.AsyncMock(wraps=conn.close)
            opened.append(conn)
            return conn

        with mock.patch("db.database.aiosqlite.connect", side_effect=tracking_connect), \
                mock.patch(
                    "db.database._table_exists",
                    side_effect=aiosqlite.OperationalError("database is locked"),
                ):
            with self.assertRaises(aiosqlite.OperationalError):
                async with database.connect():
                    pass

        self.assertEqual(len(opened), 1)
        opened[0].close.assert_awaited_once()

        # a later connection still initializes the tables
        store = DocumentStore(database)
        await store.set_document("users", "u1", {"status": "active"})
        self.assertEqual(await store.count("users"), 1)


if __name__ == "__main__":
    unittest.main()
