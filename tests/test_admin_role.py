import os
import sys
import tempfile
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from db.client import PlatformClient  # noqa: E402
from functions.admin_role import add_admin_role  # noqa: E402
from functions.https import (  # noqa: E402
    INTERNAL,
    UNAUTHENTICATED,
    AuthContext,
    CallableContext,
    HttpsError,
)


class AdminRoleTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.client = PlatformClient.open(os.path.join(self.temp_dir.name, "test.sqlite"))

    async def asyncSetUp(self):
        self.caller = await self.client.auth.create_user("caller@example.com", "pw")
        self.target = await self.client.auth.create_user("target@example.com", "pw")
        self.context = CallableContext(auth=AuthContext(uid=self.caller.uid))

    def tearDown(self):
        self.temp_dir.cleanup()

    async def test_unauthenticated_caller_is_rejected(self):
        with self.assertRaises(HttpsError) as ctx:
            await add_admin_role(
                self.client, {"email": "target@example.com"}, CallableContext()
            )
        self.assertEqual(ctx.exception.code, UNAUTHENTICATED)
        # nothing was written
        target = await self.client.auth.get_user(self.target.uid)
        self.assertEqual(target.custom_claims, {})

    async def test_grants_admin_claim(self):
        result = await add_admin_role(
            self.client, {"email": "target@example.com"}, self.context
        )
        self.assertEqual(
            result, {"message": "Success! target@example.com has been made an admin."}
        )
        self.assertTrue((await self.client.auth.get_user(self.target.uid)).is_admin)
        # the caller itself needs no admin claim
        self.assertFalse((await self.client.auth.get_user(self.caller.uid)).is_admin)

    async def test_unknown_email_maps_to_internal(self):
        with self.assertRaises(HttpsError) as ctx:
            await add_admin_role(
                self.client, {"email": "ghost@example.com"}, self.context
            )
        self.assertEqual(ctx.exception.code, INTERNAL)
        self.assertEqual(ctx.exception.message, "Error adding admin role")
        self.assertIn("ghost@example.com", ctx.exception.details)
        self.assertEqual(ctx.exception.to_dict()["status"], INTERNAL)

    async def test_missing_email_maps_to_internal(self):
        with self.assertRaises(HttpsError) as ctx:
            await add_admin_role(self.client, {}, self.context)
        self.assertEqual(ctx.exception.code, INTERNAL)


if __name__ == "__main__":
    unittest.main()
