"""
Create (or promote) the development admin account.

    python src/create_admin.py [--db PATH] [--email E] [--password P]
"""
import argparse
import asyncio
import sys

from db.client import PlatformClient
from db.errors import UserNotFoundError, PlatformError
from db.models import UserRecord
from utils.config import Settings
from utils.logger import get_logger

_logger = get_logger("create_admin")

DEFAULT_EMAIL = "admin@example.com"
DEFAULT_PASSWORD = "Admin@123"


async def create_admin_user(client: PlatformClient, email: str, password: str) -> UserRecord:
    """Get or create the account, then set the admin claim on it."""
    try:
        user = await client.auth.get_user_by_email(email)
        _logger.info("User already exists, updating admin privileges...")
    except UserNotFoundError:
        user = await client.auth.create_user(
            email=email, password=password, email_verified=True
        )
        _logger.info("✅ Successfully created new admin user")

    await client.auth.set_custom_user_claims(user.uid, {"admin": True})
    return await client.auth.get_user(user.uid)


def main(argv=None) -> int:
    settings = Settings.from_env()
    p = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    p.add_argument("--db", default=settings.db_path)
    p.add_argument("--email", default=DEFAULT_EMAIL)
    p.add_argument("--password", default=DEFAULT_PASSWORD)
    args = p.parse_args(argv)

    client = PlatformClient.open(args.db)
    try:
        asyncio.run(create_admin_user(client, args.email, args.password))
    except PlatformError as e:
        _logger.error(f"❌ Error creating admin user: {e}")
        return 1

    _logger.info("✅ Success! Admin user has been configured.")
    _logger.info(f"Email: {args.email}")
    _logger.info(f"Password: {args.password}")
    _logger.info("You can now log in to the admin console with these credentials.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
