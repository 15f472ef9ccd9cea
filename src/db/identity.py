# identity store: user accounts, password check, custom claims
from __future__ import annotations

import hashlib
import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import aiosqlite

from db import errors
from db.database import Database
from db.models import UserRecord

_ACCOUNT_COLUMNS = (
    "uid, email, display_name, email_verified, disabled, custom_claims, created_at"
)


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode()).hexdigest()


def _row_to_user(row) -> UserRecord:
    return UserRecord(
        uid=row[0],
        email=row[1],
        display_name=row[2],
        email_verified=bool(row[3]),
        disabled=bool(row[4]),
        custom_claims=json.loads(row[5] or "{}"),
        created_at=datetime.fromisoformat(row[6]),
    )


def _check_email(email: Optional[str]) -> str:
    if not email or not isinstance(email, str) or "@" not in email:
        raise errors.PlatformError(
            errors.INVALID_EMAIL, f"The email address is improperly formatted: {email!r}"
        )
    return email.strip()


class IdentityStore:
    """Account operations consumed by the seeding workflow and the admin tools."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_user(
        self,
        email: str,
        password: str,
        display_name: Optional[str] = None,
        email_verified: bool = False,
    ) -> UserRecord:
        """
        Create an account and return its record.
        Raises EmailAlreadyExistsError if the email is taken.
        """
        email = _check_email(email)
        uid = uuid.uuid4().hex[:28]
        created_at = datetime.now(timezone.utc)
        try:
            async with self._db.connect() as conn:
                cur = await conn.execute(
                    "SELECT 1 FROM accounts WHERE email = ? LIMIT 1;", (email,)
                )
                exists = await cur.fetchone()
                await cur.close()
                if exists:
                    raise errors.EmailAlreadyExistsError(email)
                await conn.execute(
                    """
                    INSERT INTO accounts(uid, email, password_hash, display_name,
                                         email_verified, disabled, custom_claims, created_at)
                    VALUES (?, ?, ?, ?, ?, 0, '{}', ?);
                    """,
                    (
                        uid,
                        email,
                        hash_password(password),
                        display_name,
                        int(email_verified),
                        created_at.isoformat(),
                    ),
                )
                await conn.commit()
        except aiosqlite.IntegrityError:
            raise errors.EmailAlreadyExistsError(email)
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.AUTH_INTERNAL, str(e)) from e

        return UserRecord(
            uid=uid,
            email=email,
            display_name=display_name,
            email_verified=email_verified,
            disabled=False,
            custom_claims={},
            created_at=created_at,
        )

    async def _fetch_one(self, where: str, params: tuple) -> Optional[UserRecord]:
        try:
            async with self._db.connect() as conn:
                cur = await conn.execute(
                    f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE {where};", params
                )
                row = await cur.fetchone()
                await cur.close()
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.AUTH_INTERNAL, str(e)) from e
        return _row_to_user(row) if row else None

    async def get_user_by_email(self, email: str) -> UserRecord:
        email = _check_email(email)
        user = await self._fetch_one("email = ?", (email,))
        if user is None:
            raise errors.UserNotFoundError(email)
        return user

    async def get_user(self, uid: str) -> UserRecord:
        user = await self._fetch_one("uid = ?", (uid,))
        if user is None:
            raise errors.UserNotFoundError(uid)
        return user

    async def list_users(self) -> List[UserRecord]:
        try:
            async with self._db.connect() as conn:
                cur = await conn.execute(
                    f"SELECT {_ACCOUNT_COLUMNS} FROM accounts ORDER BY created_at;"
                )
                rows = await cur.fetchall()
                await cur.close()
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.AUTH_INTERNAL, str(e)) from e
        return [_row_to_user(row) for row in rows]

    async def set_custom_user_claims(self, uid: str, claims: Dict[str, Any]) -> None:
        """Replace the account's custom claims."""
        try:
            async with self._db.connect() as conn:
                cur = await conn.execute(
                    "UPDATE accounts SET custom_claims = ? WHERE uid = ?;",
                    (json.dumps(claims or {}), uid),
                )
                updated = cur.rowcount
                await cur.close()
                await conn.commit()
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.AUTH_INTERNAL, str(e)) from e
        if not updated:
            raise errors.UserNotFoundError(uid)

    async def verify_password(self, email: str, password: str) -> Optional[UserRecord]:
        """Return the account if email/password match; otherwise None."""
        try:
            email = _check_email(email)
        except errors.PlatformError:
            return None
        try:
            async with self._db.connect() as conn:
                cur = await conn.execute(
                    f"""
                    SELECT {_ACCOUNT_COLUMNS}
                    FROM accounts
                    WHERE email = ? AND password_hash = ? AND disabled = 0;
                    """,
                    (email, hash_password(password)),
                )
                row = await cur.fetchone()
                await cur.close()
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.AUTH_INTERNAL, str(e)) from e
        return _row_to_user(row) if row else None
