# document store: schemaless JSON documents grouped in collections
from __future__ import annotations

import re
import secrets
import string
from typing import Any, Dict, List, Optional, Sequence, Tuple

import aiosqlite

from db import errors
from db.database import Database, dump_json, load_json

_AUTO_ID_ALPHABET = string.ascii_letters + string.digits
_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")

Where = Sequence[Tuple[str, Any]]


def auto_id() -> str:
    """20-character document id, same shape as the hosted store generates."""
    return "".join(secrets.choice(_AUTO_ID_ALPHABET) for _ in range(20))


def _json_path(field: str) -> str:
    if not _FIELD_RE.match(field):
        raise ValueError(f"Invalid field path: {field!r}")
    return "$." + field


def _where_clause(where: Optional[Where]) -> Tuple[str, List[Any]]:
    clause = "collection = ?"
    params: List[Any] = []
    for field, value in where or []:
        clause += " AND json_extract(data, ?) = ?"
        params.extend([_json_path(field), value])
    return clause, params


class DocumentStore:
    """
    Each write is independent; there are no transactions across calls.
    Equality filters and single-field ordering are all the admin tools need.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def set_document(
        self, collection: str, doc_id: str, fields: Dict[str, Any]
    ) -> None:
        """Create or overwrite the document at collection/doc_id."""
        try:
            async with self._db.connect() as conn:
                await conn.execute(
                    """
                    INSERT INTO documents(collection, doc_id, data) VALUES (?, ?, ?)
                    ON CONFLICT(collection, doc_id) DO UPDATE SET data = excluded.data;
                    """,
                    (collection, doc_id, dump_json(fields)),
                )
                await conn.commit()
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.DOCUMENT_INTERNAL, str(e)) from e

    async def add_document(self, collection: str, fields: Dict[str, Any]) -> str:
        """Create a document under a generated id and return the id."""
        doc_id = auto_id()
        try:
            async with self._db.connect() as conn:
                await conn.execute(
                    "INSERT INTO documents(collection, doc_id, data) VALUES (?, ?, ?);",
                    (collection, doc_id, dump_json(fields)),
                )
                await conn.commit()
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.DOCUMENT_INTERNAL, str(e)) from e
        return doc_id

    async def get_document(
        self, collection: str, doc_id: str
    ) -> Optional[Dict[str, Any]]:
        try:
            async with self._db.connect() as conn:
                cur = await conn.execute(
                    "SELECT data FROM documents WHERE collection = ? AND doc_id = ?;",
                    (collection, doc_id),
                )
                row = await cur.fetchone()
                await cur.close()
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.DOCUMENT_INTERNAL, str(e)) from e
        return load_json(row[0]) if row else None

    async def update_document(
        self, collection: str, doc_id: str, fields: Dict[str, Any]
    ) -> None:
        """Merge top-level fields into an existing document."""
        current = await self.get_document(collection, doc_id)
        if current is None:
            raise errors.DocumentNotFoundError(collection, doc_id)
        current.update(fields)
        await self.set_document(collection, doc_id, current)

    async def query(
        self,
        collection: str,
        where: Optional[Where] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Tuple[str, Dict[str, Any]]]:
        """
        Return (doc_id, fields) pairs matching every equality filter in `where`.
        """
        clause, params = _where_clause(where)
        sql = f"SELECT doc_id, data FROM documents WHERE {clause}"
        if order_by:
            direction = "DESC" if descending else "ASC"
            sql += f" ORDER BY json_extract(data, ?) {direction}, rowid"
            params.append(_json_path(order_by))
        else:
            sql += " ORDER BY rowid"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit, max(offset, 0)])
        try:
            async with self._db.connect() as conn:
                cur = await conn.execute(sql + ";", (collection, *params))
                rows = await cur.fetchall()
                await cur.close()
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.DOCUMENT_INTERNAL, str(e)) from e
        return [(row[0], load_json(row[1])) for row in rows]

    async def count(self, collection: str, where: Optional[Where] = None) -> int:
        clause, params = _where_clause(where)
        try:
            async with self._db.connect() as conn:
                cur = await conn.execute(
                    f"SELECT COUNT(*) FROM documents WHERE {clause};",
                    (collection, *params),
                )
                total = (await cur.fetchone())[0]
                await cur.close()
        except aiosqlite.Error as e:
            raise errors.PlatformError(errors.DOCUMENT_INTERNAL, str(e)) from e
        return total
