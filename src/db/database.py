# manages connection to db, provides helper methods internal to db package
import asyncio
import json
import os.path
from contextlib import asynccontextmanager
from datetime import datetime
from sqlite3 import Row

import aiosqlite

from utils.logger import get_logger

_logger = get_logger(__name__)

DB_INIT_SCRIPTS = [
    os.path.join(os.path.dirname(__file__), "platform-tables.sql"),
]


def _json_default(val):
    if isinstance(val, datetime):
        return val.isoformat()
    raise TypeError(f"Object of type {type(val).__name__} is not JSON serializable")


def dump_json(data) -> str:
    """Serialize document fields; datetimes become ISO-8601 strings."""
    return json.dumps(data, default=_json_default)


def load_json(text: str):
    return json.loads(text)


async def _init_db(conn: aiosqlite.Connection) -> None:
    for script in DB_INIT_SCRIPTS:
        if not os.path.exists(script) or os.path.getsize(script) == 0:
            continue
        _logger.debug(f"Initializing database with script {script}...")
        with open(script, "r") as f:
            await conn.executescript(f.read())
    await conn.commit()


async def _table_exists(conn: aiosqlite.Connection, table_name: str) -> bool:
    cur = await conn.execute(
        """
        SELECT name
        FROM sqlite_master
        WHERE type = 'table'
          AND name = ?;
        """,
        (table_name,),
    )
    row = await cur.fetchone()
    await cur.close()
    return row is not None


class Database:
    """
    One sqlite file holding both platform stores.

    Each instance tracks its own initialization, so tests can point separate
    instances at separate files.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @asynccontextmanager
    async def connect(self) -> aiosqlite.Connection:
        """Async context manager yielding an aiosqlite connection.

        Ensures the tables exist on first use.
        """
        parent = os.path.dirname(self.path)
        if parent and not os.path.isdir(parent):
            os.makedirs(parent, exist_ok=True)

        conn = await aiosqlite.connect(self.path)
        conn.row_factory = Row

        try:
            if not self._initialized:
                async with self._init_lock:
                    if not self._initialized:
                        exists = await _table_exists(conn, "documents")
                        if not exists:
                            _logger.info(f"Initializing database at {self.path}...")
                            await _init_db(conn)
                        self._initialized = True
            yield conn
        finally:
            await conn.close()
