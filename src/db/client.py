# platform client: the handles every entry point receives explicitly
from __future__ import annotations

from dataclasses import dataclass

from db.database import Database
from db.documents import DocumentStore
from db.identity import IdentityStore

USERS = "users"
ORDERS = "orders"


@dataclass(frozen=True)
class PlatformClient:
    auth: IdentityStore
    firestore: DocumentStore

    @classmethod
    def open(cls, db_path: str) -> "PlatformClient":
        database = Database(db_path)
        return cls(auth=IdentityStore(database), firestore=DocumentStore(database))
