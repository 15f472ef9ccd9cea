import os
from dataclasses import dataclass

DEFAULT_DB_PATH = "data/platform.sqlite"


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings read from the environment.
    Debug logging is switched by DEBUG, which the logger reads itself.

    Fields:
      - db_path: sqlite file backing the identity and document stores
    """

    db_path: str = DEFAULT_DB_PATH

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(db_path=os.getenv("SHOPADMIN_DB_PATH") or DEFAULT_DB_PATH)
