from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import db.crud as crud
from db.client import PlatformClient
from db.models import UserRecord
from functions.https import AuthContext, CallableContext


@dataclass
class GlobalState:
    """
    Centralized application state shared by screens.

    Fields:
      - client: platform client every screen reads and writes through
      - user: the logged-in administrator, None until login succeeds
    """

    client: PlatformClient
    user: Optional[UserRecord] = None

    async def login(self, email: str, pwd: str) -> Optional[UserRecord]:
        """Log in if the credentials belong to an admin account."""
        self.user = await crud.login_admin(self.client, email, pwd)
        return self.user

    def logout(self) -> None:
        self.user = None

    def call_context(self) -> CallableContext:
        """Caller context for invoking callable functions as the logged-in user."""
        if self.user is None:
            return CallableContext(auth=None)
        return CallableContext(
            auth=AuthContext(uid=self.user.uid, token=dict(self.user.custom_claims))
        )
