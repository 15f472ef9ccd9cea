# addAdminRole callable: grant the "admin" custom claim by email
from typing import Any, Dict

from db.client import PlatformClient
from db.errors import PlatformError
from functions.https import INTERNAL, UNAUTHENTICATED, CallableContext, HttpsError
from utils.logger import get_logger

_logger = get_logger(__name__)


async def add_admin_role(
    client: PlatformClient, data: Dict[str, Any], context: CallableContext
) -> Dict[str, str]:
    """
    Set `admin: true` on the account registered under data["email"].

    Any authenticated caller may grant the role; there is no further
    authorization check.
    """
    if context.auth is None:
        raise HttpsError(
            UNAUTHENTICATED, "You must be logged in to add an admin role"
        )

    email = (data or {}).get("email")
    try:
        user = await client.auth.get_user_by_email(email)
        await client.auth.set_custom_user_claims(user.uid, {"admin": True})
    except PlatformError as e:
        _logger.error(f"Error adding admin role: {e}")
        raise HttpsError(INTERNAL, "Error adding admin role", e.message) from e

    _logger.info(f"{context.auth.uid} granted admin role to {email}")
    return {"message": f"Success! {email} has been made an admin."}
