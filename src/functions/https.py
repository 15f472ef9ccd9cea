# callable-function surface: request context and the error type callers see
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

UNAUTHENTICATED = "unauthenticated"
INTERNAL = "internal"


class HttpsError(Exception):
    """Error returned to the caller of a callable function."""

    def __init__(self, code: str, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = {"status": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


@dataclass(frozen=True)
class AuthContext:
    uid: str
    token: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CallableContext:
    auth: Optional[AuthContext] = None
