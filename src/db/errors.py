# error types raised by the identity and document stores

EMAIL_ALREADY_EXISTS = "auth/email-already-exists"
USER_NOT_FOUND = "auth/user-not-found"
INVALID_EMAIL = "auth/invalid-email"
AUTH_INTERNAL = "auth/internal-error"
DOCUMENT_NOT_FOUND = "firestore/not-found"
DOCUMENT_INTERNAL = "firestore/internal"


class PlatformError(Exception):
    """
    Base class for every failure reported by the platform stores.

    `code` follows the "<service>/<reason>" convention so callers can branch
    on it without importing every subclass.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.message} ({self.code})"


class EmailAlreadyExistsError(PlatformError):
    def __init__(self, email: str) -> None:
        super().__init__(
            EMAIL_ALREADY_EXISTS,
            f"The email address {email} is already in use by another account.",
        )
        self.email = email


class UserNotFoundError(PlatformError):
    def __init__(self, identifier: str) -> None:
        super().__init__(
            USER_NOT_FOUND,
            f"There is no user record corresponding to the identifier {identifier}.",
        )
        self.identifier = identifier


class DocumentNotFoundError(PlatformError):
    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(DOCUMENT_NOT_FOUND, f"No document at {collection}/{doc_id}.")
        self.collection = collection
        self.doc_id = doc_id
