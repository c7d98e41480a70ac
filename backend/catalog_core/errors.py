"""Catalog error taxonomy shared by the transport, record store and controller."""
from typing import Optional


class CatalogError(Exception):
    """Base class for all catalog errors."""


class StoreConnectionError(CatalogError, ConnectionError):
    """Document store unreachable."""


class StorePermissionError(CatalogError, PermissionError):
    """Document store denied the operation for the current identity."""


class SessionExpiredError(StorePermissionError):
    """The signed-in identity is no longer valid (token expired)."""


class AccessRevokedError(StorePermissionError):
    """The access rules no longer admit the identity (or there is none)."""


class NotFoundError(CatalogError, LookupError):
    """Update/delete target does not exist."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"document not found: {document_id}")
        self.document_id = document_id


class ValidationError(CatalogError, ValueError):
    """Rejected field values. `field` is None when the store rejected the whole document."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class BusyError(CatalogError):
    """Another user action is still in flight."""


class NotAuthenticatedError(CatalogError):
    """Operation requires an authenticated admin."""


class SignInError(CatalogError):
    """Identity credential could not be verified."""
