"""Translate catalog errors into HTTP errors."""
from fastapi import HTTPException, status

from catalog_core.errors import (
    BusyError,
    CatalogError,
    NotAuthenticatedError,
    NotFoundError,
    SignInError,
    StoreConnectionError,
    StorePermissionError,
    ValidationError,
)


def to_http_error(error: CatalogError) -> HTTPException:
    """Map a catalog error to the status the console expects."""
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=422,
            detail={"field": error.field, "message": error.message},
        )
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    if isinstance(error, StoreConnectionError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Catalog store unavailable")
    if isinstance(error, (NotAuthenticatedError, StorePermissionError, SignInError)):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(error) or "Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(error, BusyError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Another operation is in progress")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Operation failed")
