"""Document transport: the document database behind the record store, with its access rules."""
import logging
import math
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Callable, Iterator, NamedTuple, Optional, Protocol

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, StatementError
from sqlalchemy.orm import Session

from catalog_core.authorization import AccessRules
from catalog_core.errors import (
    AccessRevokedError,
    NotFoundError,
    SessionExpiredError,
    StoreConnectionError,
    StorePermissionError,
    ValidationError,
)
from catalog_core.identity import Identity
from repositories.document_repository import (
    delete_document,
    insert_document,
    list_documents,
    merge_document,
)

LOG = logging.getLogger(__name__)

_SCALARS = (str, int, float, bool, type(None))

SessionScope = Callable[[], AbstractContextManager[Session]]
IdentitySource = Callable[[], Optional[Identity]]


class StoredDocument(NamedTuple):
    id: str
    data: dict[str, Any]


class DocumentTransport(Protocol):
    """Generic document database: list by sort key, insert, merge-update, delete."""

    def list_documents(self, collection: str, order_by: str) -> list[StoredDocument]: ...

    def insert(self, collection: str, data: dict[str, Any]) -> str: ...

    def merge(self, collection: str, document_id: str, data: dict[str, Any]) -> None: ...

    def delete(self, collection: str, document_id: str) -> None: ...


def _sort_value(value: Any) -> float:
    """Numeric sort key; non-numeric values (and ints too large for a float) sort as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _check_shape(data: Any) -> None:
    """Reject documents the store cannot hold: flat objects of JSON scalars only."""
    if not isinstance(data, dict):
        raise ValidationError("document body must be an object")
    for key, value in data.items():
        if not isinstance(key, str) or not key:
            raise ValidationError("document keys must be non-empty strings")
        if not isinstance(value, _SCALARS):
            raise ValidationError(f"unsupported value for {key}", field=key)
        if isinstance(value, float) and not math.isfinite(value):
            raise ValidationError(f"unsupported value for {key}", field=key)


class SqlDocumentTransport:
    """
    Document database stored through SQLAlchemy. One session per round trip.

    Access rules are checked against the identity returned by `identity_source`
    on every call; denials raise StorePermissionError variants.
    """

    def __init__(
        self,
        session_scope: SessionScope,
        rules: Optional[AccessRules] = None,
        identity_source: IdentitySource = lambda: None,
    ) -> None:
        self._session_scope = session_scope
        self.rules = rules or AccessRules.open()
        self._identity_source = identity_source

    def list_documents(self, collection: str, order_by: str) -> list[StoredDocument]:
        self._check_access(write=False)
        with self._round_trip("list") as session:
            # Bodies written by other clients may not be objects; they read as empty.
            rows = [
                StoredDocument(d.id, dict(d.data) if isinstance(d.data, dict) else {})
                for d in list_documents(session, collection)
            ]
        # Stable sort: ties keep the store's iteration order.
        return sorted(rows, key=lambda d: _sort_value(d.data.get(order_by)))

    def insert(self, collection: str, data: dict[str, Any]) -> str:
        self._check_access(write=True)
        _check_shape(data)
        with self._round_trip("insert") as session:
            return insert_document(session, collection, data).id

    def merge(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        self._check_access(write=True)
        _check_shape(data)
        with self._round_trip("merge") as session:
            if merge_document(session, collection, document_id, data) is None:
                raise NotFoundError(document_id)

    def delete(self, collection: str, document_id: str) -> None:
        self._check_access(write=True)
        with self._round_trip("delete") as session:
            if not delete_document(session, collection, document_id):
                raise NotFoundError(document_id)

    def _check_access(self, write: bool) -> None:
        if self.rules.is_open(write):
            return
        identity = self._identity_source()
        if identity is None:
            raise StorePermissionError("sign-in required")
        if identity.is_expired():
            raise SessionExpiredError(f"session expired for {identity.email}")
        if not self.rules.admits(identity):
            raise AccessRevokedError(f"access denied for {identity.email}")

    @contextmanager
    def _round_trip(self, operation: str) -> Iterator[Session]:
        """Open a session and translate database failures into catalog errors."""
        try:
            with self._session_scope() as session:
                yield session
        except (OperationalError, InterfaceError) as e:
            LOG.warning("Document store %s failed: %s", operation, e)
            raise StoreConnectionError(f"document store unreachable during {operation}") from e
        except (IntegrityError, StatementError) as e:
            raise ValidationError(f"document rejected by the store during {operation}") from e
