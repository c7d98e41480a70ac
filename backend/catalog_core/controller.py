"""Catalog controller: UI-facing state, write validation, and the admin sign-in policy."""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Mapping, Optional

from catalog_core.authorization import Authorizer, deny_all
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
from catalog_core.identity import Identity, IdentityProvider
from catalog_core.location import Location
from catalog_core.record_store import RecordStore
from catalog_core.validation import normalize_location_fields

LOG = logging.getLogger(__name__)

UNAUTHORIZED_EMAIL = "unauthorized email"
ACCESS_DENIED_MESSAGE = "Access denied: {email} is not allowed to manage the catalog."
CONNECTION_MESSAGE = "Could not reach the catalog. Check your connection and try again."
OPERATION_FAILED_MESSAGE = "The operation failed. Refresh the list and try again."
DELETE_FAILED_MESSAGE = "There was an error deleting the location."
SIGN_IN_FAILED_MESSAGE = "Sign-in failed. Please try again."


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    ACCESS_DENIED = "access_denied"


class DeleteOutcome(str, Enum):
    DELETED = "deleted"
    NOT_CONFIRMED = "not_confirmed"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class CatalogSnapshot:
    """Everything the rendering layer needs; auth_state is None when sign-in is disabled."""

    locations: tuple[Location, ...]
    loading: bool
    auth_state: Optional[AuthState]
    identity: Optional[Identity]
    denied_reason: str
    error_message: str
    editor_open: bool
    editing: Optional[Location]


SnapshotListener = Callable[[CatalogSnapshot], None]


def _message_for(error: CatalogError) -> str:
    if isinstance(error, StoreConnectionError):
        return CONNECTION_MESSAGE
    if isinstance(error, ValidationError):
        return f"Error saving: {error.message}"
    return OPERATION_FAILED_MESSAGE


class CatalogController:
    """
    Single source of truth for the admin console.

    With require_auth the controller runs the sign-in state machine: it follows
    the identity provider, admits identities accepted by `is_authorized`, forces
    sign-out of anyone else, and treats a permission failure while listing as
    the end of the session. Every successful mutation is followed by a fresh
    list; a second action while one is in flight raises BusyError.
    """

    def __init__(
        self,
        store: RecordStore,
        identity_provider: Optional[IdentityProvider] = None,
        *,
        require_auth: bool = True,
        is_authorized: Authorizer = deny_all,
    ) -> None:
        if require_auth and identity_provider is None:
            raise ValueError("require_auth needs an identity provider")
        self._store = store
        self._provider = identity_provider
        self._require_auth = require_auth
        self._is_authorized = is_authorized

        self._lock = threading.Lock()
        self._listeners: list[SnapshotListener] = []
        self._unsubscribe_identity: Optional[Callable[[], None]] = None
        self._suppress_identity_events = False
        self._started = False

        self._locations: tuple[Location, ...] = ()
        self._loading = False
        self._auth_state: Optional[AuthState] = AuthState.UNAUTHENTICATED if require_auth else None
        self._identity: Optional[Identity] = None
        self._denied_reason = ""
        self._error_message = ""
        self._editor_open = False
        self._editing: Optional[Location] = None

    # --- state exposure ---

    @property
    def require_auth(self) -> bool:
        return self._require_auth

    def snapshot(self) -> CatalogSnapshot:
        return CatalogSnapshot(
            locations=self._locations,
            loading=self._loading,
            auth_state=self._auth_state,
            identity=self._identity,
            denied_reason=self._denied_reason,
            error_message=self._error_message,
            editor_open=self._editor_open,
            editing=self._editing,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener; it receives the current snapshot now and after every change."""
        self._listeners.append(listener)
        listener(self.snapshot())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    # --- lifecycle ---

    def start(self) -> None:
        """Follow the identity provider (require_auth) or load the list right away."""
        if self._started:
            return
        self._started = True
        if not self._require_auth:
            self._refresh_quietly()
            return
        self._auth_state = AuthState.AUTHENTICATING
        self._notify()
        self._unsubscribe_identity = self._provider.on_identity_change(self._on_identity_change)

    def stop(self) -> None:
        if self._unsubscribe_identity is not None:
            self._unsubscribe_identity()
            self._unsubscribe_identity = None
        self._started = False

    def _on_identity_change(self, identity: Optional[Identity]) -> None:
        if self._suppress_identity_events:
            return
        if identity is None:
            self._enter_unauthenticated()
            return
        if self._is_authorized(identity):
            self._auth_state = AuthState.AUTHENTICATED
            self._identity = identity
            self._denied_reason = ""
            self._error_message = ""
            self._notify()
            self._refresh_quietly()
            return
        LOG.warning("Rejected sign-in from %s: not on the allow-list", identity.email)
        self._force_sign_out()
        self._auth_state = AuthState.ACCESS_DENIED
        self._identity = None
        self._denied_reason = UNAUTHORIZED_EMAIL
        self._error_message = ACCESS_DENIED_MESSAGE.format(email=identity.email)
        self._clear_catalog()
        self._notify()

    def _force_sign_out(self) -> None:
        self._suppress_identity_events = True
        try:
            self._provider.sign_out()
        finally:
            self._suppress_identity_events = False

    def _enter_unauthenticated(self) -> None:
        self._auth_state = AuthState.UNAUTHENTICATED
        self._identity = None
        self._denied_reason = ""
        self._error_message = ""
        self._clear_catalog()
        self._notify()

    def _clear_catalog(self) -> None:
        self._locations = ()
        self._editor_open = False
        self._editing = None

    # --- auth operations ---

    def login(self, credential: str) -> CatalogSnapshot:
        """Sign in through the identity provider; the outcome arrives via the identity callback."""
        if not self._require_auth:
            LOG.info("Sign-in is disabled; login ignored")
            return self.snapshot()
        self._auth_state = AuthState.AUTHENTICATING
        self._error_message = ""
        self._notify()
        try:
            self._provider.sign_in(credential)
        except SignInError as e:
            LOG.warning("Sign-in failed: %s", e)
            self._auth_state = AuthState.UNAUTHENTICATED
            self._error_message = SIGN_IN_FAILED_MESSAGE
            self._notify()
            raise
        return self.snapshot()

    def logout(self) -> CatalogSnapshot:
        """Sign out and drop all cached list state."""
        if not self._require_auth:
            LOG.info("Sign-in is disabled; logout ignored")
            return self.snapshot()
        self._force_sign_out()
        self._enter_unauthenticated()
        return self.snapshot()

    def _require_access(self) -> None:
        if self._require_auth and self._auth_state is not AuthState.AUTHENTICATED:
            raise NotAuthenticatedError("sign in as an admin first")

    # --- catalog operations ---

    @contextmanager
    def _busy(self) -> Iterator[None]:
        with self._lock:
            if self._loading:
                raise BusyError("another operation is in progress")
            self._loading = True
        self._notify()
        try:
            yield
        finally:
            self._loading = False
            self._notify()

    def refresh(self) -> list[Location]:
        """Replace the list with a fresh read from the store."""
        self._require_access()
        with self._busy():
            self._reload()
        return list(self._locations)

    def _refresh_quietly(self) -> None:
        try:
            self.refresh()
        except CatalogError as e:
            LOG.warning("Initial load failed: %s", e)

    def _reload(self) -> None:
        try:
            locations = self._store.list()
        except StorePermissionError as e:
            if self._auth_state is AuthState.AUTHENTICATED:
                # Expired session and revoked rule end the session the same way.
                LOG.info("Session ended by the store (%s: %s); signing out", type(e).__name__, e)
                self._force_sign_out()
                self._enter_unauthenticated()
                raise NotAuthenticatedError("session is no longer valid") from e
            LOG.warning("Listing locations was denied: %s", e)
            raise
        except StoreConnectionError as e:
            LOG.warning("Could not load locations: %s", e)
            self._error_message = CONNECTION_MESSAGE
            raise
        self._locations = tuple(locations)
        self._error_message = ""

    def _validated(self, fields: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
        try:
            return normalize_location_fields(fields, partial=partial)
        except ValidationError as e:
            self._error_message = e.message
            self._notify()
            raise

    def _write(self, action: str, call: Callable[[], None]) -> None:
        try:
            call()
        except CatalogError as e:
            LOG.warning("Could not %s location: %s", action, e)
            self._error_message = _message_for(e)
            raise

    def create_location(self, fields: Mapping[str, Any]) -> list[Location]:
        """Normalize and insert a location, then reload the list."""
        self._require_access()
        payload = self._validated(fields, partial=False)
        with self._busy():
            self._write("create", lambda: self._store.create(payload))
            self._reload()
        return list(self._locations)

    def update_location(self, location_id: str, fields: Mapping[str, Any]) -> list[Location]:
        """Normalize and merge the touched fields, then reload the list."""
        self._require_access()
        payload = self._validated(fields, partial=True)
        with self._busy():
            self._write("update", lambda: self._store.update(location_id, payload))
            self._reload()
        return list(self._locations)

    def delete_location(self, location_id: str, confirmed: bool) -> DeleteOutcome:
        """Delete after explicit confirmation. Store failures are logged and reported, not raised."""
        self._require_access()
        if not confirmed:
            LOG.info("Delete of %s was not confirmed; nothing sent to the store", location_id)
            return DeleteOutcome.NOT_CONFIRMED
        with self._busy():
            try:
                self._store.delete(location_id)
            except NotFoundError as e:
                LOG.warning("Error deleting location %s: %s", location_id, e)
                self._error_message = DELETE_FAILED_MESSAGE
                return DeleteOutcome.NOT_FOUND
            except CatalogError:
                LOG.exception("Error deleting location %s", location_id)
                self._error_message = DELETE_FAILED_MESSAGE
                return DeleteOutcome.FAILED
            self._reload()
        return DeleteOutcome.DELETED

    # --- editing target ---

    def open_editor(self, location_id: Optional[str] = None) -> Optional[Location]:
        """Open the form: empty for a new location, or prefilled from the listed one."""
        self._require_access()
        target = None
        if location_id is not None:
            target = next((loc for loc in self._locations if loc.id == location_id), None)
            if target is None:
                raise NotFoundError(location_id)
        self._editor_open = True
        self._editing = target
        self._error_message = ""
        self._notify()
        return target

    def close_editor(self) -> None:
        self._editor_open = False
        self._editing = None
        self._notify()

    def save(self, fields: Mapping[str, Any]) -> list[Location]:
        """Submit the open form: create without a target, update with one. Closes the form on success."""
        if not self._editor_open:
            raise CatalogError("no form is open")
        if self._editing is None:
            locations = self.create_location(fields)
        else:
            locations = self.update_location(self._editing.id, fields)
        self.close_editor()
        return locations
