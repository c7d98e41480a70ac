"""Authorization predicates and the access rules enforced by the document store."""
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from catalog_core.identity import Identity

Authorizer = Callable[[Identity], bool]


def allow_list(emails: Iterable[str]) -> Authorizer:
    """Authorize identities whose verified email is in `emails` (case-insensitive)."""
    allowed = frozenset(e.strip().casefold() for e in emails if e and e.strip())

    def is_authorized(identity: Identity) -> bool:
        return identity.email_verified and identity.email.casefold() in allowed

    return is_authorized


def deny_all(identity: Identity) -> bool:
    """Authorizer used when no admin address is configured."""
    return False


@dataclass
class AccessRules:
    """
    Server-side rules of the document store.

    Open reads/writes need no identity. Otherwise the caller must be signed in,
    unexpired and admitted by `authorize`. Mutable so rules can change under a
    live session.
    """

    read_open: bool = True
    write_open: bool = True
    authorize: Authorizer = deny_all

    @classmethod
    def open(cls) -> "AccessRules":
        return cls(read_open=True, write_open=True)

    @classmethod
    def admin_only(cls, authorize: Authorizer, *, public_read: bool = False) -> "AccessRules":
        return cls(read_open=public_read, write_open=False, authorize=authorize)

    def is_open(self, write: bool) -> bool:
        return self.write_open if write else self.read_open

    def admits(self, identity: Optional[Identity]) -> bool:
        return identity is not None and self.authorize(identity)
