"""Assemble the identity provider, transport, record store and controller."""
from dataclasses import dataclass
from typing import Optional, Sequence

from catalog_core.authorization import AccessRules, allow_list, deny_all
from catalog_core.controller import CatalogController
from catalog_core.identity import TokenIdentityProvider
from catalog_core.record_store import RecordStore
from catalog_core.transport import SessionScope, SqlDocumentTransport


@dataclass
class Catalog:
    """One admin console: its controller plus the anonymous store for public reads."""

    controller: CatalogController
    identity_provider: TokenIdentityProvider
    public_store: Optional[RecordStore]
    rules: AccessRules


def build_catalog(
    session_scope: SessionScope,
    *,
    require_auth: bool,
    public_read: bool,
    admin_emails: Sequence[str],
    token_secret: str,
    token_algorithm: str = "HS256",
    collection: str = "locations",
) -> Catalog:
    """Build the catalog. With require_auth, writes (and reads unless public_read) need an allow-listed admin."""
    provider = TokenIdentityProvider(token_secret, token_algorithm)
    authorize = allow_list(admin_emails) if admin_emails else deny_all
    if require_auth:
        rules = AccessRules.admin_only(authorize, public_read=public_read)
    else:
        rules = AccessRules.open()
    transport = SqlDocumentTransport(session_scope, rules, identity_source=lambda: provider.current)
    controller = CatalogController(
        RecordStore(transport, collection),
        provider,
        require_auth=require_auth,
        is_authorized=authorize,
    )
    public_store = None
    if rules.read_open:
        public_store = RecordStore(SqlDocumentTransport(session_scope, rules), collection)
    return Catalog(controller=controller, identity_provider=provider, public_store=public_store, rules=rules)
