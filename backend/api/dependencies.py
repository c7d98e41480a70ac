"""FastAPI dependencies: the process-wide catalog (overridden in tests)."""
from typing import Optional

from catalog_core.controller import CatalogController
from catalog_core.record_store import RecordStore
from catalog_core.wiring import Catalog, build_catalog
from db import session_scope
from utils.config import (
    ADMIN_EMAILS,
    IDENTITY_TOKEN_ALGORITHM,
    IDENTITY_TOKEN_SECRET,
    LOCATIONS_COLLECTION,
    PUBLIC_READ,
    REQUIRE_AUTH,
)

_catalog: Optional[Catalog] = None


def get_catalog() -> Catalog:
    """Build and start the catalog on first use."""
    global _catalog
    if _catalog is None:
        _catalog = build_catalog(
            session_scope,
            require_auth=REQUIRE_AUTH,
            public_read=PUBLIC_READ,
            admin_emails=ADMIN_EMAILS,
            token_secret=IDENTITY_TOKEN_SECRET,
            token_algorithm=IDENTITY_TOKEN_ALGORITHM,
            collection=LOCATIONS_COLLECTION,
        )
        _catalog.controller.start()
    return _catalog


def get_controller() -> CatalogController:
    return get_catalog().controller


def get_public_store() -> Optional[RecordStore]:
    """Anonymous record store, or None when public reads are disabled."""
    return get_catalog().public_store
