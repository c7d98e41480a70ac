# Catalog core: location entity, validation, record store, identity, controller
from catalog_core.controller import AuthState, CatalogController, CatalogSnapshot, DeleteOutcome
from catalog_core.location import Location
from catalog_core.record_store import RecordStore

__all__ = [
    "AuthState",
    "CatalogController",
    "CatalogSnapshot",
    "DeleteOutcome",
    "Location",
    "RecordStore",
]
