# Schemas package
from .health import HealthResponse
from .locations import CatalogStateResponse, LocationCreate, LocationResponse, LocationUpdate, LoginRequest

__all__ = [
    "CatalogStateResponse",
    "HealthResponse",
    "LocationCreate",
    "LocationResponse",
    "LocationUpdate",
    "LoginRequest",
]
