"""Pydantic schemas for location and catalog API."""
from typing import Optional

from pydantic import BaseModel, ConfigDict


class LocationCreate(BaseModel):
    """Payload for creating a location. Values are normalized by the controller."""

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str
    image_url: str
    order: float
    x: float
    y: float


class LocationUpdate(BaseModel):
    """Payload for a partial update (only sent fields are written)."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    order: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None


class LocationResponse(BaseModel):
    """Location in API responses."""

    id: str
    name: str
    description: str
    image_url: str
    image_displayable: bool = False
    order: int
    x: float
    y: float


class CatalogStateResponse(BaseModel):
    """Controller snapshot for the admin console."""

    locations: list[LocationResponse]
    loading: bool
    require_auth: bool
    auth_state: Optional[str] = None
    email: Optional[str] = None
    denied_reason: str = ""
    error_message: str = ""
    editor_open: bool = False
    editing_id: Optional[str] = None


class LoginRequest(BaseModel):
    """Identity token issued by the identity provider."""

    id_token: str
