"""Location API routes."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_controller, get_public_store
from api.errors import to_http_error
from catalog_core.controller import CatalogController, DeleteOutcome
from catalog_core.errors import CatalogError
from catalog_core.location import Location
from catalog_core.record_store import RecordStore
from schemas.locations import LocationCreate, LocationResponse, LocationUpdate
from utils.config import IMAGE_HOSTNAME
from utils.images import is_displayable_image_url

router = APIRouter(tags=["locations"])


def location_to_response(loc: Location) -> LocationResponse:
    """Build LocationResponse from a catalog location."""
    return LocationResponse(
        id=loc.id,
        name=loc.name,
        description=loc.description,
        image_url=loc.image_url,
        image_displayable=is_displayable_image_url(loc.image_url, IMAGE_HOSTNAME),
        order=loc.order,
        x=loc.x,
        y=loc.y,
    )


@router.get("/locations", response_model=list[LocationResponse])
def list_locations(controller: CatalogController = Depends(get_controller)) -> list[LocationResponse]:
    """Reload and list all locations (admin console)."""
    try:
        locations = controller.refresh()
    except CatalogError as e:
        raise to_http_error(e) from e
    return [location_to_response(loc) for loc in locations]


@router.post("/locations", response_model=list[LocationResponse], status_code=status.HTTP_201_CREATED)
def create_location(
    body: LocationCreate,
    controller: CatalogController = Depends(get_controller),
) -> list[LocationResponse]:
    """Create a location and return the refreshed list."""
    try:
        locations = controller.create_location(body.model_dump())
    except CatalogError as e:
        raise to_http_error(e) from e
    return [location_to_response(loc) for loc in locations]


@router.patch("/locations/{location_id}", response_model=list[LocationResponse])
def update_location(
    location_id: str,
    body: LocationUpdate,
    controller: CatalogController = Depends(get_controller),
) -> list[LocationResponse]:
    """Update the sent fields of a location and return the refreshed list."""
    try:
        locations = controller.update_location(location_id, body.model_dump(exclude_unset=True))
    except CatalogError as e:
        raise to_http_error(e) from e
    return [location_to_response(loc) for loc in locations]


@router.delete("/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_location(
    location_id: str,
    confirmed: bool = Query(default=False),
    controller: CatalogController = Depends(get_controller),
) -> None:
    """Delete a location. Requires confirmed=true."""
    try:
        outcome = controller.delete_location(location_id, confirmed=confirmed)
    except CatalogError as e:
        raise to_http_error(e) from e
    if outcome is DeleteOutcome.NOT_CONFIRMED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Deletion must be confirmed")
    if outcome is DeleteOutcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=controller.snapshot().error_message)
    if outcome is DeleteOutcome.FAILED:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=controller.snapshot().error_message)


@router.get("/public/locations", response_model=list[LocationResponse])
def list_public_locations(
    store: Optional[RecordStore] = Depends(get_public_store),
) -> list[LocationResponse]:
    """Read-only listing for visitors; 404 when public reads are disabled."""
    if store is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Public listing is disabled")
    try:
        locations = store.list()
    except CatalogError as e:
        raise to_http_error(e) from e
    return [location_to_response(loc) for loc in locations]
