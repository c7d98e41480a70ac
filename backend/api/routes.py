"""API route handlers: catalog state and admin sign-in."""
from fastapi import APIRouter, Depends

from api.dependencies import get_controller
from api.errors import to_http_error
from api.locations import location_to_response
from catalog_core.controller import CatalogController, CatalogSnapshot
from catalog_core.errors import CatalogError
from schemas.locations import CatalogStateResponse, LoginRequest

router = APIRouter()


def snapshot_to_response(snap: CatalogSnapshot, require_auth: bool) -> CatalogStateResponse:
    """Build CatalogStateResponse from a controller snapshot."""
    return CatalogStateResponse(
        locations=[location_to_response(loc) for loc in snap.locations],
        loading=snap.loading,
        require_auth=require_auth,
        auth_state=snap.auth_state.value if snap.auth_state is not None else None,
        email=snap.identity.email if snap.identity is not None else None,
        denied_reason=snap.denied_reason,
        error_message=snap.error_message,
        editor_open=snap.editor_open,
        editing_id=snap.editing.id if snap.editing is not None else None,
    )


@router.get("/catalog", response_model=CatalogStateResponse, tags=["catalog"])
def catalog_state(controller: CatalogController = Depends(get_controller)) -> CatalogStateResponse:
    """Current controller state (no store round trip)."""
    return snapshot_to_response(controller.snapshot(), controller.require_auth)


@router.post("/auth/login", response_model=CatalogStateResponse, tags=["auth"])
def login(body: LoginRequest, controller: CatalogController = Depends(get_controller)) -> CatalogStateResponse:
    """Sign in with an identity token. Unauthorized addresses end in access_denied."""
    try:
        snap = controller.login(body.id_token)
    except CatalogError as e:
        raise to_http_error(e) from e
    return snapshot_to_response(snap, controller.require_auth)


@router.post("/auth/logout", response_model=CatalogStateResponse, tags=["auth"])
def logout(controller: CatalogController = Depends(get_controller)) -> CatalogStateResponse:
    """Sign out and clear the cached list."""
    return snapshot_to_response(controller.logout(), controller.require_auth)
