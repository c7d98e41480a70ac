"""API tests: locations endpoints using test DB (client fixtures override the catalog dependencies)."""
import pytest

from repositories.document_repository import insert_document

pytestmark = pytest.mark.api

NEW = {
    "name": "Plaza Mayor",
    "description": "Main square",
    "image_url": "https://img.example.com/plaza.jpg",
    "order": 5.6,
    "x": 1.4,
    "y": -0.2,
}


def test_list_locations_returns_list(admin_client):
    """GET /api/locations returns 200 and a list (empty or existing locations)."""
    r = admin_client.get("/api/locations")
    assert r.status_code == 200
    assert isinstance(r.json(), list)


def test_list_locations_requires_sign_in(client):
    r = client.get("/api/locations")
    assert r.status_code == 401


def test_create_location_normalizes(admin_client):
    """POST /api/locations stores normalized values and returns the refreshed list."""
    r = admin_client.post("/api/locations", json=NEW)
    assert r.status_code == 201
    data = r.json()
    assert len(data) == 1
    loc = data[0]
    assert loc["id"]
    assert loc["name"] == "plaza mayor"
    assert loc["order"] == 6
    assert loc["x"] == 1.0 and loc["y"] == 0.0
    assert loc["image_displayable"] is True


def test_create_location_validation_error(admin_client):
    r = admin_client.post("/api/locations", json={**NEW, "description": "   "})
    assert r.status_code == 422
    assert r.json()["detail"]["field"] == "description"
    assert admin_client.get("/api/locations").json() == []


def test_create_location_rejects_client_id(admin_client):
    r = admin_client.post("/api/locations", json={**NEW, "id": "mine"})
    assert r.status_code == 422


def test_list_sorted_by_order(admin_client, db_session):
    insert_document(db_session, "locations", {**NEW, "name": "c", "order": 3}, "loc-c")
    insert_document(db_session, "locations", {**NEW, "name": "a", "order": 1}, "loc-a")
    insert_document(db_session, "locations", {**NEW, "name": "b", "order": 2}, "loc-b")
    r = admin_client.get("/api/locations")
    assert [loc["id"] for loc in r.json()] == ["loc-a", "loc-b", "loc-c"]


def test_update_location(admin_client, db_session):
    insert_document(db_session, "locations", {**NEW, "name": "faro", "order": 1}, "loc-upd")
    r = admin_client.patch("/api/locations/loc-upd", json={"name": "FARO NUEVO", "x": -3})
    assert r.status_code == 200
    loc = r.json()[0]
    assert loc["name"] == "faro nuevo"
    assert loc["x"] == 0.0
    assert loc["description"] == "Main square"


def test_update_location_404(admin_client):
    r = admin_client.patch("/api/locations/unknown-loc", json={"name": "x"})
    assert r.status_code == 404


def test_delete_location_success(admin_client, db_session):
    """DELETE /api/locations/{id}?confirmed=true returns 204 and the location is removed."""
    insert_document(db_session, "locations", {**NEW, "order": 1}, "loc-del-1")
    r = admin_client.delete("/api/locations/loc-del-1", params={"confirmed": "true"})
    assert r.status_code == 204
    ids = [loc["id"] for loc in admin_client.get("/api/locations").json()]
    assert "loc-del-1" not in ids


def test_delete_location_requires_confirmation(admin_client, db_session):
    insert_document(db_session, "locations", {**NEW, "order": 1}, "loc-keep")
    r = admin_client.delete("/api/locations/loc-keep")
    assert r.status_code == 400
    ids = [loc["id"] for loc in admin_client.get("/api/locations").json()]
    assert "loc-keep" in ids


def test_delete_location_404(admin_client):
    """DELETE /api/locations/{id} returns 404 for unknown id."""
    r = admin_client.delete("/api/locations/unknown-loc", params={"confirmed": "true"})
    assert r.status_code == 404
    assert r.json()["detail"] == "There was an error deleting the location."


def test_public_listing_without_sign_in(client, db_session):
    insert_document(db_session, "locations", {**NEW, "order": 1}, "loc-pub")
    r = client.get("/api/public/locations")
    assert r.status_code == 200
    assert [loc["id"] for loc in r.json()] == ["loc-pub"]


def test_public_listing_disabled(make_catalog, make_client):
    c = make_client(make_catalog(public_read=False))
    assert c.get("/api/public/locations").status_code == 404


def test_open_variant_needs_no_sign_in(open_client):
    r = open_client.post("/api/locations", json=NEW)
    assert r.status_code == 201
    state = open_client.get("/api/catalog").json()
    assert state["require_auth"] is False
    assert state["auth_state"] is None
    assert len(state["locations"]) == 1
