# Set test environment before any application or db imports.
import os

os.environ["TESTING"] = "true"
os.environ["TESTING_DATABASE_URL"] = "sqlite:///:memory:"

from contextlib import ExitStack, contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete
from sqlalchemy.orm import Session

from api.dependencies import get_controller, get_public_store
from catalog_core.identity import issue_identity_token
from catalog_core.transport import SqlDocumentTransport
from catalog_core.record_store import RecordStore
from catalog_core.wiring import build_catalog
from db import SessionLocal
from main import app
from models import Base
from models.document import Document

ADMIN_EMAIL = "admin@example.com"
TOKEN_SECRET = "test-secret"


def _get_engine():
    """Engine used by the app (in-memory when TESTING=true)."""
    return SessionLocal.kw["bind"]


@pytest.fixture(scope="session")
def engine():
    """One in-memory engine per test run; create tables once."""
    eng = _get_engine()
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture
def db_session(engine):
    """
    Function-scoped session; each test runs in a transaction that is rolled back.

    Repository calls commit, and pysqlite lets those commits reach the shared
    connection, so the document table is also emptied on teardown.
    """
    connection = engine.connect()
    trans = connection.begin()
    session = Session(bind=connection)
    session.begin_nested()
    try:
        yield session
    finally:
        session.close()
        if trans.is_active:
            trans.rollback()
        connection.close()
        with engine.begin() as conn:
            conn.execute(delete(Document))


@pytest.fixture
def session_scope(db_session):
    """Session scope for the transport that hands out the test session without closing it."""

    @contextmanager
    def scope():
        yield db_session

    return scope


@pytest.fixture
def store(session_scope):
    """Record store over the test database with open access rules."""
    return RecordStore(SqlDocumentTransport(session_scope), "locations")


@pytest.fixture
def make_catalog(session_scope):
    """Factory for catalogs on the test database; defaults to the admin-only variant."""
    built = []

    def make(**overrides):
        options = {
            "require_auth": True,
            "public_read": True,
            "admin_emails": [ADMIN_EMAIL],
            "token_secret": TOKEN_SECRET,
        }
        options.update(overrides)
        catalog = build_catalog(session_scope, **options)
        catalog.controller.start()
        built.append(catalog)
        return catalog

    yield make
    for catalog in built:
        catalog.controller.stop()


@pytest.fixture
def issue_token():
    """Sign identity tokens with the test secret."""

    def issue(email, **kwargs):
        return issue_identity_token(email, TOKEN_SECRET, **kwargs)

    return issue


@pytest.fixture
def admin_token(issue_token):
    return issue_token(ADMIN_EMAIL)


@pytest.fixture
def catalog(make_catalog):
    return make_catalog()


@contextmanager
def _client_for(catalog):
    """Test client whose dependencies point at the given catalog, cleared on exit."""
    app.dependency_overrides[get_controller] = lambda: catalog.controller
    app.dependency_overrides[get_public_store] = lambda: catalog.public_store
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_client():
    """Factory for API test clients bound to a catalog; all are closed on teardown."""
    with ExitStack() as stack:
        yield lambda catalog: stack.enter_context(_client_for(catalog))


@pytest.fixture
def client(catalog, make_client):
    """API test client for the admin-only catalog (not signed in)."""
    return make_client(catalog)


@pytest.fixture
def admin_client(client, admin_token):
    """API test client signed in as the allow-listed admin."""
    r = client.post("/api/auth/login", json={"id_token": admin_token})
    assert r.status_code == 200
    assert r.json()["auth_state"] == "authenticated"
    return client


@pytest.fixture
def open_client(make_catalog, make_client):
    """API test client for the public variant (no sign-in)."""
    return make_client(make_catalog(require_auth=False))


def pytest_sessionfinish(session, exitstatus):
    """Remove any temporary test DB files created during the run (e.g. under /tmp)."""
    import glob
    for pattern in ["/tmp/test_*.db", "test_*.db"]:
        for path in glob.glob(pattern):
            try:
                os.remove(path)
            except OSError:
                pass
