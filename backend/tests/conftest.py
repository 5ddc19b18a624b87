import os

# keep the module-level engine off disk; tests use their own engine below
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dormdash.core.database import Base, get_db
from dormdash.main import app

PASSWORD = "hunter2"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def make_client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    clients = []

    def factory() -> TestClient:
        client = TestClient(app)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def client(make_client):
    return make_client()


def signup(client, email, name="Test User", password=PASSWORD, **extra):
    payload = {"fullName": name, "email": email, "password": password}
    payload.update(extra)
    return client.post("/signup", json=payload)


def login(client, email, password=PASSWORD):
    return client.post("/login", json={"email": email, "password": password})


@pytest.fixture()
def user_client(make_client):
    """Return a helper that signs up and logs in a fresh client."""

    def factory(email, name="Test User", **extra):
        c = make_client()
        resp = signup(c, email, name=name, **extra)
        assert resp.status_code == 201, resp.text
        resp = login(c, email)
        assert resp.status_code == 200, resp.text
        return c

    return factory


@pytest.fixture()
def seller(user_client):
    return user_client("s@students.towson.edu", name="Sam Seller", cashApp="$samsells")


@pytest.fixture()
def buyer(user_client):
    return user_client("b@students.towson.edu", name="Bea Buyer", venmo="@beabuys")


def create_listing(client, **overrides):
    form = {
        "title": "Desk Lamp",
        "description": "Warm white LED lamp",
        "contactInfo": "text 555-1234",
        "price": "10",
        "condition": "New",
        "location": "Cook Library",
    }
    form.update(overrides)
    files = form.pop("files", None)
    return client.post("/createListing", data=form, files=files)


def my_listing_ids(client):
    resp = client.get("/api/user/listings")
    assert resp.status_code == 200, resp.text
    return [l["id"] for l in resp.json()]


@pytest.fixture()
def listing_id(seller):
    resp = create_listing(seller)
    assert resp.status_code == 201, resp.text
    return my_listing_ids(seller)[0]
