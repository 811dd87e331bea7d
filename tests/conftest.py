"""Shared fixtures: in-memory SQLite, a store, two users and logged-in clients."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from contactbook.config import Settings
from contactbook.database import Base, get_db
from contactbook.main import create_app
from contactbook.models import User
from contactbook.store import ContactStore
from contactbook.utils import hash_password

PASSWORD = "correct-horse"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def users(db):
    """Two users, ids "u1" and "u2"."""
    alice = User(id="u1", username="alice", password_hash=hash_password(PASSWORD))
    bob = User(id="u2", username="bob", password_hash=hash_password(PASSWORD))
    db.add_all([alice, bob])
    db.commit()
    return alice, bob


@pytest.fixture
def store(db, users) -> ContactStore:
    return ContactStore(db)


@pytest.fixture
def app(session_factory, users):
    app = create_app(Settings(ENV="test", SECRET_KEY="test-secret"))

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    return app


def login(app, username: str) -> TestClient:
    client = TestClient(app)
    r = client.post(
        "/login",
        data={"username": username, "password": PASSWORD},
        follow_redirects=False,
    )
    assert r.status_code == 303
    return client


@pytest.fixture
def alice_client(app) -> TestClient:
    return login(app, "alice")


@pytest.fixture
def bob_client(app) -> TestClient:
    return login(app, "bob")
