"""Common test fixtures for the notes admin backend."""
import os

# Keep the module-level engine off the working directory.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notes_admin.database import get_db
from notes_admin.main import app
from notes_admin.models import Base
from notes_admin.store import DocumentStore


@pytest.fixture
def engine():
    """In-memory database shared across threads for a single test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session):
    return DocumentStore(db_session)


@pytest.fixture
def client(engine):
    """Test client whose requests each get a session on the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(store):
    """Two users, two categories and three notes: (U1,C1), (U1,C2), (U2,C1)."""
    alice = store.create("users", {"name": "Alice", "email": "alice@example.com"})
    bob = store.create("users", {"name": "Bob", "email": "bob@example.com"})
    work = store.create("categories", {"name": "Work"})
    home = store.create("categories", {"name": "Home"})
    note_ids = [
        store.create("notes", {
            "user_id": owner.id, "user_name": owner.name,
            "category_id": cat.id, "category_name": cat.name,
            "content": content,
        }).id
        for owner, cat, content in [
            (alice, work, "quarterly report"),
            (alice, home, "buy milk"),
            (bob, work, "standup notes"),
        ]
    ]
    return {
        "alice": alice.id,
        "bob": bob.id,
        "work": work.id,
        "home": home.id,
        "notes": note_ids,
    }
