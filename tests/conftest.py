import os
import tempfile
import uuid

# Point the app at a throwaway SQLite database before it is imported.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="local_library_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB_DIR}/test_local_library.db"

import pytest
from datetime import date
from fastapi.testclient import TestClient

from app.main import app
from app.db.session import engine, init_db, SessionLocal
from app.models.base import Base


@pytest.fixture(autouse=True)
def reset_database():
    """Recreate all tables so every test starts from an empty catalog."""
    Base.metadata.drop_all(bind=engine)
    init_db(engine)
    yield


@pytest.fixture
def session_factory():
    """The session factory the handlers use."""
    return SessionLocal


@pytest.fixture
def db_session():
    """Create a fresh database session for each test."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_client():
    """Create a test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def sample_author_model(db_session):
    """Persist a sample author."""
    from app.models.author import Author

    author = Author(
        first_name="Jane",
        family_name="Austen",
        date_of_birth=date(1775, 12, 16),
        date_of_death=date(1817, 7, 18),
    )
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_books_models(db_session, sample_author_model):
    """Two books referencing the sample author."""
    from app.models.book import Book

    books = [
        Book(
            title="Emma",
            summary="A young woman meddles in matchmaking.",
            author_id=sample_author_model.id,
        ),
        Book(
            title="Persuasion",
            summary="A second chance at love.",
            author_id=sample_author_model.id,
        ),
    ]
    db_session.add_all(books)
    db_session.commit()
    for book in books:
        db_session.refresh(book)
    return books


@pytest.fixture
def valid_author_form():
    """Raw form fields that pass validation."""
    return {
        "first_name": "Jane",
        "family_name": "Austen",
        "date_of_birth": "1775-12-16",
        "date_of_death": "",
    }


@pytest.fixture
def headers_with_correlation():
    """HTTP headers with correlation ID."""
    return {"X-Request-ID": str(uuid.uuid4())}
