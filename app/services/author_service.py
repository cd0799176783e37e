from __future__ import annotations
import asyncio
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TypeVar
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from app.core.errors import FieldError, NotFoundError, StoreError
from app.models.author import Author
from app.models.book import Book
from app.repos import AuthorRepository, BookRepository
from app.schemas.author import AuthorFormData, validate_author_form
from app.schemas.book import BookSummary

T = TypeVar("T")

SessionFactory = sessionmaker[Session]


@dataclass
class AuthorDetail:
    author: Author
    authors_books: list[BookSummary]


@dataclass
class AuthorDeletion:
    """Confirmation state for deleting an author. `deleted` is set once the row is gone."""
    author: Author | None
    author_books: list[Book]
    deleted: bool = False

    @property
    def blocked(self) -> bool:
        return len(self.author_books) > 0


@dataclass
class AuthorFormResult:
    """Outcome of a create/update submission: a saved author, or the echo plus errors."""
    form: AuthorFormData
    author: Author | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.author is not None


def _call_store(session_factory: SessionFactory, op: Callable[..., T], *args: object) -> T:
    try:
        with session_factory() as db:
            return op(db, *args)
    except SQLAlchemyError as e:
        raise StoreError("Catalog store operation failed") from e


# Run one repository call on its own session in a worker thread
async def _store(session_factory: SessionFactory, op: Callable[..., T], *args: object) -> T:
    return await run_in_threadpool(_call_store, session_factory, op, *args)


class AuthorService:
    @staticmethod
    # List authors
    async def list_authors(session_factory: SessionFactory) -> list[Author]:
        return await _store(session_factory, AuthorRepository.list)

    @staticmethod
    # Author plus title/summary of their books
    async def get_author_detail(
        session_factory: SessionFactory, author_id: uuid.UUID
    ) -> AuthorDetail:
        # Both branches settle before deciding; a missing author is a 404
        # whatever happened to the books query.
        author, books = await asyncio.gather(
            _store(session_factory, AuthorRepository.get, author_id),
            _store(session_factory, BookRepository.list_summaries_by_author, author_id),
            return_exceptions=True,
        )
        if isinstance(author, BaseException):
            raise author
        if author is None:
            raise NotFoundError("Author not found")
        if isinstance(books, BaseException):
            raise books
        return AuthorDetail(author=author, authors_books=books)

    @staticmethod
    # Validate and persist a new author
    async def create_author(
        session_factory: SessionFactory, raw: Mapping[str, object]
    ) -> AuthorFormResult:
        echo = AuthorFormData.from_raw(raw)
        data, errors = validate_author_form(raw)
        if data is None:
            return AuthorFormResult(form=echo, errors=errors)

        author = await _store(session_factory, AuthorRepository.create, data)
        return AuthorFormResult(form=echo, author=author)

    @staticmethod
    # Author and dependent books for the delete confirmation; None when already gone
    async def get_author_for_delete(
        session_factory: SessionFactory, author_id: uuid.UUID
    ) -> AuthorDeletion | None:
        author, books = await asyncio.gather(
            _store(session_factory, AuthorRepository.get, author_id),
            _store(session_factory, BookRepository.list_by_author, author_id),
        )
        if author is None:
            return None
        return AuthorDeletion(author=author, author_books=books)

    @staticmethod
    # Delete an author unless books still reference it
    async def delete_author(
        session_factory: SessionFactory, author_id: uuid.UUID
    ) -> AuthorDeletion:
        author, books = await asyncio.gather(
            _store(session_factory, AuthorRepository.get, author_id),
            _store(session_factory, BookRepository.list_by_author, author_id),
        )
        state = AuthorDeletion(author=author, author_books=books)
        if state.blocked:
            return state

        await _store(session_factory, AuthorRepository.delete, author_id)
        state.deleted = True
        return state

    @staticmethod
    # Current author for the update form
    async def get_author_for_update(
        session_factory: SessionFactory, author_id: uuid.UUID
    ) -> Author:
        author = await _store(session_factory, AuthorRepository.get, author_id)
        if author is None:
            raise NotFoundError("Author not found")
        return author

    @staticmethod
    # Validate and replace every mutable field of an author
    async def update_author(
        session_factory: SessionFactory,
        author_id: uuid.UUID,
        raw: Mapping[str, object],
    ) -> AuthorFormResult:
        echo = AuthorFormData.from_raw(raw)
        data, errors = validate_author_form(raw)
        if data is None:
            return AuthorFormResult(form=echo, errors=errors)

        author = await _store(session_factory, AuthorRepository.update, author_id, data)
        if author is None:
            raise NotFoundError("Author not found")
        return AuthorFormResult(form=echo, author=author)
