import uuid
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.book import Book
from app.schemas.book import BookSummary


class BookRepository:
    @staticmethod
    # List every book written by an author
    def list_by_author(db: Session, author_id: uuid.UUID) -> list[Book]:
        stmt = select(Book).where(Book.author_id == author_id).order_by(Book.title)
        return list(db.scalars(stmt).all())

    @staticmethod
    # List (id, title, summary) of an author's books
    def list_summaries_by_author(db: Session, author_id: uuid.UUID) -> list[BookSummary]:
        stmt = (
            select(Book.id, Book.title, Book.summary)
            .where(Book.author_id == author_id)
            .order_by(Book.title)
        )
        return [
            BookSummary(id=row.id, title=row.title, summary=row.summary)
            for row in db.execute(stmt)
        ]
