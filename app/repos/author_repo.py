import uuid
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models.author import Author
from app.schemas.author import AuthorForm


class AuthorRepository:

    @staticmethod
    # Create a new author; the store assigns the id
    def create(db: Session, data: AuthorForm) -> Author:
        author = Author(**data.model_dump())
        db.add(author)
        db.commit()
        db.refresh(author)
        return author

    @staticmethod
    # List authors by family name
    def list(db: Session) -> list[Author]:
        stmt = select(Author).order_by(Author.family_name.asc())
        return list(db.scalars(stmt).all())

    @staticmethod
    # Get an author by ID
    def get(db: Session, author_id: uuid.UUID) -> Author | None:
        return db.get(Author, author_id)

    @staticmethod
    # Replace every mutable field of an author
    def update(db: Session, author_id: uuid.UUID, data: AuthorForm) -> Author | None:
        author = db.get(Author, author_id)
        if author is None:
            return None
        for field, value in data.model_dump().items():
            setattr(author, field, value)
        db.commit()
        db.refresh(author)
        return author

    @staticmethod
    # Delete an author by ID; a missing row is not an error
    def delete(db: Session, author_id: uuid.UUID) -> None:
        _ = db.execute(delete(Author).where(Author.id == author_id))
        db.commit()
