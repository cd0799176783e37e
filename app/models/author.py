from datetime import date
from sqlalchemy import Date, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
import uuid
from app.core.config import settings
from app.models.base import Base


def _format_date(value: date | None) -> str:
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


#Author
class Author(Base):
    __tablename__: str = "authors"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    family_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    date_of_death: Mapped[date | None] = mapped_column(Date, nullable=True)

    @property
    def name(self) -> str:
        """Full display name, "family, first"; empty when either part is missing."""
        if not self.first_name or not self.family_name:
            return ""
        return f"{self.family_name}, {self.first_name}"

    @property
    def lifespan(self) -> str:
        return f"{_format_date(self.date_of_birth)} - {_format_date(self.date_of_death)}"

    @property
    def url(self) -> str:
        return f"{settings.CATALOG_PREFIX}/author/{self.id}"

    @property
    def date_of_birth_iso(self) -> str:
        return self.date_of_birth.isoformat() if self.date_of_birth else ""

    @property
    def date_of_death_iso(self) -> str:
        return self.date_of_death.isoformat() if self.date_of_death else ""
