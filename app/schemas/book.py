from pydantic import BaseModel
import uuid

from app.core.config import settings

# Book title/summary projection shown on author pages
class BookSummary(BaseModel):
    id: uuid.UUID
    title: str
    summary: str

    @property
    def url(self) -> str:
        return f"{settings.CATALOG_PREFIX}/book/{self.id}"
