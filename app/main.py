from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from fastapi import APIRouter, FastAPI
from fastapi.responses import RedirectResponse
from app.core.config import settings
from app.core.middleware_correlation import CorrelationIdMiddleware
from app.core.logging import get_logger, setup_logging
from app.core.errors import register_exception_handlers
from app.db.session import dispose_engine, init_db
from app.api.routes.authors import router as authors_router


setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    logger = get_logger(__name__)
    init_db()
    logger.info("Catalog store ready")
    try:
        yield
    finally:
        dispose_engine()
        logger.info("Catalog store closed")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Local Library - author pages of the library catalog.",
    version="1.0.0",
    lifespan=lifespan,
)

# Middlewares
app.add_middleware(CorrelationIdMiddleware)

# Root endpoint
@app.get("/", include_in_schema=False)
async def root():
    """Send visitors to the author list."""
    return RedirectResponse(f"{settings.CATALOG_PREFIX}/authors")

register_exception_handlers(app)

# Mount routers
catalog = APIRouter(prefix=settings.CATALOG_PREFIX)
catalog.include_router(authors_router)
app.include_router(catalog)
