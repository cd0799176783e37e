from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from app.core.config import settings
from app.models.base import Base


def _connect_args(url: str) -> dict[str, object]:
    # Fan-out reads hand pooled SQLite connections to worker threads.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(
    bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
)


if engine.dialect.name == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(bind: Engine = engine) -> None:
    """
    Create the catalog tables if they do not exist yet.
    """
    import app.models.author  # noqa: F401  registers Author
    import app.models.book  # noqa: F401  registers Book

    Base.metadata.create_all(bind=bind)


def dispose_engine(bind: Engine = engine) -> None:
    bind.dispose()


# FastAPI dependency: the factory handlers open their own sessions from.
def get_session_factory() -> sessionmaker[Session]:
    return SessionLocal
