"""
Engine, session factory and schema bootstrap.

The engine is built once from DATABASE_URL at import time. Request handlers
get a session per request through `get_db`; scripts and startup code use
`get_db_session`, which commits on success.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from fundmanager.config import settings
from fundmanager.logger import get_logger
from fundmanager.models import Base

logger = get_logger(__name__)

IN_MEMORY_SQLITE = ("sqlite://", "sqlite:///:memory:")


def _engine_options(database_url: str) -> Dict[str, Any]:
    if not database_url.startswith("sqlite"):
        return {
            "poolclass": QueuePool,
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_pre_ping": True,
        }

    # Sync handlers run in a threadpool, so the connection must not be tied
    # to the creating thread. In-memory databases live on one connection.
    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if database_url in IN_MEMORY_SQLITE:
        options["poolclass"] = StaticPool
    return options


def create_db_engine(database_url: str) -> Engine:
    """Engine for `database_url`: SQLite file or memory, or a pooled server database."""
    engine = create_engine(database_url, echo=settings.debug, **_engine_options(database_url))
    event.listen(engine, "connect", _on_connect)
    return engine


def _on_connect(dbapi_conn, connection_record) -> None:
    logger.debug("Opened database connection")


engine = create_db_engine(settings.database_url)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Session for code outside a request; commits on success, rolls back on error."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Database session rolled back")
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create any missing tables."""
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready ({engine.url.get_backend_name()})")


def dispose_engine() -> None:
    engine.dispose()
    logger.info("Database connection pool disposed")


def check_db_connection() -> bool:
    """Run `SELECT 1`; used by the health endpoint."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database connection check failed: {e}")
        return False
    return True
