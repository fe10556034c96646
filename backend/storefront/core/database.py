from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.core.config import settings


def _get_engine_kwargs(database_url: str) -> dict[str, Any]:
    """Get engine configuration based on database type."""
    # SQLite (local tooling, tests) shares a single connection so an
    # in-memory database survives across sessions
    if database_url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }

    return {
        "pool_pre_ping": True,
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
    }


engine = create_engine(settings.DATABASE_URL, **_get_engine_kwargs(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Any = None) -> None:
    """Create all tables from the model metadata.

    Schema migrations are out of scope; this only bootstraps empty databases.
    """
    from storefront.models import Base

    Base.metadata.create_all(bind=bind if bind is not None else engine)
