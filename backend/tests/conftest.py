"""Pytest configuration and fixtures."""

import os

# Set test environment before any storefront imports read settings
os.environ["TESTING"] = "true"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"

from collections.abc import Generator  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from storefront.models import Base  # noqa: E402
from storefront.services.anonymization import (  # noqa: E402
    AnonymizationEngine,
    SqlAlchemyErasureStore,
    reset_anonymization_engine,
)
from storefront.services.seed import seed_demo_data  # noqa: E402


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Fresh in-memory SQLite database with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded_user_id(session_factory: sessionmaker[Session]) -> int:
    """Seed the demo customer (Alice Carter) and return her user id."""
    with session_factory() as session:
        user = seed_demo_data(session)
        assert user is not None
        return user.user_id


@pytest.fixture
def erasure_engine(session_factory: sessionmaker[Session]) -> AnonymizationEngine:
    """Engine bound to the test database."""
    return AnonymizationEngine(SqlAlchemyErasureStore(session_factory))


@pytest.fixture(autouse=True)
def reset_engine_singleton() -> Generator[None, None, None]:
    reset_anonymization_engine()
    yield
    reset_anonymization_engine()
