"""Database configuration and session management."""

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from src.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

Base: Any = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Create an engine, with pooling options suited to the backend."""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


engine = create_db_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def define_schema(bind: Engine) -> None:
    """Create any missing tables for the registered models."""
    # Import all models here so they are registered with Base.metadata
    from src import models  # noqa: F401

    Base.metadata.create_all(bind=bind)
    logger.info(f"Schema aligned: {', '.join(sorted(Base.metadata.tables))}")


def reset_schema(bind: Engine) -> None:
    """Drop and recreate every table."""
    from src import models  # noqa: F401

    Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)
    logger.warning("Schema dropped and recreated")


def init_db() -> None:
    """Initialize the database by creating all tables."""
    define_schema(engine)
