"""Mixins for SQLAlchemy models."""

from sqlalchemy import Column, DateTime, func

# Columns callers may never assign directly
SYSTEM_MANAGED_COLUMNS = frozenset({"id", "created_at", "updated_at"})


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
