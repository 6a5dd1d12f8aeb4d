"""
Base configurations and mixins for database models.

This module provides the foundation for all database models in linkshelf:
the declarative base, integer primary keys and application-managed timestamps.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base


def utc_now() -> datetime:
    return datetime.now(UTC)


# Create the base class for all models
Base = declarative_base()


class TimestampMixin:
    """
    Mixin class that adds timestamp management to models.

    Values are produced in Python at flush time so they are available on the
    instance right after insert or update, without a refresh round-trip.
    """

    created_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        comment="Timestamp when the record was created",
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
        comment="Timestamp when the record was last updated",
    )


class IntegerIDMixin:
    """Mixin class that adds an autoincrement integer primary key."""

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Primary key",
    )


__all__ = ["Base", "TimestampMixin", "IntegerIDMixin", "utc_now"]
