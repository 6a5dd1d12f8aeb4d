"""
Visibility lookup table.

Two immutable rows, Public (1) and Private (2), seeded by ``init_db``. Links
and archives reference them through ``visibility_id``.
"""

import enum

from sqlalchemy import Column, Integer, String

from linkshelf.models.base import Base


class VisibilityType(enum.IntEnum):
    PUBLIC = 1
    PRIVATE = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Visibility(Base):
    """Access class attached to a link or an archive."""

    __tablename__ = "visibilities"

    id = Column(Integer, primary_key=True, autoincrement=False)

    visibility = Column(
        String(20),
        nullable=False,
        unique=True,
        comment="Human readable label: Public or Private",
    )

    def __repr__(self):
        return f"<Visibility(id={self.id}, visibility='{self.visibility}')>"
