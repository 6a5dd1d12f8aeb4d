"""
Tag model.

Tags are shared, unowned labels. They attach to links through ``link_tags`` and
to archives through ``archive_tags``.
"""

from sqlalchemy import Column, String

from linkshelf.models.base import Base, IntegerIDMixin, TimestampMixin


class Tag(Base, IntegerIDMixin, TimestampMixin):
    __tablename__ = "tags"

    name = Column(
        String(50),
        nullable=False,
        comment="Display name of the tag",
    )

    def __repr__(self):
        return f"<Tag(id={self.id}, name='{self.name}')>"
