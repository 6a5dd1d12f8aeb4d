"""
Archive model: a user-owned, curated collection of links.

Architecture:
    User → Archive ←→ ArchiveLink ←→ Link
    Archive ←→ Tag

``links_count`` is a correlated count over ``archive_links`` evaluated every
time an archive is loaded.
"""

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    select,
)
from sqlalchemy.orm import column_property, relationship

from linkshelf.models.archive_link import ArchiveLink
from linkshelf.models.base import Base, IntegerIDMixin, TimestampMixin


class Archive(Base, IntegerIDMixin, TimestampMixin):
    __tablename__ = "archives"
    __table_args__ = (
        Index("ix_archives_slug", "slug"),
        Index("ix_archives_visibility_id", "visibility_id"),
    )

    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Owner of the archive",
    )

    title = Column(String(60), nullable=False)

    slug = Column(String(255), nullable=False)

    description = Column(Text, nullable=True)

    excerpt = Column(Text, nullable=True)

    views = Column(BigInteger, nullable=False, default=0)

    visibility_id = Column(
        Integer,
        ForeignKey("visibilities.id"),
        nullable=False,
    )

    author = relationship("User", back_populates="archives")

    visibility = relationship("Visibility")

    tags = relationship(
        "Tag",
        secondary="archive_tags",
        order_by="Tag.id",
        viewonly=True,
    )

    def __repr__(self):
        return f"<Archive(id={self.id}, slug='{self.slug}')>"


Archive.links_count = column_property(
    select(func.count(ArchiveLink.id))
    .where(ArchiveLink.archive_id == Archive.id)
    .correlate_except(ArchiveLink)
    .scalar_subquery()
)
