"""
Archive-Link membership.

One row per link attached to an archive. ``created_at`` orders an archive's
links by recency of attachment. The (archive_id, link_id) pair is unique at
the storage layer, so a concurrent duplicate attach fails on insert.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, UniqueConstraint

from linkshelf.models.base import Base, IntegerIDMixin, utc_now


class ArchiveLink(Base, IntegerIDMixin):
    __tablename__ = "archive_links"
    __table_args__ = (
        UniqueConstraint("archive_id", "link_id", name="uq_archive_link"),
        Index("ix_archive_links_archive_created", "archive_id", "created_at"),
        Index("ix_archive_links_link_id", "link_id"),
    )

    archive_id = Column(
        Integer,
        ForeignKey("archives.id", ondelete="CASCADE"),
        nullable=False,
    )

    link_id = Column(
        Integer,
        ForeignKey("links.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        comment="When the link was added to the archive",
    )

    def __repr__(self):
        return (
            f"<ArchiveLink(id={self.id}, "
            f"archive_id={self.archive_id}, "
            f"link_id={self.link_id})>"
        )
