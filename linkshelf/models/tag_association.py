"""
Tag association models for links and archives.

Each owner kind has its own join table with a composite uniqueness constraint
on (tag, owner), so an association row always points at a real owner row and
a tag can be attached to the same owner only once.

Architecture:
    Link    ←→ LinkTag    ←→ Tag
    Archive ←→ ArchiveTag ←→ Tag
"""

from sqlalchemy import Column, ForeignKey, Index, Integer, UniqueConstraint

from linkshelf.models.base import Base, IntegerIDMixin


class LinkTag(Base, IntegerIDMixin):
    __tablename__ = "link_tags"
    __table_args__ = (
        UniqueConstraint("tag_id", "link_id", name="uq_link_tag"),
        Index("ix_link_tags_link_id", "link_id"),
    )

    tag_id = Column(
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
    )

    link_id = Column(
        Integer,
        ForeignKey("links.id", ondelete="CASCADE"),
        nullable=False,
    )

    def __repr__(self):
        return f"<LinkTag(tag_id={self.tag_id}, link_id={self.link_id})>"


class ArchiveTag(Base, IntegerIDMixin):
    __tablename__ = "archive_tags"
    __table_args__ = (
        UniqueConstraint("tag_id", "archive_id", name="uq_archive_tag"),
        Index("ix_archive_tags_archive_id", "archive_id"),
    )

    tag_id = Column(
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
    )

    archive_id = Column(
        Integer,
        ForeignKey("archives.id", ondelete="CASCADE"),
        nullable=False,
    )

    def __repr__(self):
        return f"<ArchiveTag(tag_id={self.tag_id}, archive_id={self.archive_id})>"
