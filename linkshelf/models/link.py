"""
Link model: a user-owned bookmark.

A link is addressed privately by its slug and publicly by its random ``hash``
(10 hex characters, unique and never changed after creation).

Architecture:
    User → Link ←→ Tag
    Archive ←→ ArchiveLink ←→ Link
"""

from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from linkshelf.models.base import Base, IntegerIDMixin, TimestampMixin


class Link(Base, IntegerIDMixin, TimestampMixin):
    __tablename__ = "links"
    __table_args__ = (
        Index("ix_links_slug", "slug"),
        Index("ix_links_visibility_id", "visibility_id"),
    )

    hash = Column(
        String(10),
        nullable=False,
        unique=True,
        comment="Public short identifier used by /g/{hash}",
    )

    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Owner of the link",
    )

    title = Column(String(80), nullable=False)

    slug = Column(String(255), nullable=False)

    url = Column(String(2048), nullable=False)

    description = Column(Text, nullable=True)

    excerpt = Column(
        Text,
        nullable=True,
        comment="Plain-text description truncated to 200 characters",
    )

    views = Column(BigInteger, nullable=False, default=0)

    visibility_id = Column(
        Integer,
        ForeignKey("visibilities.id"),
        nullable=False,
    )

    author = relationship("User", back_populates="links")

    visibility = relationship("Visibility")

    tags = relationship(
        "Tag",
        secondary="link_tags",
        order_by="Tag.id",
        viewonly=True,
        doc="Tags attached through link_tags; written by the tag service only",
    )

    def __repr__(self):
        return f"<Link(id={self.id}, hash='{self.hash}', slug='{self.slug}')>"
