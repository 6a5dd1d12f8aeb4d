"""
Database models for linkshelf.

Architecture: User → Link / Archive, Archive ←→ Link membership, shared Tags.
"""

from linkshelf.models.access_token import AccessToken
from linkshelf.models.archive import Archive
from linkshelf.models.archive_link import ArchiveLink
from linkshelf.models.link import Link
from linkshelf.models.tag import Tag
from linkshelf.models.tag_association import ArchiveTag, LinkTag
from linkshelf.models.user import User
from linkshelf.models.visibility import Visibility, VisibilityType

__all__ = [
    # Core business models
    "User",
    "Link",
    "Archive",
    "Tag",
    # Reference data
    "Visibility",
    "VisibilityType",
    # Association models
    "ArchiveLink",
    "LinkTag",
    "ArchiveTag",
    # Authentication
    "AccessToken",
]
