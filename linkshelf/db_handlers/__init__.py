from linkshelf.db_handlers.access_token import AccessTokenDBHandler
from linkshelf.db_handlers.archive import ArchiveDBHandler
from linkshelf.db_handlers.archive_link import ArchiveLinkDBHandler
from linkshelf.db_handlers.base import BaseDBHandler
from linkshelf.db_handlers.link import LinkDBHandler
from linkshelf.db_handlers.tag import TagDBHandler
from linkshelf.db_handlers.user import UserDBHandler

__all__ = [
    "BaseDBHandler",
    "UserDBHandler",
    "AccessTokenDBHandler",
    "TagDBHandler",
    "LinkDBHandler",
    "ArchiveDBHandler",
    "ArchiveLinkDBHandler",
]
