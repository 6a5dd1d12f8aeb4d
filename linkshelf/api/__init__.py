from linkshelf.api.archives import router as archives_router
from linkshelf.api.auth import router as auth_router
from linkshelf.api.links import router as links_router
from linkshelf.api.tags import router as tags_router
from linkshelf.api.users import router as users_router

__all__ = [
    "auth_router",
    "tags_router",
    "links_router",
    "archives_router",
    "users_router",
]
