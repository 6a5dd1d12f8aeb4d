from linkshelf.dependencies.auth import get_current_user, get_current_user_optional
from linkshelf.dependencies.resources import (
    get_archive_by_slug,
    get_link_by_hash,
    get_link_by_slug,
    get_user_by_username,
)
from linkshelf.dependencies.validation import json_body, parse_body

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "get_link_by_slug",
    "get_link_by_hash",
    "get_archive_by_slug",
    "get_user_by_username",
    "json_body",
    "parse_body",
]
