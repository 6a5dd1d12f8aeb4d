"""
Authorization layer.

Each policy answers one question: may this actor perform this action on this
entity? ``evaluate`` returns a ``Decision``; ``authorize`` turns a denial into
a ``ForbiddenError`` carrying the reason verbatim.

The actor is always an explicit argument (``None`` for anonymous requests).
Anonymous actors never own anything, so every owner-only action denies them.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol

from linkshelf.exceptions import ForbiddenError
from linkshelf.models import Archive, Link, User, VisibilityType
from linkshelf.utils.logger import setup_logger

logger = setup_logger("policies")


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> Decision:
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> Decision:
        return cls(False, reason)


class LinkAction(str, enum.Enum):
    VIEW = "view"
    VISIT = "visit"
    UPDATE = "update"
    DELETE = "delete"


class ArchiveAction(str, enum.Enum):
    VIEW = "view"
    GET_LINKS = "get_links"
    UPDATE = "update"
    DELETE = "delete"
    ADD_LINK = "add_link"
    DELETE_LINK = "delete_link"


class ProfileAction(str, enum.Enum):
    UPDATE_BANNER = "update_banner"
    UPDATE_PROFILE = "update_profile"


def is_owner(actor: User | None, owner_id: int) -> bool:
    return actor is not None and actor.id == owner_id


def _visible_or_owned(actor: User | None, entity: Link | Archive) -> bool:
    return entity.visibility_id == VisibilityType.PUBLIC or is_owner(
        actor, entity.user_id
    )


class Policy(Protocol):
    def evaluate(self, actor: User | None, action, entity) -> Decision: ...


class LinkPolicy:
    DENY_ACCESS = "You cannot access private link that are not yours"
    DENY_REASONS = {
        LinkAction.VIEW: DENY_ACCESS,
        LinkAction.VISIT: DENY_ACCESS,
        LinkAction.UPDATE: "You cannot update link that are not yours",
        LinkAction.DELETE: "You cannot delete link that are not yours",
    }

    def evaluate(self, actor: User | None, action: LinkAction, link: Link) -> Decision:
        if action in (LinkAction.VIEW, LinkAction.VISIT):
            allowed = _visible_or_owned(actor, link)
        else:
            allowed = is_owner(actor, link.user_id)
        return Decision.allow() if allowed else Decision.deny(self.DENY_REASONS[action])


class ArchivePolicy:
    DENY_REASONS = {
        ArchiveAction.VIEW: "You cannot access private archive that are not yours",
        ArchiveAction.GET_LINKS: "You cannot access links of private archive that are not yours",
        ArchiveAction.UPDATE: "You cannot update archive that are not yours",
        ArchiveAction.DELETE: "You cannot delete archive that are not yours",
        ArchiveAction.ADD_LINK: "You cannot add link to archive that are not yours",
        ArchiveAction.DELETE_LINK: "You cannot remove link from archive that are not yours",
    }

    def evaluate(
        self, actor: User | None, action: ArchiveAction, archive: Archive
    ) -> Decision:
        if action in (ArchiveAction.VIEW, ArchiveAction.GET_LINKS):
            allowed = _visible_or_owned(actor, archive)
        else:
            allowed = is_owner(actor, archive.user_id)
        return Decision.allow() if allowed else Decision.deny(self.DENY_REASONS[action])


class ProfilePolicy:
    DENY_UPDATE = "You cannot update profile that are not yours"

    def evaluate(self, actor: User | None, action: ProfileAction, user: User) -> Decision:
        if is_owner(actor, user.id):
            return Decision.allow()
        return Decision.deny(self.DENY_UPDATE)


_POLICIES: dict[type, Policy] = {
    LinkAction: LinkPolicy(),
    ArchiveAction: ArchivePolicy(),
    ProfileAction: ProfilePolicy(),
}


def evaluate(actor: User | None, action: enum.Enum, entity) -> Decision:
    """Route the decision to the policy owning the action's type."""
    return _POLICIES[type(action)].evaluate(actor, action, entity)


def authorize(actor: User | None, action: enum.Enum, entity) -> None:
    """Raise ``ForbiddenError`` with the deny reason unless the action is allowed."""
    decision = evaluate(actor, action, entity)
    if not decision.allowed:
        logger.info(
            f"Denied {type(action).__name__}.{action.name} on {entity!r} "
            f"for actor {getattr(actor, 'id', None)}"
        )
        raise ForbiddenError(decision.reason)
