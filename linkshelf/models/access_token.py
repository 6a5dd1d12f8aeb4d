"""
Issued bearer tokens.

A signed token is only honoured while its row exists, which makes logout
(revoking every token of a user) a plain delete.
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from linkshelf.models.base import Base, IntegerIDMixin, TimestampMixin


class AccessToken(Base, IntegerIDMixin, TimestampMixin):
    __tablename__ = "access_tokens"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    jti = Column(
        String(64),
        nullable=False,
        unique=True,
        comment="Token identifier embedded in the signed token",
    )

    name = Column(
        String(50),
        nullable=False,
        default="main",
        comment="Client label for the token",
    )

    user = relationship("User", back_populates="tokens")

    def __repr__(self):
        return f"<AccessToken(id={self.id}, user_id={self.user_id}, name='{self.name}')>"
