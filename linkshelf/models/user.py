"""
User model for authentication and content ownership.

Users own links and archives exclusively; ownership never transfers. Accounts
are created at registration and mutated only by their owner through profile
and banner updates.

Architecture:
    User → AccessToken
    User → Link / Archive
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from linkshelf.models.base import Base, IntegerIDMixin, TimestampMixin


class User(Base, IntegerIDMixin, TimestampMixin):
    """
    Registered account. Authenticates with email and a bcrypt hashed password
    and is addressed publicly by its unique username.
    """

    __tablename__ = "users"

    name = Column(
        String(50),
        nullable=False,
        comment="Display name, letters and spaces only",
    )

    username = Column(
        String(15),
        nullable=False,
        unique=True,
        index=True,
        comment="Unique public handle used in profile URLs",
    )

    email = Column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Unique email used for login",
    )

    hashed_password = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password for secure authentication",
    )

    image = Column(
        String(255),
        nullable=True,
        comment="Storage path of the avatar image",
    )

    banner = Column(
        String(255),
        nullable=True,
        comment="Storage path of the profile banner image",
    )

    tokens = relationship(
        "AccessToken",
        back_populates="user",
        cascade="all, delete-orphan",
        doc="Bearer tokens issued to this user",
    )

    links = relationship("Link", back_populates="author", doc="Links owned by this user")

    archives = relationship(
        "Archive", back_populates="author", doc="Archives owned by this user"
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
