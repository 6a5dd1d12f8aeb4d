"""
Fixtures for the HTTP tests: a fresh database per test, an ASGI client and
small factories that write rows directly through the ORM.
"""

import itertools
from datetime import timedelta

import httpx
import pytest
import pytest_asyncio

from linkshelf.db import AppAsyncSessionLocal, app_engine, seed_visibilities
from linkshelf.models import (
    Archive,
    ArchiveLink,
    ArchiveTag,
    Link,
    LinkTag,
    Tag,
    User,
    VisibilityType,
)
from linkshelf.models.base import Base, utc_now
from linkshelf.services.auth_service import AuthService, login_limiter
from linkshelf.utils.auth import get_password_hash
from linkshelf.utils.text_processing import generate_hash, make_excerpt, slugify

DEFAULT_PASSWORD = "password123"

_sequence = itertools.count(1)


@pytest_asyncio.fixture(autouse=True)
async def database():
    """Rebuild every table and reseed the visibility lookup before each test."""
    async with app_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with AppAsyncSessionLocal() as session:
        await seed_visibilities(session)
    login_limiter.reset()
    yield
    login_limiter.reset()


@pytest_asyncio.fixture
async def db_session():
    async with AppAsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client():
    from main import create_app

    app = create_app()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_user(db_session):
    async def factory(username: str | None = None, **overrides) -> User:
        number = next(_sequence)
        username = username or f"user{number:04d}"
        user = User(
            name=overrides.pop("name", "Test User"),
            username=username,
            email=overrides.pop("email", f"{username}@example.com"),
            hashed_password=get_password_hash(
                overrides.pop("password", DEFAULT_PASSWORD)
            ),
            **overrides,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return factory


@pytest.fixture
def auth_headers(db_session):
    async def factory(user: User) -> dict[str, str]:
        token = await AuthService().issue_token(user, db=db_session)
        await db_session.commit()
        return {"Authorization": f"Bearer {token}"}

    return factory


@pytest.fixture
def make_tags(db_session):
    async def factory(*names: str) -> list[Tag]:
        names = names or ("python", "web", "data", "tools", "reading", "music")
        tags = [Tag(name=name) for name in names]
        db_session.add_all(tags)
        await db_session.commit()
        return tags

    return factory


@pytest.fixture
def make_link(db_session):
    async def factory(
        owner: User,
        title: str = "A useful link",
        *,
        visibility: VisibilityType = VisibilityType.PUBLIC,
        tags: list[Tag] = (),
        url: str = "https://example.com/article",
        description: str | None = None,
    ) -> Link:
        link = Link(
            hash=generate_hash(),
            user_id=owner.id,
            title=title,
            slug=f"{slugify(title)}-{next(_sequence)}",
            url=url,
            description=description,
            excerpt=make_excerpt(description),
            visibility_id=visibility,
        )
        db_session.add(link)
        await db_session.flush()
        db_session.add_all(LinkTag(tag_id=tag.id, link_id=link.id) for tag in tags)
        await db_session.commit()
        return link

    return factory


@pytest.fixture
def make_archive(db_session):
    async def factory(
        owner: User,
        title: str = "Reading list",
        *,
        visibility: VisibilityType = VisibilityType.PUBLIC,
        tags: list[Tag] = (),
        links: list[Link] = (),
    ) -> Archive:
        archive = Archive(
            user_id=owner.id,
            title=title,
            slug=f"{slugify(title)}-{next(_sequence)}",
            visibility_id=visibility,
        )
        db_session.add(archive)
        await db_session.flush()
        db_session.add_all(
            ArchiveTag(tag_id=tag.id, archive_id=archive.id) for tag in tags
        )
        started = utc_now()
        db_session.add_all(
            ArchiveLink(
                archive_id=archive.id,
                link_id=link.id,
                created_at=started + timedelta(seconds=index),
            )
            for index, link in enumerate(links)
        )
        await db_session.commit()
        return archive

    return factory
