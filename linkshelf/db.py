import argparse
import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import event, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from linkshelf import models  # noqa: F401
from linkshelf.config import settings
from linkshelf.models.base import Base
from linkshelf.models.tag import Tag
from linkshelf.models.visibility import Visibility, VisibilityType
from linkshelf.utils.logger import setup_logger

logger = setup_logger("db")


def _build_engine():
    if settings.is_sqlite:
        # One connection per session; aiosqlite connections are bound to the loop that opened them.
        engine = create_async_engine(
            settings.database_url,
            poolclass=NullPool,
            echo=settings.database_echo,
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=20,
        max_overflow=30,
        pool_timeout=60,
        pool_recycle=300,
        echo=settings.database_echo,
    )


logger.debug(f"Application DB URL: {settings.database_url}")
app_engine = _build_engine()

AppAsyncSessionLocal = async_sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=app_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# --- Dependency for FastAPI ---
async def get_app_db() -> AsyncGenerator[AsyncSession, None]:
    async with AppAsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def atomic(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    All-or-nothing unit of work on an existing session.

    Commits when the block exits normally. Any exception rolls back every
    statement issued on the session since the last commit and is re-raised.
    """
    try:
        yield db
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.warning(f"Transaction rolled back: {type(e).__name__}: {e}")
        raise


async def seed_visibilities(db: AsyncSession) -> None:
    """Insert the Public/Private lookup rows that are missing."""
    result = await db.execute(select(Visibility.id))
    existing = set(result.scalars().all())
    for visibility in VisibilityType:
        if visibility.value not in existing:
            db.add(Visibility(id=visibility.value, visibility=visibility.label))
    await db.commit()


async def seed_tags(names: list[str]) -> list[Tag]:
    """Create tags that do not exist yet, matched by name."""
    async with AppAsyncSessionLocal() as db:
        result = await db.execute(select(Tag).where(Tag.name.in_(names)))
        existing = {tag.name: tag for tag in result.scalars().all()}
        created = [Tag(name=name) for name in names if name not in existing]
        db.add_all(created)
        await db.commit()
    logger.info(f"Seeded {len(created)} new tags ({len(existing)} already present).")
    return list(existing.values()) + created


# --- Function to create tables ---
async def init_db():
    if not Base.metadata.tables:
        logger.warning("Base.metadata.tables is EMPTY! No tables will be created.")
    else:
        logger.debug(
            f"Tables registered in Base.metadata: {list(Base.metadata.tables.keys())}"
        )

    async with app_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AppAsyncSessionLocal() as db:
        await seed_visibilities(db)

    logger.info("Database schema initialized.")


async def close_db():
    """Closes database connections."""
    logger.info("Closing database connections.")
    await app_engine.dispose()
    logger.info("Database connections closed.")


async def list_tables() -> list[str]:
    """Lists all tables present in the application database."""
    async with app_engine.connect() as conn:
        table_names = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_table_names()
        )
    logger.info(f"Tables in application DB: {table_names}")
    return table_names


# --- Function to reset database ---
async def reset_db():
    logger.warning(
        "Attempting to reset the application database. THIS IS A DESTRUCTIVE OPERATION."
    )
    async with app_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("All application tables dropped.")
    await init_db()
    logger.info("Application database has been reset and re-initialized.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Application Database Initialization Utility"
    )
    parser.add_argument(
        "action",
        choices=["init", "reset", "list-tables", "seed-tags"],
        help="'init' to create missing tables and seed visibilities, "
        "'reset' to drop and recreate every table, "
        "'list-tables' to show existing tables, "
        "'seed-tags' to create the tags named with --tag.",
    )
    parser.add_argument(
        "--tag",
        action="append",
        default=[],
        help="Tag name for 'seed-tags'. Repeat for several tags.",
    )
    args = parser.parse_args()

    if args.action == "init":
        asyncio.run(init_db())
    elif args.action == "reset":
        confirm = input(
            "WARNING: This will delete all data in the application DB. Are you sure? (yes/no): "
        )
        if confirm.lower() == "yes":
            asyncio.run(reset_db())
        else:
            logger.info("Application Database reset cancelled by user.")
    elif args.action == "list-tables":
        asyncio.run(list_tables())
    elif args.action == "seed-tags":
        if not args.tag:
            parser.error("seed-tags requires at least one --tag")
        asyncio.run(seed_tags(args.tag))
