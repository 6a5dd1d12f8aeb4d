from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.models.base import Base
from linkshelf.utils.logger import setup_logger

logger = setup_logger("db_handlers")


ModelType = TypeVar("ModelType", bound=Base)


class BaseDBHandler(Generic[ModelType]):
    """
    Generic handler for database operations with basic CRUD methods.

    Every method runs on the caller's session. Write methods only flush;
    the caller commits, usually through ``linkshelf.db.atomic``.
    """

    def __init__(self, model: type[ModelType]):
        self.model = model

    async def create(
        self, obj_dict: dict[str, Any], *, db: AsyncSession
    ) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**obj_dict)
        try:
            db.add(db_obj)
            await db.flush()
            return db_obj
        except IntegrityError as e:
            logger.warning(f"IntegrityError creating {self.model.__name__}: {e}")
            # Re-raise IntegrityError so calling code can handle it specifically
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}", exc_info=True)
            raise

    async def get(self, id: Any, *, db: AsyncSession) -> ModelType | None:
        """Get a single record by its primary key."""
        stmt = select(self.model).where(self.model.id == id)
        result = await db.execute(stmt)
        return result.scalars().first()

    async def get_by_attributes(
        self, *, db: AsyncSession, query: select = None, **kwargs
    ) -> ModelType | None:
        """Get a single record by a set of attributes."""
        options_to_load = kwargs.pop("options", None)

        stmt = query if query is not None else select(self.model)
        stmt = stmt.filter_by(**kwargs)

        if options_to_load:
            stmt = stmt.options(*options_to_load)

        result = await db.execute(stmt)
        return result.scalars().first()

    async def exists(self, *, db: AsyncSession, **kwargs) -> bool:
        """Whether any record matches the given attributes."""
        stmt = select(self.model.id).filter_by(**kwargs).limit(1)
        result = await db.execute(stmt)
        return result.first() is not None

    async def paginate(
        self,
        stmt,
        *,
        page: int,
        per_page: int,
        db: AsyncSession,
    ) -> tuple[list[ModelType], int]:
        """Run ``stmt`` for one page. Returns ``(items, total)``."""
        count_stmt = select(func.count()).select_from(
            stmt.order_by(None).subquery()
        )
        total = (await db.execute(count_stmt)).scalar_one()
        result = await db.execute(stmt.offset((page - 1) * per_page).limit(per_page))
        return list(result.scalars().all()), total

    async def update(
        self,
        db_obj: ModelType,
        update_data: dict[str, Any],
        *,
        db: AsyncSession,
    ) -> ModelType:
        """Apply ``update_data`` to an existing record."""
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        try:
            db.add(db_obj)
            await db.flush()
            return db_obj
        except SQLAlchemyError as e:
            logger.error(
                f"Error updating {self.model.__name__} with id {db_obj.id}: {e}",
                exc_info=True,
            )
            raise

    async def remove(self, db_obj: ModelType, *, db: AsyncSession) -> None:
        """Delete a loaded record."""
        try:
            await db.delete(db_obj)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(
                f"Error removing {self.model.__name__} with id {db_obj.id}: {e}",
                exc_info=True,
            )
            raise
