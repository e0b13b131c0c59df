from __future__ import annotations

from functools import wraps
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from histline.models.base import Base
from histline.utils.logger import setup_logger

logger = setup_logger("db_handlers")


ModelType = TypeVar("ModelType", bound=Base)


def check_local_db(func):
    """Session decorator: opens a session and owns the transaction unless one is passed in."""

    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        # A caller-provided session means the caller owns the transaction
        if kwargs.get("db"):
            return await func(self, *args, **kwargs)

        async with self.session_factory() as db:
            kwargs["db"] = db
            try:
                result = await func(self, *args, **kwargs)
                await db.commit()
                return result
            except Exception as e:
                await db.rollback()
                logger.error(
                    f"Transaction failed in {func.__name__}: {e}",
                    exc_info=True,
                )
                raise

    return wrapper


class BaseDBHandler(Generic[ModelType]):
    """Generic handler for database operations on one model."""

    def __init__(
        self,
        model: type[ModelType],
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.model = model
        if session_factory is None:
            from histline.db import AppAsyncSessionLocal

            session_factory = AppAsyncSessionLocal
        self.session_factory = session_factory

    @check_local_db
    async def create(
        self, obj_dict: dict[str, Any], *, db: AsyncSession = None
    ) -> ModelType:
        """Create a new record in the database."""
        db_obj = self.model(**obj_dict)
        try:
            db.add(db_obj)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            logger.warning(f"IntegrityError creating {self.model.__name__}: {e}")
            # Callers map this to a domain-specific conflict
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}", exc_info=True)
            raise

    @check_local_db
    async def get_by_attributes(
        self, *, db: AsyncSession = None, **kwargs
    ) -> ModelType | None:
        """Get a single record by a set of attributes."""
        stmt = select(self.model).filter_by(**kwargs)
        result = await db.execute(stmt)
        return result.scalars().first()
