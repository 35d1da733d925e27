"""Base repository pattern implementation for database operations.

This module provides a generic repository base class that implements
common CRUD operations for SQLAlchemy models using async patterns.
"""

from collections.abc import Mapping
from typing import TypeVar

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forum.infrastructure.database.base import BaseModel

# Type variable for generic model type
T = TypeVar("T", bound=BaseModel)


class BaseRepository[T: BaseModel]:
    """Base repository class providing common CRUD operations.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    async def get_by_id(self, entity_id: int) -> T | None:
        """Retrieve a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to retrieve.

        Returns:
            T | None: The model instance if found, None otherwise.
        """
        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int | None = None) -> list[T]:
        """Retrieve model instances ordered by ID.

        Args:
            skip: Number of records to skip.
            limit: Maximum number of records to return, None for all.

        Returns:
            list[T]: List of model instances.
        """
        logger.debug(
            "Fetching {} with pagination - skip: {}, limit: {}",
            self.model_class.__name__,
            skip,
            limit,
        )

        stmt = (
            select(self.model_class)
            .order_by(self.model_class.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, obj: T) -> T:
        """Insert ``obj`` and load its server-generated values.

        Args:
            obj: The model instance to create.

        Returns:
            T: The created model instance with populated ID and timestamps.
        """
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)

        logger.info(
            "Created {} instance with ID: {}", self.model_class.__name__, obj.id
        )
        return obj

    async def update(self, entity_id: int, data: Mapping[str, object]) -> T | None:
        """Update a model instance by its ID with partial data.

        Args:
            entity_id: The primary key ID of the model to update.
            data: Fields to update. Unknown fields are ignored with a warning.

        Returns:
            T | None: The updated model instance if found, None otherwise.
        """
        instance = await self.get_by_id(entity_id)
        if instance is None:
            return None

        for key, value in data.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
            else:
                logger.warning(
                    "Attempted to update non-existent field '{}' on {}",
                    key,
                    self.model_class.__name__,
                )

        await self.session.flush()
        await self.session.refresh(instance)

        logger.info(
            "Updated {} instance ID {} - fields: {}",
            self.model_class.__name__,
            entity_id,
            list(data.keys()),
        )
        return instance

    async def delete(self, entity_id: int) -> bool:
        """Delete a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to delete.

        Returns:
            bool: True if the instance was deleted, False if not found.
        """
        stmt = sql_delete(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        deleted = result.rowcount > 0

        if deleted:
            logger.info(
                "Deleted {} instance with ID: {}", self.model_class.__name__, entity_id
            )
        return deleted

    async def find_one_by(self, **kwargs: object) -> T | None:
        """Find the first model instance matching the given conditions.

        Args:
            **kwargs: Field-value pairs to filter by.

        Returns:
            T | None: The first matching instance if found, None otherwise.
        """
        stmt = select(self.model_class)
        for field, value in kwargs.items():
            if hasattr(self.model_class, field):
                stmt = stmt.where(getattr(self.model_class, field) == value)
            else:
                logger.warning(
                    "Attempted to filter by non-existent field '{}' on {}",
                    field,
                    self.model_class.__name__,
                )

        stmt = stmt.order_by(self.model_class.id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
