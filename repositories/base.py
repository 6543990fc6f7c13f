"""Shared async repository utilities for SQLAlchemy models."""

from typing import Generic, TypeVar, Type, Optional, Any
from sqlalchemy.ext.asyncio import AsyncSession
from database import Base

T = TypeVar("T", bound=Base)  # Generic model type constrained to SQLAlchemy Base.

class BaseRepository(Generic[T]):
    """Generic async repository with common CRUD operations for a model."""

    def __init__(self, session: AsyncSession, model: Type[T]):
        """Store the async DB session and the model class this repository serves."""
        # Session used for all database interactions in this repository instance.
        self.session = session
        # SQLAlchemy model class (not instance) for query construction.
        self.model = model

    async def get_by_id(self, id: Any) -> Optional[T]:
        """Fetch a single model instance by primary key, if it exists."""
        # `session.get` is optimized for primary-key lookup.
        return await self.session.get(self.model, id)

    async def create(self, values: dict) -> T:
        """Insert a new row and return it with store-assigned columns loaded."""
        instance = self.model(**values)
        self.session.add(instance)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: T, values: dict) -> T:
        """Apply `values` to an existing instance and persist it."""
        for key, value in values.items():
            setattr(instance, key, value)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: T) -> None:
        await self.session.delete(instance)
        await self.session.commit()
