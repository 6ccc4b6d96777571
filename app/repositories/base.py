"""Generic async repository with pagination and conditional (compare-and-swap) writes."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, func, inspect, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic CRUD repository over one ORM model.

    Writes that depend on the row's current state take extra ``where``
    conditions; they report whether a row matched instead of raising, so the
    caller decides what a lost race means.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self._session = session

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str) -> ModelT | None:
        result = await self._session.execute(
            select(self.model).where(self.model.id == entity_id)
        )
        return result.scalars().first()

    async def find(
        self,
        conditions: list[ColumnElement[bool]] | None = None,
        *,
        offset: int = 0,
        limit: int | None = None,
        order_by: str = "created_at",
        order: str = "desc",
    ) -> list[ModelT]:
        q = select(self.model).where(*(conditions or []))
        col = getattr(self.model, order_by, None)
        if col is not None:
            q = q.order_by(col.desc() if order == "desc" else col.asc())
        if offset:
            q = q.offset(offset)
        if limit is not None:
            q = q.limit(limit)
        items = (await self._session.execute(q)).scalars().all()
        return list(items)

    async def count_where(self, conditions: list[ColumnElement[bool]] | None = None) -> int:
        q = select(func.count()).select_from(self.model).where(*(conditions or []))
        return (await self._session.execute(q)).scalar_one()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def add(self, instance: ModelT) -> ModelT:
        self._session.add(instance)
        await self._session.flush()  # populate server defaults
        await self._session.refresh(instance)
        return instance

    async def create(self, **kwargs: Any) -> ModelT:
        return await self.add(self.model(**kwargs))

    async def save_changes(
        self, instance: ModelT, *conditions: ColumnElement[bool]
    ) -> bool:
        """Persist the instance's modified attributes with one conditional UPDATE.

        Only columns changed since load are written, and only if the row still
        satisfies ``conditions``. Returns False (and discards the in-memory
        changes) when no row matched.
        """
        state = inspect(instance)
        values = {
            attr.key: attr.value
            for attr in state.attrs
            if attr.key in self.model.__table__.columns and attr.history.has_changes()
        }
        values.pop("id", None)
        if not values:
            return True

        result = await self._session.execute(
            update(self.model)
            .where(self.model.id == instance.id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._session.expire(instance)
            return False
        # Reload from the row so the instance is no longer dirty
        await self._session.refresh(instance)
        return True

    async def delete_where(self, entity_id: str, *conditions: ColumnElement[bool]) -> bool:
        result = await self._session.execute(
            delete(self.model)
            .where(self.model.id == entity_id, *conditions)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
