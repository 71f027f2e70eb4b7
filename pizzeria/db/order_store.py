"""
Pizzeria Orders — Order persistence
"""
import uuid
from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pizzeria.core.optimistic_lock import StaleDataError
from pizzeria.models.order import OrderModel
from pizzeria.schemas.order import Order


def _to_order(row: OrderModel) -> Order:
    return Order(
        id=row.id,
        code=row.code,
        user=row.user,
        items=row.items,
        delivery=row.delivery,
        status=row.status,
        status_history=row.status_history,
        notes=row.notes,
        total=row.total,
        created_at=row.created_at,
    )


def _columns(order: Order) -> dict:
    """Mutable columns of an order, JSON documents rendered JSON-safe."""
    doc = order.model_dump(mode="json", include={"user", "items", "delivery", "status_history"})
    return {
        **doc,
        "code": order.code,
        "status": order.status.value,
        "notes": order.notes,
        "total": order.total,
    }


class OrderStore:
    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker

    async def create(self, order: Order) -> Order:
        row = OrderModel(id=str(uuid.uuid4()), version_id=1, **_columns(order))
        async with self._sessionmaker() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
        return _to_order(row)

    async def get(self, order_id: str) -> tuple[Order, int] | None:
        """The order plus the version_id it was read at."""
        async with self._sessionmaker() as session:
            row = await session.get(OrderModel, order_id)
        if row is None:
            return None
        return _to_order(row), row.version_id

    async def save(self, order_id: str, order: Order, expected_version: int) -> None:
        """Write the order only if nobody else has since; StaleDataError otherwise."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                update(OrderModel)
                .where(OrderModel.id == order_id, OrderModel.version_id == expected_version)
                .values(**_columns(order), version_id=expected_version + 1)
            )
            if result.rowcount == 0:
                await session.rollback()
                raise StaleDataError(order_id, expected_version)
            await session.commit()

    async def delete(self, order_id: str) -> bool:
        async with self._sessionmaker() as session:
            result = await session.execute(delete(OrderModel).where(OrderModel.id == order_id))
            await session.commit()
        return result.rowcount > 0

    async def count(self) -> int:
        async with self._sessionmaker() as session:
            return (await session.execute(select(func.count()).select_from(OrderModel))).scalar_one()

    async def find(
        self,
        skip: int = 0,
        limit: int | None = None,
        created_from: datetime | None = None,
        created_before: datetime | None = None,
    ) -> list[Order]:
        """Newest first, optionally restricted to [created_from, created_before)."""
        query = select(OrderModel).order_by(OrderModel.created_at.desc())
        if created_from is not None:
            query = query.where(OrderModel.created_at >= created_from)
        if created_before is not None:
            query = query.where(OrderModel.created_at < created_before)
        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        async with self._sessionmaker() as session:
            rows = (await session.execute(query)).scalars().all()
        return [_to_order(r) for r in rows]
