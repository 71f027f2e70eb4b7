"""
Pizzeria Orders — SQL catalog lookup

Each lookup opens its own session, so the formatter can run many lookups
concurrently without sharing an AsyncSession.
"""
from typing import Iterable

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pizzeria.models.catalog import FlavorModel, PizzaModel, SizeModel, StatusModel, ToppingModel
from pizzeria.schemas.catalog import Flavor, Pizza, Size, Status, StatusName, Topping


def _flavor(row: FlavorModel) -> Flavor:
    return Flavor(id=row.id, name=row.name, description=row.description, price=row.price)


def _size(row: SizeModel) -> Size:
    return Size(id=row.id, name=row.name, price=row.price)


class SqlCatalogLookup:
    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker

    async def get_pizza(self, pizza_id: str) -> Pizza | None:
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(PizzaModel, FlavorModel, SizeModel)
                .join(FlavorModel, PizzaModel.flavor_id == FlavorModel.id)
                .join(SizeModel, PizzaModel.size_id == SizeModel.id)
                .where(PizzaModel.id == pizza_id)
            )
            row = result.one_or_none()
        if row is None:
            return None
        pizza, flavor, size = row
        return Pizza(id=pizza.id, flavor=_flavor(flavor), size=_size(size), image=pizza.image)

    async def get_size(self, size_id: str) -> Size | None:
        async with self._sessionmaker() as session:
            row = await session.get(SizeModel, size_id)
        return _size(row) if row else None

    async def get_toppings(self, topping_ids: Iterable[str]) -> list[Topping]:
        ids = list(topping_ids)
        if not ids:
            return []
        async with self._sessionmaker() as session:
            result = await session.execute(select(ToppingModel).where(ToppingModel.id.in_(ids)))
            rows = result.scalars().all()
        return [Topping(id=r.id, name=r.name, price=r.price) for r in rows]

    async def get_status(self, id_or_name: str) -> Status | None:
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(StatusModel).where(or_(StatusModel.id == id_or_name, StatusModel.name == id_or_name))
            )
            row = result.scalars().first()
        if row is None:
            return None
        return Status(id=row.id, name=StatusName(row.name), description=row.description)
