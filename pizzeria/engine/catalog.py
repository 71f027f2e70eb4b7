"""
Order engine — Catalog lookup interface

Any object with these coroutine methods can feed the engine: the SQL adapter
in pizzeria.db.catalog_lookup, or an in-memory fake in tests. Missing
records come back as None (or are absent from the returned list).
"""
from typing import Iterable, Protocol

from pizzeria.schemas.catalog import Pizza, Size, Status, Topping


class CatalogLookup(Protocol):
    async def get_pizza(self, pizza_id: str) -> Pizza | None: ...

    async def get_size(self, size_id: str) -> Size | None: ...

    async def get_toppings(self, topping_ids: Iterable[str]) -> list[Topping]: ...

    async def get_status(self, id_or_name: str) -> Status | None: ...
