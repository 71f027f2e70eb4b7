"""
SQL adapter tests

OrderStore and SqlCatalogLookup against a throwaway SQLite database through
the async engine (aiosqlite driver), so the version_id conditional UPDATE is
exercised for real.
"""
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from pizzeria.core.optimistic_lock import StaleDataError
from pizzeria.db.catalog_lookup import SqlCatalogLookup
from pizzeria.db.database import Base
from pizzeria.db.order_store import OrderStore
from pizzeria.engine.formatter import format_order_lines
from pizzeria.engine.pricing import compute_order_total
from pizzeria.models.catalog import FlavorModel, PizzaModel, SizeModel, StatusModel, ToppingModel
from pizzeria.models.order import OrderModel  # noqa: F401  (register table on Base.metadata)
from pizzeria.schemas.catalog import StatusName
from pizzeria.schemas.order import OrderItemRequest


@pytest_asyncio.fixture
async def sessionmaker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        session.add_all([
            FlavorModel(id="fl-pepperoni", name="Pepperoni", price=Decimal("100")),
            SizeModel(id="sz-personal", name="Personal", price=Decimal("35")),
            SizeModel(id="sz-large", name="Large", price=Decimal("135")),
            ToppingModel(id="tp-cheese", name="Extra cheese", price=Decimal("20")),
            ToppingModel(id="tp-bacon", name="Bacon", price=Decimal("30")),
            PizzaModel(id="pz-pepperoni-personal", flavor_id="fl-pepperoni", size_id="sz-personal"),
            *(StatusModel(id=f"st-{name.name.lower()}", name=name.value) for name in StatusName),
        ])
        await session.commit()

    yield factory
    await engine.dispose()


@pytest.fixture
def sql_catalog(sessionmaker):
    return SqlCatalogLookup(sessionmaker)


@pytest.fixture
def store(sessionmaker):
    return OrderStore(sessionmaker)


# ─── Catalog lookup ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_pizza_comes_with_flavor_and_catalog_size(sql_catalog):
    pizza = await sql_catalog.get_pizza("pz-pepperoni-personal")
    assert pizza.flavor.name == "Pepperoni"
    assert pizza.size.id == "sz-personal"
    assert pizza.price == Decimal("135")
    assert await sql_catalog.get_pizza("missing") is None


@pytest.mark.asyncio
async def test_toppings_lookup_returns_only_existing_records(sql_catalog):
    toppings = await sql_catalog.get_toppings(["tp-bacon", "missing", "tp-cheese"])
    assert {t.id for t in toppings} == {"tp-bacon", "tp-cheese"}
    assert await sql_catalog.get_toppings([]) == []


@pytest.mark.asyncio
async def test_status_found_by_id_or_name(sql_catalog):
    by_id = await sql_catalog.get_status("st-on_the_way")
    by_name = await sql_catalog.get_status("On the way")
    assert by_id == by_name
    assert by_id.name == StatusName.ON_THE_WAY
    assert await sql_catalog.get_status("Baking") is None


# ─── Order store ───────────────────────────────────────────────────────────────

async def _stored_order(store, sql_catalog, make_order):
    lines = await format_order_lines(
        [OrderItemRequest(pizza="pz-pepperoni-personal", size="sz-large", toppings=["tp-cheese"], quantity=2)],
        sql_catalog,
    )
    order = make_order().model_copy(update={"id": None, "items": lines, "total": compute_order_total(lines)})
    return await store.create(order)


@pytest.mark.asyncio
async def test_created_order_reads_back_at_version_one(store, sql_catalog, make_order):
    created = await _stored_order(store, sql_catalog, make_order)

    order, version = await store.get(created.id)
    assert version == 1
    assert order.code == "ORD-KR-12345"
    assert order.created_at is not None
    # (100 + 135 + 20) * 2
    assert order.items[0].line_total == Decimal("510")
    assert order.total == Decimal("510")
    assert order.items[0].toppings[0].id == "tp-cheese"
    assert order.status_history[0].name == StatusName.PENDING


@pytest.mark.asyncio
async def test_save_bumps_version_and_rejects_stale_writes(store, sql_catalog, make_order):
    created = await _stored_order(store, sql_catalog, make_order)
    order, version = await store.get(created.id)

    await store.save(created.id, order.model_copy(update={"notes": "Ring twice"}), expected_version=version)

    with pytest.raises(StaleDataError) as exc_info:
        await store.save(created.id, order.model_copy(update={"notes": "Lost write"}), expected_version=version)
    assert exc_info.value.expected_version == 1

    order, version = await store.get(created.id)
    assert version == 2
    assert order.notes == "Ring twice"


@pytest.mark.asyncio
async def test_find_count_and_delete(store, sql_catalog, make_order):
    ids = [(await _stored_order(store, sql_catalog, make_order)).id for _ in range(3)]

    assert await store.count() == 3
    assert len(await store.find(skip=2, limit=2)) == 1
    assert len(await store.find(limit=2)) == 2

    assert await store.delete(ids[0]) is True
    assert await store.delete(ids[0]) is False
    assert await store.get(ids[0]) is None
    assert await store.count() == 2
