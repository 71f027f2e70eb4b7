"""
Shared fixtures: an in-memory catalog and order store standing in for the
SQL adapters, plus a small pizza catalog.
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pizzeria.core.optimistic_lock import StaleDataError
from pizzeria.schemas.catalog import Flavor, Pizza, Size, Status, StatusName, Topping
from pizzeria.schemas.order import (
    DeliveryType,
    Order,
    OrderDelivery,
    OrderUser,
    StatusHistoryEntry,
)


class InMemoryCatalog:
    def __init__(self, pizzas=(), sizes=(), toppings=(), statuses=()):
        self.pizzas = {p.id: p for p in pizzas}
        self.sizes = {s.id: s for s in sizes}
        self.toppings = {t.id: t for t in toppings}
        self.statuses = {s.id: s for s in statuses}
        self.topping_calls: list[list[str]] = []

    async def get_pizza(self, pizza_id):
        return self.pizzas.get(pizza_id)

    async def get_size(self, size_id):
        return self.sizes.get(size_id)

    async def get_toppings(self, topping_ids):
        ids = list(topping_ids)
        self.topping_calls.append(ids)
        return [self.toppings[i] for i in ids if i in self.toppings]

    async def get_status(self, id_or_name):
        if id_or_name in self.statuses:
            return self.statuses[id_or_name]
        for status in self.statuses.values():
            if status.name.value == id_or_name:
                return status
        return None


class InMemoryOrderStore:
    """Same interface as pizzeria.db.order_store.OrderStore."""

    def __init__(self):
        self.rows: dict[str, tuple[Order, int]] = {}
        self.pending_conflicts = 0

    async def create(self, order):
        order_id = str(uuid.uuid4())
        created = order.model_copy(update={"id": order_id, "created_at": datetime.now(tz=timezone.utc)})
        self.rows[order_id] = (created, 1)
        return created

    async def get(self, order_id):
        return self.rows.get(order_id)

    async def save(self, order_id, order, expected_version):
        current, version = self.rows[order_id]
        if self.pending_conflicts:
            self.pending_conflicts -= 1
            self.rows[order_id] = (current, version + 1)
            raise StaleDataError(order_id, expected_version)
        if version != expected_version:
            raise StaleDataError(order_id, expected_version)
        self.rows[order_id] = (order.model_copy(update={"id": order_id, "created_at": current.created_at}), version + 1)

    async def delete(self, order_id):
        return self.rows.pop(order_id, None) is not None

    async def count(self):
        return len(self.rows)

    async def find(self, skip=0, limit=None, created_from=None, created_before=None):
        orders = sorted((o for o, _ in self.rows.values()), key=lambda o: o.created_at, reverse=True)
        if created_from is not None:
            orders = [o for o in orders if o.created_at >= created_from]
        if created_before is not None:
            orders = [o for o in orders if o.created_at < created_before]
        orders = orders[skip:]
        return orders[:limit] if limit is not None else orders


# ─── Catalog data ──────────────────────────────────────────────────────────────

PEPPERONI = Flavor(id="fl-pepperoni", name="Pepperoni", price=Decimal("100"))
HAWAIIAN = Flavor(id="fl-hawaiian", name="Hawaiian", price=Decimal("120.50"))

PERSONAL = Size(id="sz-personal", name="Personal", price=Decimal("35"))
MEDIUM = Size(id="sz-medium", name="Medium", price=Decimal("80"))
LARGE = Size(id="sz-large", name="Large", price=Decimal("135"))

CHEESE = Topping(id="tp-cheese", name="Extra cheese", price=Decimal("20"))
BACON = Topping(id="tp-bacon", name="Bacon", price=Decimal("30"))

PEPPERONI_PERSONAL = Pizza(id="pz-pepperoni-personal", flavor=PEPPERONI, size=PERSONAL, image="pepperoni.jpg")
HAWAIIAN_LARGE = Pizza(id="pz-hawaiian-large", flavor=HAWAIIAN, size=LARGE, image="hawaiian.jpg")

STATUSES = [
    Status(id=f"st-{name.name.lower()}", name=name, description=f"{name.value} orders")
    for name in StatusName
]


@pytest.fixture
def catalog():
    return InMemoryCatalog(
        pizzas=[PEPPERONI_PERSONAL, HAWAIIAN_LARGE],
        sizes=[PERSONAL, MEDIUM, LARGE],
        toppings=[CHEESE, BACON],
        statuses=STATUSES,
    )


@pytest.fixture
def order_store():
    return InMemoryOrderStore()


@pytest.fixture
def make_order():
    def _make(status=StatusName.PENDING, history=None, notes=None, delivery_type=DeliveryType.DELIVERY):
        if history is None:
            history = [status]
        return Order(
            id="order-1",
            code="ORD-KR-12345",
            user=OrderUser(
                first_name="Kevin",
                last_name="Reyes",
                address="23th street, Managua",
                phone="5555 5555",
                email="kevin@example.com",
            ),
            items=[],
            delivery=OrderDelivery(type=delivery_type, estimated_time=20),
            status=status,
            status_history=[
                StatusHistoryEntry(name=name, timestamp=datetime(2025, 1, 20, 18, i, tzinfo=timezone.utc))
                for i, name in enumerate(history)
            ],
            notes=notes,
            total=Decimal("0"),
        )
    return _make
