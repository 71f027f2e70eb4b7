"""
Pizzeria Orders — Order operations

Glue between the order engine and persistence: resolve, price and store new
orders, and run status updates under optimistic locking.
"""
import logging

from pizzeria.core.config import get_settings
from pizzeria.core.optimistic_lock import with_optimistic_retry
from pizzeria.db.order_store import OrderStore
from pizzeria.engine.catalog import CatalogLookup
from pizzeria.engine.errors import NotFound
from pizzeria.engine.formatter import format_order_lines
from pizzeria.engine.order_code import create_order_code
from pizzeria.engine.pagination import paginate
from pizzeria.engine.pricing import compute_order_total
from pizzeria.engine.stats import month_range, month_stats, previous_month
from pizzeria.engine.status_machine import apply_order_update, new_history_entry
from pizzeria.schemas.catalog import StatusName
from pizzeria.schemas.order import (
    CreateOrderRequest,
    MonthStats,
    Order,
    OrderDelivery,
    OrderUpdate,
    OrderUser,
    PageInfo,
)

settings = get_settings()
logger = logging.getLogger(__name__)


async def place_order(
    store: OrderStore,
    catalog: CatalogLookup,
    payload: CreateOrderRequest,
    user: OrderUser,
) -> Order:
    """Create an order in 'Pending' with server-computed lines and total."""
    pending = await catalog.get_status(StatusName.PENDING.value)
    if pending is None:
        raise NotFound(f"Status '{StatusName.PENDING.value}' not found.", status=StatusName.PENDING)

    lines = await format_order_lines(payload.items, catalog)
    order = Order(
        code=create_order_code(user.first_name, user.last_name),
        user=user,
        items=lines,
        delivery=OrderDelivery(type=payload.delivery_type, estimated_time=settings.ORDER_ESTIMATED_TIME_MINUTES),
        status=pending.name,
        status_history=[new_history_entry(pending.name)],
        notes=payload.notes,
        total=compute_order_total(lines),
    )

    created = await store.create(order)
    logger.info("Order %s (%s): created with %d lines, total %s", created.id, created.code, len(lines), created.total)
    return created


@with_optimistic_retry()
async def update_order(
    store: OrderStore,
    catalog: CatalogLookup,
    order_id: str,
    update: OrderUpdate,
) -> Order:
    """Read, transition and write back an order; retried on version conflicts."""
    found = await store.get(order_id)
    if found is None:
        raise NotFound(f"Order '{order_id}' not found.", order_id=order_id)
    order, version = found

    updated = await apply_order_update(order, update, catalog)
    await store.save(order_id, updated, expected_version=version)

    if updated.status != order.status:
        logger.info("Order %s: %s → %s", order_id, order.status.value, updated.status.value)
    return updated


async def list_orders(store: OrderStore, page: int, limit: int) -> tuple[list[Order], int, PageInfo]:
    """One page of orders, newest first, with the total count and page facts."""
    total = await store.count()
    page_info = paginate(total, page, limit)
    orders = await store.find(skip=page_info.skip, limit=limit)
    return orders, total, page_info


async def order_stats(store: OrderStore, year: int, month: int) -> MonthStats:
    start, end = month_range(year, month)
    current_orders = await store.find(created_from=start, created_before=end)

    # January of year 1 has no previous month to compare against.
    last_orders = []
    previous = previous_month(year, month)
    if previous is not None:
        last_start, last_end = month_range(*previous)
        last_orders = await store.find(created_from=last_start, created_before=last_end)

    all_orders = await store.find()
    return month_stats(year, month, current_orders, last_orders, all_orders)
