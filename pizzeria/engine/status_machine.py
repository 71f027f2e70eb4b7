"""
Order engine — Status machine

Lifecycle:
    Pending ──► In progress ──► Done ──► On the way ──► Delivered
       │
       └──► Cancelled

Decides whether an update (status / delivery type / notes) may be applied
to an order snapshot and returns the updated order. The snapshot passed in
is never mutated; persisting the result is the caller's job.
"""
from datetime import datetime, timezone

from pizzeria.engine.catalog import CatalogLookup
from pizzeria.engine.errors import Conflict, InvalidArgument, NotFound
from pizzeria.schemas.catalog import Status, StatusName
from pizzeria.schemas.order import Order, OrderUpdate, StatusHistoryEntry


def new_history_entry(name: StatusName, now: datetime | None = None) -> StatusHistoryEntry:
    """History timestamps are UTC with whole-second precision."""
    now = now or datetime.now(tz=timezone.utc)
    return StatusHistoryEntry(name=name, timestamp=now.replace(microsecond=0))


def _check_rules(current: StatusName, requested: StatusName | None, update: OrderUpdate) -> None:
    if current == StatusName.CANCELLED:
        raise Conflict(
            "The order can not be updated because it has already been cancelled.",
            reason="already cancelled",
            status=current,
        )

    if requested == StatusName.CANCELLED and current != StatusName.PENDING:
        raise Conflict(
            f"The order can not be cancelled because its current status is: {current.value}.",
            reason="cannot cancel",
            status=current,
        )

    if current == StatusName.ON_THE_WAY:
        if update.delivery_type is not None or update.notes is not None:
            raise Conflict(
                f"The order no longer accepts updates because it is {current.value}.",
                reason="in transit, no edits",
                status=current,
            )
        if requested is not None and requested != StatusName.DELIVERED:
            raise Conflict(
                f"Status can only be set to '{StatusName.DELIVERED.value}' because the "
                f"current order status is '{current.value}'.",
                reason="invalid status target",
                status=requested,
            )


def request_transition(
    order: Order,
    update: OrderUpdate,
    resolved_status: Status | None,
    now: datetime | None = None,
) -> Order:
    """
    Validate and apply an update against the order's current status.

    resolved_status is the catalog record update.status resolved to (None
    when the lookup found nothing). A status already present in the history
    is not appended again, but the order's status is still set to it.
    """
    if update.is_empty():
        raise InvalidArgument("At least one change is required.", value=None)

    requested: StatusName | None = None
    if update.status is not None:
        if resolved_status is None:
            raise NotFound(f"Status '{update.status}' not found.", status=update.status)
        requested = resolved_status.name

    _check_rules(order.status, requested, update)

    history = list(order.status_history)
    if requested is not None and requested not in {entry.name for entry in history}:
        history.append(new_history_entry(requested, now))

    delivery = order.delivery
    if update.delivery_type is not None:
        delivery = delivery.model_copy(update={"type": update.delivery_type})

    return order.model_copy(
        update={
            "status": requested or order.status,
            "status_history": history,
            "delivery": delivery,
            "notes": update.notes if update.notes is not None else order.notes,
        }
    )


async def apply_order_update(
    order: Order,
    update: OrderUpdate,
    catalog: CatalogLookup,
    now: datetime | None = None,
) -> Order:
    """Resolve the requested status through the catalog, then run request_transition."""
    resolved = None
    if update.status is not None:
        resolved = await catalog.get_status(update.status)
    return request_transition(order, update, resolved, now=now)
