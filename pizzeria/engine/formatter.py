"""
Order engine — Order item formatter

Turns requested lines (pizza id + size id + topping ids + quantity) into
priced, persistence-ready OrderLines. Lines are resolved concurrently, and
the whole call is all-or-nothing: any failed line means no lines at all.
"""
import asyncio
from typing import Sequence

from pizzeria.engine.catalog import CatalogLookup
from pizzeria.engine.errors import AggregateFailure, InvalidArgument, NotFound, OrderEngineError
from pizzeria.engine.pricing import compute_extras_total, compute_line_total, compute_pizza_price
from pizzeria.schemas.catalog import Pizza, Ref, Size, Topping
from pizzeria.schemas.order import OrderItemRequest, OrderLine


async def _resolve_toppings(index: int, topping_ids: list[str], catalog: CatalogLookup) -> list[Topping]:
    if not topping_ids:
        return []

    # One batched lookup per line, never one call per topping.
    found = {t.id: t for t in await catalog.get_toppings(topping_ids)}
    missing = [tid for tid in topping_ids if tid not in found]
    if missing:
        raise NotFound(
            f"Line {index}: toppings not found: {', '.join(missing)}.",
            line_index=index,
            toppings=missing,
        )
    return [found[tid] for tid in topping_ids]


async def _format_line(index: int, requested: OrderItemRequest, catalog: CatalogLookup) -> OrderLine:
    if requested.quantity < 1:
        raise InvalidArgument(
            f"Line {index}: quantity must be a positive integer, got {requested.quantity}.",
            line_index=index,
            value=requested.quantity,
        )

    pizza, size = await asyncio.gather(
        catalog.get_pizza(requested.pizza),
        catalog.get_size(requested.size),
    )
    if pizza is None:
        raise NotFound(f"Line {index}: pizza '{requested.pizza}' not found.", line_index=index, pizza=requested.pizza)
    if size is None:
        raise NotFound(f"Line {index}: size '{requested.size}' not found.", line_index=index, size=requested.size)

    # The size selected on the line prices it, whatever size the pizza was catalogued with.
    unit_price = compute_pizza_price(pizza, size)

    topping_ids = list(dict.fromkeys(requested.toppings))
    toppings = await _resolve_toppings(index, topping_ids, catalog)
    extras_total = compute_extras_total(toppings)

    return OrderLine(
        pizza=Ref[Pizza](id=pizza.id),
        size=Ref[Size](id=size.id),
        toppings=[Ref[Topping](id=t.id) for t in toppings],
        quantity=requested.quantity,
        unit_price=unit_price,
        extras_total=extras_total,
        line_total=compute_line_total(unit_price, extras_total, requested.quantity),
    )


async def format_order_lines(
    requested_lines: Sequence[OrderItemRequest],
    catalog: CatalogLookup,
) -> list[OrderLine]:
    """
    Resolve and price every requested line.

    Raises the line's own error when exactly one line fails, and
    AggregateFailure carrying every per-line error when several do.
    Errors that are not engine errors (e.g. a dropped DB connection)
    propagate unchanged.
    """
    if not requested_lines:
        raise InvalidArgument("At least one order item is required.", value=0)

    results = await asyncio.gather(
        *(_format_line(i, line, catalog) for i, line in enumerate(requested_lines)),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, BaseException)]
    if not failures:
        return list(results)

    for failure in failures:
        if not isinstance(failure, OrderEngineError):
            raise failure
    if len(failures) == 1:
        raise failures[0]
    raise AggregateFailure(failures)
