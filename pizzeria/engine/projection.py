"""
Order engine — Read projection

Stored order lines only hold Refs. For display, re-attach the full pizza,
size and topping records. An order is a snapshot: a record removed from the
catalog since checkout is shown by id alone, with the stored prices intact.
"""
import asyncio

from pizzeria.engine.catalog import CatalogLookup
from pizzeria.schemas.catalog import Pizza, Resolved, Size, Topping
from pizzeria.schemas.order import HydratedOrder, HydratedOrderLine, Order, OrderLine


async def _hydrate_line(line: OrderLine, catalog: CatalogLookup) -> HydratedOrderLine:
    topping_ids = [t.id for t in line.toppings]
    pizza, size, toppings = await asyncio.gather(
        catalog.get_pizza(line.pizza.id),
        catalog.get_size(line.size.id),
        catalog.get_toppings(topping_ids) if topping_ids else asyncio.sleep(0, result=[]),
    )

    by_id = {t.id: t for t in toppings}
    return HydratedOrderLine(
        pizza=Resolved[Pizza](id=line.pizza.id, value=pizza),
        size=Resolved[Size](id=line.size.id, value=size),
        toppings=[Resolved[Topping](id=tid, value=by_id.get(tid)) for tid in topping_ids],
        quantity=line.quantity,
        unit_price=line.unit_price,
        extras_total=line.extras_total,
        line_total=line.line_total,
    )


async def hydrate_order(order: Order, catalog: CatalogLookup) -> HydratedOrder:
    items = await asyncio.gather(*(_hydrate_line(line, catalog) for line in order.items))
    return HydratedOrder(**order.model_dump(exclude={"items"}), items=list(items))
