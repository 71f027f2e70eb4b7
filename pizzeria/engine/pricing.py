"""
Order engine — Pricing calculator

Pure arithmetic over catalog snapshots. Prices are Decimals, so totals are
exact and independent of the order in which lines are summed.
"""
from decimal import Decimal
from typing import Iterable

from pizzeria.schemas.catalog import Pizza, Size, Topping
from pizzeria.schemas.order import OrderLine


def compute_pizza_price(pizza: Pizza, size: Size) -> Decimal:
    """Flavor price plus the price of the given size (not the pizza's own size)."""
    return pizza.flavor.price + size.price


def compute_extras_total(toppings: Iterable[Topping]) -> Decimal:
    return sum((t.price for t in toppings), Decimal(0))


def compute_line_total(unit_price: Decimal, extras_total: Decimal, quantity: int) -> Decimal:
    return (unit_price + extras_total) * quantity


def compute_order_total(lines: Iterable[OrderLine]) -> Decimal:
    return sum((line.line_total for line in lines), Decimal(0))
