"""
Order engine — Monthly order statistics

Counts and sales for a month compared against the previous one.
"""
from datetime import MAXYEAR, MINYEAR, datetime, timezone
from decimal import Decimal
from typing import Sequence

from pizzeria.engine.errors import InvalidArgument
from pizzeria.schemas.order import ItemsStats, MonthStats, Order, SalesStats


def growth_rate(current: int | Decimal, last: int | Decimal) -> float | None:
    """Percentage change, 100 when starting from nothing, None when both are empty."""
    if last > 0:
        return round(float((current - last) / last * 100), 2)
    if current > 0:
        return 100.0
    return None


def month_range(year: int, month: int) -> tuple[datetime, datetime | None]:
    """[start, end) of the month in UTC. end is None for the last representable month."""
    if not 1 <= month <= 12 or not MINYEAR <= year <= MAXYEAR:
        raise InvalidArgument(f"A valid year and month are required, got {year}-{month}.", value=(year, month))
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month < 12:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    elif year < MAXYEAR:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = None
    return start, end


def previous_month(year: int, month: int) -> tuple[int, int] | None:
    """The month before, or None when it would fall before year 1."""
    if month > 1:
        return year, month - 1
    if year > MINYEAR:
        return year - 1, 12
    return None


def _sales(orders: Sequence[Order]) -> Decimal:
    return sum((o.total for o in orders), Decimal(0))


def month_stats(
    year: int,
    month: int,
    current_month_orders: Sequence[Order],
    last_month_orders: Sequence[Order],
    all_orders: Sequence[Order],
) -> MonthStats:
    current_count, last_count = len(current_month_orders), len(last_month_orders)
    current_sales, last_sales = _sales(current_month_orders), _sales(last_month_orders)

    return MonthStats(
        year=year,
        month=month,
        items=ItemsStats(
            current_month_count=current_count,
            last_month_count=last_count,
            growth_rate=growth_rate(current_count, last_count),
            total_count=len(all_orders),
        ),
        sales=SalesStats(
            current_month_amount=current_sales,
            last_month_amount=last_sales,
            growth_rate=growth_rate(current_sales, last_sales),
            total_amount=_sales(all_orders),
        ),
    )
