"""
Order engine — Pagination calculator
"""
import math

from pizzeria.engine.errors import InvalidArgument
from pizzeria.schemas.order import PageInfo


def _require_int(name: str, value: object, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidArgument(
            f"{name} must be an integer >= {minimum}, got {value!r}.",
            argument=name,
            value=value,
        )
    return value


def paginate(total_count: int, page: int, limit: int) -> PageInfo:
    """
    Compute skip offset and page facts for a collection of total_count records.

    >>> paginate(25, 3, 10)
    PageInfo(skip=20, total_pages=3, items_by_page=10, current_items_quantity=25, current_page=3)
    """
    total_count = _require_int("total_count", total_count, 0)
    page = _require_int("page", page, 1)
    limit = _require_int("limit", limit, 1)

    return PageInfo(
        skip=(page - 1) * limit,
        total_pages=math.ceil(total_count / limit),
        items_by_page=min(limit, total_count),
        current_items_quantity=min(limit * page, total_count),
        current_page=page,
    )
