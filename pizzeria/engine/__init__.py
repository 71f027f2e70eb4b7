"""
Order construction and status-transition engine.
"""
from pizzeria.engine.errors import AggregateFailure, Conflict, InvalidArgument, NotFound, OrderEngineError
from pizzeria.engine.formatter import format_order_lines
from pizzeria.engine.pagination import paginate
from pizzeria.engine.pricing import (
    compute_extras_total,
    compute_line_total,
    compute_order_total,
    compute_pizza_price,
)
from pizzeria.engine.status_machine import apply_order_update, request_transition

__all__ = [
    "AggregateFailure",
    "Conflict",
    "InvalidArgument",
    "NotFound",
    "OrderEngineError",
    "apply_order_update",
    "compute_extras_total",
    "compute_line_total",
    "compute_order_total",
    "compute_pizza_price",
    "format_order_lines",
    "paginate",
    "request_transition",
]
