"""
Order engine — error taxonomy

Raised synchronously to the immediate caller. The API layer translates
them into HTTP responses (NotFound→404, InvalidArgument→400, Conflict→409).
"""
from typing import Any


class OrderEngineError(Exception):
    """Base class for every error produced by the order engine."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context
        for key, value in context.items():
            setattr(self, key, value)


class NotFound(OrderEngineError):
    """A referenced catalog record or status does not exist."""


class InvalidArgument(OrderEngineError):
    """Malformed quantity, page, limit or empty update."""


class Conflict(OrderEngineError):
    """The requested change violates the order status rules."""


class AggregateFailure(OrderEngineError):
    """More than one requested order line failed to format."""

    def __init__(self, errors: list[OrderEngineError]):
        indexes = ", ".join(str(e.context.get("line_index")) for e in errors)
        super().__init__(f"{len(errors)} order lines failed (lines: {indexes}).", errors=errors)
