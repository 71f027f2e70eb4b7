"""
Pizzeria Orders — Optimistic locking for order updates

Orders are written with `WHERE version_id = <read_version>`. When another
request committed first the write matches no row and StaleDataError is
raised; `with_optimistic_retry` then re-runs the whole
read → transition → write cycle after an exponential backoff with jitter.
"""
import asyncio
import functools
import logging
import random

from pizzeria.core.config import get_settings

logger = logging.getLogger(__name__)


class StaleDataError(Exception):
    """The order's version_id changed between our read and our update."""

    def __init__(self, order_id: str, expected_version: int):
        super().__init__(f"Order {order_id} changed concurrently (expected version {expected_version}).")
        self.order_id = order_id
        self.expected_version = expected_version


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after the given failed attempt (1-based)."""
    settings = get_settings()
    delay = min(settings.OPT_LOCK_BASE_DELAY_MS * (2 ** attempt), settings.OPT_LOCK_MAX_DELAY_MS)
    return (delay + random.uniform(0, settings.OPT_LOCK_JITTER_MS)) / 1000.0


def with_optimistic_retry(max_retries: int | None = None):
    """
    Retry an async function on StaleDataError, re-raising once attempts run out.

        @with_optimistic_retry()
        async def update_order(store, catalog, order_id, update): ...
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            attempts = max_retries or get_settings().OPT_LOCK_MAX_RETRIES
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except StaleDataError as exc:
                    if attempt >= attempts:
                        logger.error("Order %s: version conflict unresolved after %d attempts", exc.order_id, attempt)
                        raise
                    delay = backoff_delay(attempt)
                    logger.warning(
                        "Order %s: version conflict on attempt %d/%d, retrying in %.3fs",
                        exc.order_id, attempt, attempts, delay,
                    )
                    await asyncio.sleep(delay)
                    attempt += 1
        return wrapper
    return decorator
