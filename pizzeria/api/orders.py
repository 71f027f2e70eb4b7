"""
Pizzeria Orders — Orders API

Create:  items → formatter (catalog lookups + pricing) → total → store
Update:  order snapshot → status machine → optimistic-locked write
"""
import logging
from datetime import MAXYEAR, MINYEAR

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import ValidationError

from pizzeria.api.deps import get_catalog, get_order_store
from pizzeria.core.config import get_settings
from pizzeria.core.optimistic_lock import StaleDataError
from pizzeria.db import order_ops
from pizzeria.db.order_store import OrderStore
from pizzeria.engine.catalog import CatalogLookup
from pizzeria.engine.errors import AggregateFailure, Conflict, NotFound, OrderEngineError
from pizzeria.engine.projection import hydrate_order
from pizzeria.schemas.order import CreateOrderRequest, OrderUpdate, OrderUser, ServerStatusMessage

settings = get_settings()
logger = logging.getLogger(__name__)
router = APIRouter(prefix=f"{settings.API_PREFIX}/orders", tags=["orders"])


def _http_error(exc: OrderEngineError) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, Conflict):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message)
    if isinstance(exc, AggregateFailure):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"msg": exc.message, "errors": [e.message for e in exc.errors]},
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)


@router.get("")
async def find_orders(
    page: int | None = Query(None, description="Page number, starting at 1"),
    limit: int | None = Query(None, description="Orders per page"),
    store: OrderStore = Depends(get_order_store),
):
    """All orders, or one page of them when page and limit are given."""
    if page is None and limit is None:
        orders = await store.find()
        return {
            "status": ServerStatusMessage.OK,
            "data": {
                "items": [o.model_dump(mode="json") for o in orders],
                "total_items": len(orders),
            },
        }

    if page is None or limit is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Page and limit query params are required as valid number values.",
        )

    try:
        orders, total, page_info = await order_ops.list_orders(store, page, limit)
    except OrderEngineError as exc:
        raise _http_error(exc)

    return {
        "status": ServerStatusMessage.OK,
        "data": {
            "items": [o.model_dump(mode="json") for o in orders],
            "total_items": total,
            **page_info.model_dump(exclude={"skip"}),
        },
    }


@router.get("/stats")
async def find_orders_stats_by_month(
    year: int = Query(..., ge=MINYEAR, le=MAXYEAR),
    month: int = Query(..., ge=1, le=12),
    store: OrderStore = Depends(get_order_store),
):
    try:
        stats = await order_ops.order_stats(store, year, month)
    except OrderEngineError as exc:
        raise _http_error(exc)
    return {"status": ServerStatusMessage.OK, "data": stats.model_dump(mode="json")}


@router.get("/{order_id}")
async def find_order_by_id(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    catalog: CatalogLookup = Depends(get_catalog),
):
    found = await store.get(order_id)
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found.")

    order = await hydrate_order(found[0], catalog)
    return {"status": ServerStatusMessage.OK, "data": order.model_dump(mode="json")}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: CreateOrderRequest,
    request: Request,
    store: OrderStore = Depends(get_order_store),
    catalog: CatalogLookup = Depends(get_catalog),
):
    """Place an order for the authenticated user. Prices are always computed server side."""
    try:
        user = OrderUser.model_validate(request.state.user)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Token does not carry the user profile required to place an order.",
        )

    try:
        order = await order_ops.place_order(store, catalog, payload, user)
    except OrderEngineError as exc:
        raise _http_error(exc)

    return {
        "status": ServerStatusMessage.CREATED,
        "msg": "Order created successfully.",
        "data": order.model_dump(mode="json"),
    }


@router.patch("/{order_id}")
async def update_order(
    order_id: str,
    payload: OrderUpdate,
    store: OrderStore = Depends(get_order_store),
    catalog: CatalogLookup = Depends(get_catalog),
):
    try:
        order = await order_ops.update_order(store, catalog, order_id, payload)
    except OrderEngineError as exc:
        raise _http_error(exc)
    except StaleDataError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="The order is being updated concurrently. Please retry.",
        )

    return {
        "status": ServerStatusMessage.UPDATED,
        "msg": "Order updated successfully.",
        "data": order.model_dump(mode="json"),
    }


@router.delete("/{order_id}")
async def delete_order(order_id: str, store: OrderStore = Depends(get_order_store)):
    if not await store.delete(order_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found.")
    logger.info("Order %s: deleted", order_id)
    return {"status": ServerStatusMessage.DELETED, "msg": "Order deleted successfully."}
