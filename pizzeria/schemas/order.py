"""
Pizzeria Orders — Order schemas
"""
from datetime import datetime
from enum import Enum as PyEnum

from pydantic import BaseModel, EmailStr, Field

from pizzeria.schemas.catalog import Money, Pizza, Ref, Resolved, Size, StatusName, Topping


class DeliveryType(str, PyEnum):
    DELIVERY = "Delivery"
    PICK_UP = "PickUp"


class ServerStatusMessage(str, PyEnum):
    OK = "OK"
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


# ── Requests ──────────────────────────────────────────────────────────────────

class OrderItemRequest(BaseModel):
    pizza: str = Field(..., min_length=1, examples=["679c57cd105154cb855d7fd3"])
    size: str = Field(..., min_length=1, examples=["6798425fe2bc79512193360a"])
    toppings: list[str] = Field(default_factory=list)
    quantity: int = Field(..., examples=[1])


class CreateOrderRequest(BaseModel):
    items: list[OrderItemRequest] = Field(..., min_length=1, max_length=50)
    delivery_type: DeliveryType
    notes: str | None = Field(None, min_length=1, max_length=500)


class OrderUpdate(BaseModel):
    """Status id or name, delivery type and notes; None leaves a field unchanged."""

    status: str | None = Field(None, min_length=1)
    delivery_type: DeliveryType | None = None
    notes: str | None = Field(None, min_length=1, max_length=500)

    def is_empty(self) -> bool:
        return self.status is None and self.delivery_type is None and self.notes is None


# ── Order document ────────────────────────────────────────────────────────────

class OrderUser(BaseModel):
    """Snapshot of the ordering user at checkout time."""

    first_name: str
    last_name: str
    address: str
    phone: str
    email: EmailStr


class OrderDelivery(BaseModel):
    type: DeliveryType
    estimated_time: int  # minutes


class StatusHistoryEntry(BaseModel):
    name: StatusName
    timestamp: datetime


class OrderLine(BaseModel):
    pizza: Ref[Pizza]
    size: Ref[Size]
    toppings: list[Ref[Topping]] = Field(default_factory=list)
    quantity: int
    unit_price: Money
    extras_total: Money
    line_total: Money


class Order(BaseModel):
    id: str | None = None
    code: str
    user: OrderUser
    items: list[OrderLine]
    delivery: OrderDelivery
    status: StatusName
    status_history: list[StatusHistoryEntry]
    notes: str | None = None
    total: Money
    created_at: datetime | None = None


# ── Read projection ───────────────────────────────────────────────────────────

class HydratedOrderLine(BaseModel):
    pizza: Resolved[Pizza]
    size: Resolved[Size]
    toppings: list[Resolved[Topping]]
    quantity: int
    unit_price: Money
    extras_total: Money
    line_total: Money


class HydratedOrder(Order):
    items: list[HydratedOrderLine]


# ── Pagination / stats ────────────────────────────────────────────────────────

class PageInfo(BaseModel):
    skip: int
    total_pages: int
    items_by_page: int
    current_items_quantity: int
    current_page: int


class ItemsStats(BaseModel):
    current_month_count: int
    last_month_count: int
    growth_rate: float | None
    total_count: int


class SalesStats(BaseModel):
    current_month_amount: Money
    last_month_amount: Money
    growth_rate: float | None
    total_amount: Money


class MonthStats(BaseModel):
    year: int
    month: int
    items: ItemsStats
    sales: SalesStats
