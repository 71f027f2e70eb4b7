"""
Pizzeria Orders — Catalog schemas

Read snapshots of catalog records handed to the order engine, plus the
Ref / Resolved pair used wherever a field may point at a catalog record.
"""
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, Field, PlainSerializer

# Exact arithmetic internally, plain JSON numbers on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

T = TypeVar("T")


class StatusName(str, PyEnum):
    PENDING = "Pending"
    IN_PROGRESS = "In progress"
    DONE = "Done"
    ON_THE_WAY = "On the way"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class Ref(BaseModel, Generic[T]):
    """Bare identifier of a catalog record."""

    id: str


class Resolved(BaseModel, Generic[T]):
    """Identifier plus the record it points at; value is None once the record is gone."""

    id: str
    value: T | None = None


class Flavor(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: Money = Field(..., ge=0)


class Size(BaseModel):
    id: str
    name: str
    price: Money = Field(..., ge=0)


class Topping(BaseModel):
    id: str
    name: str
    price: Money = Field(..., ge=0)


class Pizza(BaseModel):
    id: str
    flavor: Flavor
    size: Size
    image: str | None = None

    @property
    def price(self) -> Decimal:
        return self.flavor.price + self.size.price


class Status(BaseModel):
    id: str
    name: StatusName
    description: str | None = None
