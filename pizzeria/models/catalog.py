"""
Pizzeria Orders — Catalog DB models

[CONFIG DATA] — administered by the catalog service; read-only here.
"""
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from pizzeria.db.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class FlavorModel(Base):
    __tablename__ = "flavors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class SizeModel(Base):
    __tablename__ = "sizes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class ToppingModel(Base):
    __tablename__ = "toppings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class PizzaModel(Base):
    """At most one pizza per (flavor, size); price is derived, never stored."""

    __tablename__ = "pizzas"
    __table_args__ = (UniqueConstraint("flavor_id", "size_id", name="uq_pizza_flavor_size"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    flavor_id: Mapped[str] = mapped_column(ForeignKey("flavors.id"), nullable=False)
    size_id: Mapped[str] = mapped_column(ForeignKey("sizes.id"), nullable=False)
    image: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class StatusModel(Base):
    __tablename__ = "statuses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
