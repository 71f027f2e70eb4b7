"""
Pizzeria Orders — Request-scoped collaborators (overridable in tests)
"""
from pizzeria.db.catalog_lookup import SqlCatalogLookup
from pizzeria.db.database import SessionLocal
from pizzeria.db.order_store import OrderStore
from pizzeria.engine.catalog import CatalogLookup


def get_catalog() -> CatalogLookup:
    return SqlCatalogLookup(SessionLocal)


def get_order_store() -> OrderStore:
    return OrderStore(SessionLocal)
