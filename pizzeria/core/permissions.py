"""
Pizzeria Orders — Role permission lookup

A role is granted a request when its permission list holds either the
admin action or `<resource>_<scope>`, where the scope follows from the HTTP
method, e.g. `PATCH /orders/42` needs `orders_update`. The table below is
read-only; actions are derived per request and never stored back.
"""
from enum import Enum as PyEnum
from types import MappingProxyType


class Scope(str, PyEnum):
    READ = "read"
    WRITE = "write"
    UPDATE = "update"
    DELETE = "delete"


ADMIN_ACTION = "admin_granted"

METHOD_SCOPES = MappingProxyType({
    "GET": Scope.READ,
    "POST": Scope.WRITE,
    "PATCH": Scope.UPDATE,
    "DELETE": Scope.DELETE,
})


def resource_from_path(path: str, prefix: str = "") -> str:
    """First path segment after the API prefix: /api/v1/orders/42 → orders."""
    if prefix and path.startswith(prefix):
        path = path[len(prefix):]
    segments = [s for s in path.split("/") if s]
    return segments[0] if segments else ""


def required_actions(path: str, method: str, prefix: str = "") -> frozenset[str]:
    """Actions any one of which grants the request. Empty for unknown methods."""
    scope = METHOD_SCOPES.get(method.upper())
    if scope is None:
        return frozenset()
    resource = resource_from_path(path, prefix)
    return frozenset({ADMIN_ACTION, f"{resource}_{scope.value}"})


def is_permitted(role_permissions: list[str] | None, path: str, method: str, prefix: str = "") -> bool:
    return not required_actions(path, method, prefix).isdisjoint(role_permissions or ())
