"""
Route authorization table.

Each protected route is identified as "<group>:<handler>". Required roles come
from the route group and from the handler; the role guard unions both.
An empty union means any authenticated subject; ROLE_ALL is the explicit wildcard.
"""

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLE_ALL = "all"

ROLES = frozenset({ROLE_ADMIN, ROLE_USER})

ROUTE_GROUP_ROLES: dict[str, frozenset[str]] = {
    "users": frozenset(),
}

ROUTE_ROLES: dict[str, frozenset[str]] = {
    "users:get_me": frozenset({ROLE_ALL}),
    "users:update_me": frozenset({ROLE_ALL}),
    "users:list": frozenset({ROLE_ADMIN}),
    "users:get": frozenset({ROLE_ADMIN}),
    "users:update": frozenset({ROLE_ADMIN}),
    "users:delete": frozenset({ROLE_ADMIN}),
}


def route_group(route_id: str) -> str:
    group, sep, handler = route_id.partition(":")
    if not sep or not group or not handler:
        raise ValueError(f"Route id {route_id!r} must look like 'group:handler'")
    return group
