"""Static routing of logical model names to inference backend parameters."""

from recall_chat.routing.loader import (
    DEFAULT_ROUTES,
    RouteTable,
    build_route_table,
    load_route_table,
)
from recall_chat.routing.resolver import ModelRouteResolver

__all__ = [
    "DEFAULT_ROUTES",
    "RouteTable",
    "build_route_table",
    "load_route_table",
    "ModelRouteResolver",
]
