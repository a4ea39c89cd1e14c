"""Path routing: ordered pattern matching of request paths to handlers."""

from omniapp.routing.route import PathSegment, Route, RouteMatch
from omniapp.routing.router import Router, parse_path

__all__ = ["PathSegment", "Route", "RouteMatch", "Router", "parse_path"]
