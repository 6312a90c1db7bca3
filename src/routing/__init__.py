"""Route guarding for the portal pages."""

from .guard import Decision, DecisionKind, Route, RouteGuard, resolve_route

__all__ = ["Decision", "DecisionKind", "Route", "RouteGuard", "resolve_route"]
