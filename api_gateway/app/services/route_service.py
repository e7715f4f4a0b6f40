"""
Static route table for the gateway.

A route maps an inbound path prefix to a logical service name.  The
proxy asks ``match`` which route handles a request and then resolves
the route's service through the load balancer.

Prefixes match on whole path segments only: ``/api/users`` handles
``/api/users`` and ``/api/users/42`` but not ``/api/usersettings``.
When several routes match, the highest ``priority`` wins and ties go
to the longest prefix.  Inactive routes still match, so that the
proxy can answer 503 for them instead of falling through to another
route; an operator switches a route off to take it out of service.
"""

import logging
import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple


def normalize_prefix(prefix: str) -> str:
    """Return ``prefix`` with a leading ``/`` and no trailing ``/``."""
    prefix = "/" + prefix.strip().strip("/")
    return prefix


_UPDATABLE_FIELDS = frozenset({"prefix", "service", "methods", "strip_prefix", "priority", "is_active"})


def _prefix_matches(prefix: str, path: str) -> bool:
    if prefix == "/":
        return True
    return path == prefix or path.startswith(prefix + "/")


class RouteService:
    """In-memory route table keyed by route id."""

    def __init__(self) -> None:
        self._routes: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def add_route(
        self,
        prefix: str,
        service: str,
        methods: Optional[Iterable[str]] = None,
        strip_prefix: bool = True,
        priority: int = 0,
        is_active: bool = True,
    ) -> Dict[str, Any]:
        logger = logging.getLogger(__name__)
        if not service:
            raise ValueError("Route service must not be empty")
        route = {
            "id": uuid.uuid4().hex,
            "prefix": normalize_prefix(prefix),
            "service": service,
            "methods": sorted({m.upper() for m in methods or []}),
            "strip_prefix": strip_prefix,
            "priority": priority,
            "is_active": is_active,
        }
        with self._lock:
            self._routes[route["id"]] = route
        logger.info("Created route %s -> %s", route["prefix"], service)
        return dict(route)

    def update_route(self, route_id: str, **fields: Any) -> Optional[Dict[str, Any]]:
        """Change some fields of a route in place.

        Accepts the keyword arguments of ``add_route``.  Returns the
        updated route, or ``None`` if ``route_id`` is unknown.
        """
        logger = logging.getLogger(__name__)
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update route field(s): {', '.join(sorted(unknown))}")
        if "service" in fields and not fields["service"]:
            raise ValueError("Route service must not be empty")
        if "prefix" in fields:
            fields["prefix"] = normalize_prefix(fields["prefix"])
        if "methods" in fields:
            fields["methods"] = sorted({m.upper() for m in fields["methods"] or []})
        with self._lock:
            route = self._routes.get(route_id)
            if route is None:
                return None
            route.update(fields)
            updated = dict(route)
        logger.info("Updated route %s -> %s", updated["prefix"], updated["service"])
        return updated

    def remove_route(self, route_id: str) -> bool:
        logger = logging.getLogger(__name__)
        with self._lock:
            route = self._routes.pop(route_id, None)
        if route is None:
            return False
        logger.info("Deleted route %s -> %s", route["prefix"], route["service"])
        return True

    def list_routes(self) -> List[Dict[str, Any]]:
        """Return all routes, highest priority first, then by prefix."""
        with self._lock:
            routes = [dict(r) for r in self._routes.values()]
        return sorted(routes, key=lambda r: (-r["priority"], r["prefix"]))

    def match(self, path: str, method: str) -> Optional[Tuple[Dict[str, Any], str]]:
        """Find the route for ``method path``.

        Returns
        -------
        Optional[Tuple[dict, str]]
            The matching route and the path to forward upstream, or
            ``None`` when no route applies.  With ``strip_prefix`` the
            forwarded path is what follows the prefix (``/`` at least).
        """
        method = method.upper()
        with self._lock:
            candidates = [
                r
                for r in self._routes.values()
                if _prefix_matches(r["prefix"], path) and (not r["methods"] or method in r["methods"])
            ]
        if not candidates:
            return None
        route = max(candidates, key=lambda r: (r["priority"], len(r["prefix"])))
        if not route["strip_prefix"] or route["prefix"] == "/":
            return dict(route), path
        remaining = path[len(route["prefix"]):] or "/"
        return dict(route), remaining
