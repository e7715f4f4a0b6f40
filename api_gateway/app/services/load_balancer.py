"""
Round-robin load balancing over per-service backend lists.

The ``LoadBalancer`` keeps, for every logical service name, the ordered
list of backend URLs registered for it and a rotation cursor pointing at
the next backend to hand out.  ``resolve`` returns that backend and
advances the cursor; ``add_target`` appends a backend without touching
the cursor, so a new backend joins the rotation once the cursor reaches
its position.

Two policies are intentional:

* A service that was never registered resolves to its own name, i.e.
  the name is treated as a direct URL.  This lets routes point straight
  at ``http://host:port`` without registering anything.
* A service that *is* registered but has no backends raises
  ``NoBackendsAvailable`` instead of producing an empty URL.

One instance is owned by the gateway application (``app.state``) and
handed to request handlers through a dependency.  Each service has its
own lock; resolving one service never waits on another.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from api_gateway.app.core.errors import NoBackendsAvailable

logger = logging.getLogger(__name__)


@dataclass
class _ServiceBucket:
    targets: List[str] = field(default_factory=list)
    cursor: int = 0
    dispatched: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def snapshot(self, name: str) -> Dict[str, Any]:
        with self.lock:
            return {
                "name": name,
                "targets": list(self.targets),
                # Report the position the next resolve will actually use.
                "cursor": self.cursor % len(self.targets) if self.targets else 0,
                "dispatched": self.dispatched,
            }


def _require_name(service: str) -> None:
    if not service:
        raise ValueError("Service name must not be empty")


class LoadBalancer:
    """Registry of service backends with a round-robin cursor per service."""

    def __init__(self, services: Optional[Dict[str, Iterable[str]]] = None) -> None:
        self._buckets: Dict[str, _ServiceBucket] = {}
        for name, targets in (services or {}).items():
            self.register(name, targets)

    @contextmanager
    def _live_bucket(self, service: str) -> Iterator[_ServiceBucket]:
        """Yield the bucket of ``service`` locked, creating it if needed.

        A bucket is only yielded while it is still the registered one, so
        a write cannot land in a bucket that ``remove_service`` dropped
        between the lookup and the lock.
        """
        while True:
            bucket = self._buckets.setdefault(service, _ServiceBucket())
            with bucket.lock:
                if self._buckets.get(service) is bucket:
                    yield bucket
                    return

    def resolve(self, service: str) -> Dict[str, str]:
        """Return the next backend URL for ``service`` as ``{"url": ...}``.

        Raises
        ------
        ValueError
            If ``service`` is empty.
        NoBackendsAvailable
            If the service is registered with an empty backend list.
        """
        _require_name(service)
        bucket = self._buckets.get(service)
        if bucket is None:
            return {"url": service}

        with bucket.lock:
            count = len(bucket.targets)
            if count == 0:
                logger.warning("Service %s has no registered backends", service)
                raise NoBackendsAvailable(service)
            # The list may have shrunk since the cursor was stored.
            index = bucket.cursor % count
            url = bucket.targets[index]
            bucket.cursor = (index + 1) % count
            bucket.dispatched += 1
        logger.debug("Resolved %s -> %s", service, url)
        return {"url": url}

    def add_target(self, service: str, url: str) -> None:
        """Append ``url`` to the rotation of ``service``, creating it if needed."""
        _require_name(service)
        if not url:
            raise ValueError("Backend URL must not be empty")
        with self._live_bucket(service) as bucket:
            bucket.targets.append(url)
        logger.info("Added backend %s to service %s", url, service)

    def register(self, service: str, targets: Iterable[str]) -> None:
        """Replace the backend list of ``service`` and restart its rotation.

        ``targets`` may be empty, in which case the service exists but
        cannot be resolved until a backend is added.
        """
        _require_name(service)
        urls = list(targets)
        if any(not url for url in urls):
            raise ValueError("Backend URL must not be empty")
        with self._live_bucket(service) as bucket:
            bucket.targets = urls
            bucket.cursor = 0
        logger.info("Registered service %s with %d backend(s)", service, len(urls))

    def remove_target(self, service: str, url: str) -> None:
        """Remove the first occurrence of ``url`` from ``service``.

        The cursor is kept and re-bounded on the next ``resolve``.
        """
        bucket = self._buckets.get(service)
        if bucket is None:
            raise ValueError(f"Service {service} not found")
        with bucket.lock:
            try:
                bucket.targets.remove(url)
            except ValueError:
                raise ValueError(f"Backend {url} not registered for service {service}") from None
        logger.info("Removed backend %s from service %s", url, service)

    def remove_service(self, service: str) -> bool:
        bucket = self._buckets.get(service)
        if bucket is None:
            return False
        with bucket.lock:
            if self._buckets.get(service) is not bucket:
                return False
            del self._buckets[service]
        logger.info("Removed service %s", service)
        return True

    def get_service(self, service: str) -> Optional[Dict[str, Any]]:
        bucket = self._buckets.get(service)
        if bucket is None:
            return None
        return bucket.snapshot(service)

    def list_services(self) -> List[Dict[str, Any]]:
        return [bucket.snapshot(name) for name, bucket in list(self._buckets.items())]

    def __contains__(self, service: object) -> bool:
        return service in self._buckets
