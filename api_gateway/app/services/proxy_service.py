"""
Request forwarding to backend services.

``ProxyService.forward`` is the gateway's data path: it matches the
inbound request against the route table, asks the load balancer for the
next backend of the route's service and relays the request there with a
shared ``httpx.AsyncClient``.  The backend's status, headers and body are
returned to the caller unchanged apart from hop-by-hop headers.

The path is forwarded exactly as the client encoded it.  Routing works
on the raw (still percent-encoded) path, so ``%2F`` or ``%3F`` in a
request never turn into a real path separator or query upstream.
Repeated headers such as ``Set-Cookie`` are relayed one line per value.
"""

import logging
import time
from typing import Iterable, List, Tuple

import httpx
from fastapi import Request, Response

from api_gateway.app.core.errors import RouteInactive, RouteNotFound, UpstreamError
from api_gateway.app.services.load_balancer import LoadBalancer
from api_gateway.app.services.route_service import RouteService

logger = logging.getLogger(__name__)

# RFC 7230 section 6.1, plus host which httpx sets from the target URL.
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "host",
    }
)

# httpx recomputes the request length, and decodes response bodies, so
# these would no longer describe what is actually sent.
_STALE_REQUEST_HEADERS = frozenset({"content-length"})
_STALE_RESPONSE_HEADERS = frozenset({"content-encoding", "content-length"})


def _filter_headers(headers: Iterable[Tuple[str, str]], drop: Iterable[str]) -> List[Tuple[str, str]]:
    dropped = set(drop)
    return [(k, v) for k, v in headers if k.lower() not in dropped]


def raw_request_path(request: Request) -> str:
    """Return the request path as the client sent it, still percent-encoded."""
    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    # Some ASGI clients include the query string in raw_path.
    return raw.split(b"?", 1)[0].decode("latin-1")


def build_upstream_url(backend: str, path: str, query: str = "") -> str:
    """Join a backend base URL, a forwarded path and a raw query string."""
    url = backend.rstrip("/") + (path if path.startswith("/") else "/" + path)
    if query:
        url = f"{url}?{query}"
    return url


class ProxyService:
    """Forward inbound requests to the backend picked by the load balancer."""

    def __init__(
        self,
        load_balancer: LoadBalancer,
        routes: RouteService,
        client: httpx.AsyncClient,
        timeout: float = 30.0,
    ) -> None:
        self.load_balancer = load_balancer
        self.routes = routes
        self.client = client
        self.timeout = timeout

    async def forward(self, request: Request) -> Response:
        """Proxy ``request`` to a backend and return the backend's response.

        Raises
        ------
        RouteNotFound
            No route matches the request path and method.
        RouteInactive
            The matching route is switched off.
        NoBackendsAvailable
            The route's service is registered without backends.
        UpstreamError
            The backend could not be reached.
        """
        started = time.monotonic()
        path = request.url.path
        matched = self.routes.match(raw_request_path(request), request.method)
        if matched is None:
            raise RouteNotFound(path)
        route, forward_path = matched
        if not route["is_active"]:
            raise RouteInactive(route["prefix"])

        backend = self.load_balancer.resolve(route["service"])["url"]
        url = build_upstream_url(backend, forward_path, request.url.query)

        headers = _filter_headers(request.headers.items(), HOP_BY_HOP_HEADERS | _STALE_REQUEST_HEADERS)
        headers.append(("X-Gateway-Route", route["id"]))
        headers.append(("X-Gateway-Timestamp", str(int(time.time() * 1000))))

        body = await request.body()
        try:
            upstream = await self.client.request(
                request.method,
                url,
                headers=headers,
                content=body,
                timeout=self.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Proxy error for %s %s -> %s: %s", request.method, path, url, exc)
            raise UpstreamError() from exc

        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(
            "%s %s -> %s %s (%.0fms)",
            request.method,
            path,
            url,
            upstream.status_code,
            elapsed_ms,
        )
        response = Response(content=upstream.content, status_code=upstream.status_code)
        for key, value in _filter_headers(
            upstream.headers.multi_items(), HOP_BY_HOP_HEADERS | _STALE_RESPONSE_HEADERS
        ):
            response.headers.append(key, value)
        return response
