"""
Main entrypoint for the API gateway.

``create_app`` builds the FastAPI application: it sets up logging,
creates the process-owned load balancer, route table and proxy, seeds
them from settings and mounts the routers.  Module import creates
``app`` so the gateway can be served directly, e.g.::

    uvicorn api_gateway.app.main:app

Router order matters: ``/health`` and the admin API under ``/api/v1``
are matched first and every remaining path goes to the proxy.
"""

import logging
import time
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .core.config import Settings, parse_gateway_routes, parse_service_targets, settings
from .core.errors import GatewayError
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router
from .api import health
from .api.proxy import router as proxy_router
from .services.load_balancer import LoadBalancer
from .services.proxy_service import ProxyService
from .services.route_service import RouteService


def create_app(
    app_settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Create and configure a gateway application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the environment-derived ``settings``.
    http_client : Optional[httpx.AsyncClient]
        Client used to reach backends.  When omitted, the app creates
        one and closes it on shutdown; a client passed in stays owned
        by the caller.

    Returns
    -------
    FastAPI
        A configured application with its own, independent registry.
    """
    cfg = app_settings or settings
    setup_logging(cfg.log_level, cfg.log_file or None)
    logger = logging.getLogger(__name__)

    app = FastAPI(title=cfg.project_name, version=cfg.api_version, debug=cfg.debug)

    load_balancer = LoadBalancer(parse_service_targets(cfg.service_targets))
    route_service = RouteService()
    for prefix, service in parse_gateway_routes(cfg.gateway_routes):
        route_service.add_route(prefix, service)

    owns_client = http_client is None
    client = http_client or httpx.AsyncClient()

    app.state.settings = cfg
    app.state.started_at = time.monotonic()
    app.state.load_balancer = load_balancer
    app.state.route_service = route_service
    app.state.proxy_service = ProxyService(load_balancer, route_service, client, timeout=cfg.upstream_timeout)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(v1_router, prefix="/api/v1")
    # Must stay last, it matches every path.
    app.include_router(proxy_router)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        if owns_client:
            await client.aclose()

    logger.info(
        "Gateway configured with %d service(s) and %d route(s)",
        len(load_balancer.list_services()),
        len(route_service.list_routes()),
    )
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
