"""
Catch-all proxy route.

This router must be included last: any request not claimed by the admin
API or the health check is forwarded to a backend by ``ProxyService``.
Errors raised while forwarding are ``GatewayError`` subclasses and are
turned into JSON responses by the application's exception handler.
"""

from fastapi import APIRouter, Depends, Request, Response

from api_gateway.app.api.deps import get_proxy_service
from api_gateway.app.services.proxy_service import ProxyService

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

router = APIRouter()


@router.api_route("/{full_path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(request: Request, proxy_service: ProxyService = Depends(get_proxy_service)) -> Response:
    return await proxy_service.forward(request)
