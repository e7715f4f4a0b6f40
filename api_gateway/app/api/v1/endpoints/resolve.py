"""
Backend resolution endpoint for admin API v1.

Returns the backend the next proxied request for a service would go
to, advancing the service's rotation exactly like the proxy does.  An
unregistered service resolves to its own name; a service registered
with no backends answers 503 through the ``NoBackendsAvailable``
exception handler.
"""

from fastapi import APIRouter, Depends, Query

from api_gateway.app.api.deps import get_load_balancer
from api_gateway.app.schemas.service import ResolvedTarget
from api_gateway.app.services.load_balancer import LoadBalancer


router = APIRouter()


@router.get("", response_model=ResolvedTarget)
async def resolve(
    service: str = Query(..., min_length=1),
    lb: LoadBalancer = Depends(get_load_balancer),
) -> ResolvedTarget:
    return lb.resolve(service)
