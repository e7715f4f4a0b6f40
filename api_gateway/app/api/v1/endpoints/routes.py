"""
Route management endpoints for admin API v1.

Routes map inbound path prefixes to logical services.  Changes take
effect for the next proxied request.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api_gateway.app.api.deps import get_route_service
from api_gateway.app.schemas.route import RouteCreate, RouteRead, RouteUpdate
from api_gateway.app.services.route_service import RouteService


router = APIRouter()


@router.get("/", response_model=List[RouteRead])
async def list_routes(routes: RouteService = Depends(get_route_service)) -> List[RouteRead]:
    """List routes in matching order (priority, then prefix)."""
    return routes.list_routes()


@router.post("/", response_model=RouteRead, status_code=status.HTTP_201_CREATED)
async def create_route(body: RouteCreate, routes: RouteService = Depends(get_route_service)) -> RouteRead:
    try:
        return routes.add_route(
            body.prefix,
            body.service,
            methods=body.methods,
            strip_prefix=body.strip_prefix,
            priority=body.priority,
            is_active=body.is_active,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.put("/{route_id}", response_model=RouteRead)
async def update_route(
    route_id: str,
    body: RouteUpdate,
    routes: RouteService = Depends(get_route_service),
) -> RouteRead:
    """Update a route.

    Only the fields present in the body change.  Setting ``is_active``
    to false takes the route out of service: matching requests get 503
    until it is switched back on.
    """
    try:
        route = routes.update_route(route_id, **body.model_dump(exclude_unset=True, exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    if route is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Route not found")
    return route


@router.delete("/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_route(route_id: str, routes: RouteService = Depends(get_route_service)) -> None:
    if not routes.remove_route(route_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Route not found")
