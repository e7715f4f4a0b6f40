"""
Service management endpoints for admin API v1.

Operators use these routes to register backends for a logical service,
for example when a new instance is started on scale-out, and to inspect
where each service's rotation currently stands.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api_gateway.app.api.deps import get_load_balancer
from api_gateway.app.schemas.service import ServiceRead, ServiceRegister, TargetCreate
from api_gateway.app.services.load_balancer import LoadBalancer


router = APIRouter()


@router.get("/", response_model=List[ServiceRead])
async def list_services(lb: LoadBalancer = Depends(get_load_balancer)) -> List[ServiceRead]:
    """List all registered services with their backends and cursor."""
    return lb.list_services()


@router.get("/{service}", response_model=ServiceRead)
async def get_service(service: str, lb: LoadBalancer = Depends(get_load_balancer)) -> ServiceRead:
    snapshot = lb.get_service(service)
    if snapshot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Service {service} not found")
    return snapshot


@router.put("/{service}", response_model=ServiceRead)
async def register_service(
    service: str,
    body: ServiceRegister,
    lb: LoadBalancer = Depends(get_load_balancer),
) -> ServiceRead:
    """Replace the backend list of a service.

    The rotation restarts at the first backend.  Sending an empty list
    keeps the service registered but makes it unresolvable (503) until
    a backend is added.
    """
    try:
        lb.register(service, body.targets)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return lb.get_service(service)


@router.delete("/{service}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(service: str, lb: LoadBalancer = Depends(get_load_balancer)) -> None:
    if not lb.remove_service(service):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Service {service} not found")


@router.post("/{service}/targets", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
async def add_target(
    service: str,
    body: TargetCreate,
    lb: LoadBalancer = Depends(get_load_balancer),
) -> ServiceRead:
    """Append a backend to a service, creating the service if needed.

    The rotation cursor is not reset; the new backend is handed out
    once the rotation reaches its position.
    """
    lb.add_target(service, body.url)
    return lb.get_service(service)


@router.delete("/{service}/targets", status_code=status.HTTP_204_NO_CONTENT)
async def remove_target(
    service: str,
    url: str = Query(..., min_length=1),
    lb: LoadBalancer = Depends(get_load_balancer),
) -> None:
    try:
        lb.remove_target(service, url)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
