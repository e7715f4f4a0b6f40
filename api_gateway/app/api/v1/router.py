"""
Top-level router for version 1 of the admin API.

Aggregates the admin sub-routers.  The application mounts this router
under ``/api/v1``.
"""

from fastapi import APIRouter

from .endpoints import resolve, routes, services

router = APIRouter()

router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(routes.router, prefix="/routes", tags=["routes"])
# ``resolve`` takes the service name as a query parameter because
# unregistered names are URLs and may contain slashes.
router.include_router(resolve.router, prefix="/resolve", tags=["resolve"])
