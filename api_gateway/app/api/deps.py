"""
FastAPI dependencies giving handlers access to process-owned objects.

``create_app`` stores the load balancer, route table and proxy on
``app.state``; handlers receive them through ``Depends`` so that each
application instance (and each test) works on its own registry.
"""

from fastapi import Request

from api_gateway.app.services.load_balancer import LoadBalancer
from api_gateway.app.services.proxy_service import ProxyService
from api_gateway.app.services.route_service import RouteService


def get_load_balancer(request: Request) -> LoadBalancer:
    return request.app.state.load_balancer


def get_route_service(request: Request) -> RouteService:
    return request.app.state.route_service


def get_proxy_service(request: Request) -> ProxyService:
    return request.app.state.proxy_service
