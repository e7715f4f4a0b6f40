"""Shared fixtures for gateway tests."""

from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from api_gateway.app.core.config import Settings
from api_gateway.app.main import create_app


@pytest.fixture
def upstream_requests() -> List[httpx.Request]:
    """Requests that reached the mocked backends, in order."""
    return []


@pytest.fixture
def upstream_client(upstream_requests: List[httpx.Request]) -> httpx.AsyncClient:
    """An httpx client whose backends echo the URL they were called with."""

    def handler(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(request)
        return httpx.Response(
            200,
            json={"url": str(request.url), "method": request.method},
            headers={"X-Backend": request.url.host},
        )

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def make_client(upstream_client: httpx.AsyncClient) -> Callable[..., TestClient]:
    """Build a TestClient for a fresh app configured with the given settings."""

    def factory(service_targets: str = "", gateway_routes: str = "") -> TestClient:
        cfg = Settings(service_targets=service_targets, gateway_routes=gateway_routes)
        return TestClient(create_app(cfg, http_client=upstream_client))

    return factory
