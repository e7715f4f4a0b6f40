"""
Gateway exception hierarchy.

Services raise these and the application maps them to HTTP responses
in a single exception handler (see ``main.create_app``).  Each error
carries the status code it should be surfaced with so that handlers
do not need to know about individual error types.

Resolving a service that was never registered is deliberately *not*
an error: the name is used as a direct backend URL instead.
"""

from typing import Optional


class GatewayError(Exception):
    """Base for all gateway-specific errors."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ConfigurationError(GatewayError):
    """Raised when settings cannot be parsed at startup."""


class NoBackendsAvailable(GatewayError):
    """Raised when a service is registered but its backend list is empty."""

    status_code = 503

    def __init__(self, service: str) -> None:
        self.service = service
        super().__init__(f"No backends available for service '{service}'")


class RouteNotFound(GatewayError):
    """No gateway route matches the inbound path."""

    status_code = 404

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Route not found: {path}")


class RouteInactive(GatewayError):
    """The matching route exists but has been switched off."""

    status_code = 503

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        super().__init__(f"Route {prefix} is inactive")


class UpstreamError(GatewayError):
    """The selected backend could not be reached."""

    status_code = 502
    default_detail = "Bad gateway"
