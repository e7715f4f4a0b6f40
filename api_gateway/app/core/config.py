"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  In a
production deployment you should override these via environment
variables or a dedicated configuration service.

Two settings seed the gateway at startup:

* ``SERVICE_TARGETS`` lists backend URLs per service, e.g.
  ``users=http://a:8001,http://b:8001;orders=http://c:8002``.  An entry
  such as ``billing=`` registers ``billing`` with an empty backend list.
* ``GATEWAY_ROUTES`` maps path prefixes to services, e.g.
  ``/api/users=users;/api/orders=orders``.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .errors import ConfigurationError


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "API Gateway")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Optional path of a log file.  When empty, logs go to the console only.
    log_file: str = os.getenv("LOG_FILE", "")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    # Seconds to wait for a backend before answering 502.
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

    service_targets: str = os.getenv("SERVICE_TARGETS", "")
    gateway_routes: str = os.getenv("GATEWAY_ROUTES", "")


def _split_entries(raw: str) -> List[Tuple[str, str]]:
    entries: List[Tuple[str, str]] = []
    for chunk in raw.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        if "=" not in chunk:
            raise ConfigurationError(f"Malformed entry '{chunk}': expected 'key=value'")
        key, value = chunk.split("=", 1)
        key = key.strip()
        if not key:
            raise ConfigurationError(f"Malformed entry '{chunk}': empty key")
        entries.append((key, value.strip()))
    return entries


def parse_service_targets(raw: str) -> Dict[str, List[str]]:
    """Parse ``SERVICE_TARGETS`` into a mapping of service to backend URLs.

    Order of URLs is preserved since it defines the rotation order.
    """
    services: Dict[str, List[str]] = {}
    for name, value in _split_entries(raw):
        urls = [url.strip() for url in value.split(",") if url.strip()]
        services.setdefault(name, []).extend(urls)
    return services


def parse_gateway_routes(raw: str) -> List[Tuple[str, str]]:
    """Parse ``GATEWAY_ROUTES`` into ``(prefix, service)`` pairs."""
    routes: List[Tuple[str, str]] = []
    for prefix, service in _split_entries(raw):
        if not prefix.startswith("/"):
            raise ConfigurationError(f"Route prefix '{prefix}' must start with '/'")
        if not service:
            raise ConfigurationError(f"Route '{prefix}' has no service")
        routes.append((prefix, service))
    return routes


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes defaults at import time, environment variables should be
# set before importing this module.
settings = Settings()
