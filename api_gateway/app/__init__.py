"""
Application package initializer.

The gateway is split into ``core`` (settings, logging, errors),
``services`` (load balancer, route table, proxy), ``schemas`` (API
payloads) and ``api`` (admin endpoints and the catch-all proxy route).
"""

from .main import app, create_app  # noqa: F401
