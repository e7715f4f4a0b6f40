"""
Top-level package for the API gateway.

All functionality lives in submodules under ``app``; importing
``api_gateway.app`` builds the ASGI application.
"""

__all__ = []
