"""
Endpoint modules for admin API v1.

Each module defines an ``APIRouter`` that ``router.py`` mounts under
its own prefix.
"""
