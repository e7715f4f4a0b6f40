"""
Health check endpoint.

Mounted at ``/health``, outside the versioned admin prefix, so that load
balancers and orchestrators in front of the gateway can poll it
without knowing the API version.
"""

import time
from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("")
async def health(request: Request) -> Dict[str, Any]:
    started_at = request.app.state.started_at
    return {
        "status": "ok",
        "uptime": round(time.monotonic() - started_at, 3),
        "timestamp": int(time.time() * 1000),
        "message": "API Gateway is healthy",
    }
