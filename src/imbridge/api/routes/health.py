"""Health check route: GET /api/health"""

from __future__ import annotations

import os
import time

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/api/health")
def health(request: Request):
    """Basic health check - returns 200 if server is running."""
    from imbridge import __version__

    registry = getattr(request.app.state, "registry", None)
    return {
        "status": "ok",
        "service": "imbridge",
        "version": __version__,
        "pid": os.getpid(),
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S"),
        "providers": registry.list_providers() if registry else [],
    }
