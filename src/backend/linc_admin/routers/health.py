"""Health check endpoints for the LINC admin console.

Both endpoints are unauthenticated and mounted at root (no /api/v1 prefix).
Used by Kubernetes liveness and readiness probes.
"""

import importlib.metadata
import logging

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from linc_admin.clients.dependencies import get_http_client
from linc_admin.config import settings

log = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: returns 200 if the application process is running."""
    version = importlib.metadata.version("linc-admin-console")
    return {"status": "ok", "version": version}


@router.get("/health/ready")
async def health_ready(  # type: ignore[return]
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    """Readiness probe: returns 200 if the LINC API answers, 503 otherwise."""
    url = f"{settings.LINC_API_BASE_URL.rstrip('/')}/health"
    try:
        response = await http_client.get(url)
    except httpx.HTTPError as exc:
        log.warning("Readiness check failed: %s", exc)
        return JSONResponse(status_code=503, content={"status": "unavailable", "detail": str(exc)})
    if response.status_code >= 500:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "detail": f"LINC API returned {response.status_code}"},
        )
    return JSONResponse(status_code=200, content={"status": "ok"})
