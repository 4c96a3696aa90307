"""LINC admin console FastAPI application factory.

Entry point: uvicorn linc_admin.main:app
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from linc_admin.config import settings
from linc_admin.errors import LincAdminError
from linc_admin.middleware import RequestIDMiddleware, get_request_id
from linc_admin.routers import health, locations, lookups, staff_assignments, user_groups, users

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app.state.http_client = httpx.AsyncClient(timeout=settings.LINC_API_TIMEOUT_SECONDS)
    log.info("LINC admin console started against %s", settings.api_root)

    yield

    await app.state.http_client.aclose()


app = FastAPI(title="LINC Admin Console", lifespan=lifespan)

app.add_middleware(RequestIDMiddleware)


@app.exception_handler(LincAdminError)
async def linc_admin_error_handler(request: Request, exc: LincAdminError) -> JSONResponse:
    error = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if exc.details:
        error["details"] = exc.details
    if exc.status_code >= 500:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error},
        headers={"X-Request-ID": get_request_id()},
    )


app.include_router(health.router)
app.include_router(user_groups.router)
app.include_router(locations.router)
app.include_router(staff_assignments.router)
app.include_router(users.router)
app.include_router(users.live_router)
app.include_router(lookups.router)
