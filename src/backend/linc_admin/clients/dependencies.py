"""FastAPI dependencies that hand routers a LincApiClient.

The shared httpx.AsyncClient lives on app.state (created in the lifespan);
tests override get_http_client with one backed by httpx.MockTransport.
"""

import httpx
from fastapi import Depends
from starlette.requests import HTTPConnection

from linc_admin.auth.dependencies import get_bearer_token
from linc_admin.clients.linc_api import LincApiClient
from linc_admin.config import settings


def get_http_client(connection: HTTPConnection) -> httpx.AsyncClient:
    # HTTPConnection so the live search WebSocket can share it.
    return connection.app.state.http_client


def get_api_client(
    token: str = Depends(get_bearer_token),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> LincApiClient:
    return LincApiClient(http_client, settings.api_root, token)
