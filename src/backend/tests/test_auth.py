"""Tests for bearer token verification and the console route guards.

Covers: token roundtrip, expired and garbage tokens, get_bearer_token /
get_current_user, role checks with superuser bypass, and the
admin role guard on mounted routers.
"""

import time
from unittest.mock import AsyncMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from httpx import ASGITransport, AsyncClient

from linc_admin.auth.dependencies import (
    get_bearer_token,
    get_current_user,
    require_role,
)
from linc_admin.auth.jwt import Claims, build_claims, create_token, verify_token
from linc_admin.auth.permissions import has_role
from linc_admin.errors import ForbiddenError, UnauthorizedError
from linc_admin.main import app
from linc_admin.routers import user_groups

# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client():
    service = AsyncMock()
    service.list_all = AsyncMock(return_value=[])
    app.dependency_overrides[user_groups._service] = lambda: service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _auth(**kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_token(build_claims(sub='alice', **kwargs))}"}


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------


class TestJWT:
    def test_create_and_verify_token_roundtrip(self):
        claims = build_claims(
            sub="alice", roles=["admin"], permissions=["users.read"], is_superuser=False
        )
        decoded = verify_token(create_token(claims))
        assert decoded.sub == "alice"
        assert decoded.roles == ["admin"]
        assert decoded.permissions == ["users.read"]
        assert decoded.is_superuser is False

    def test_verify_expired_token_raises_unauthorized(self):
        expired = Claims(sub="alice", exp=int(time.time()) - 1, roles=["admin"])
        with pytest.raises(UnauthorizedError, match="expired"):
            verify_token(create_token(expired))

    def test_verify_garbage_token_raises_unauthorized(self):
        with pytest.raises(UnauthorizedError):
            verify_token("not.a.valid.jwt")

    def test_token_expiry_is_15_minutes(self):
        before = int(time.time())
        claims = build_claims(sub="x")
        after = int(time.time())
        assert before + 900 <= claims.exp <= after + 900


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


class TestGetCurrentUser:
    async def test_missing_token_raises_unauthorized(self):
        with pytest.raises(UnauthorizedError):
            await get_bearer_token(credentials=None)

    async def test_bearer_token_is_returned_unchanged(self):
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="abc.def.ghi")
        assert await get_bearer_token(credentials=creds) == "abc.def.ghi"

    async def test_valid_token_returns_claims(self):
        token = create_token(build_claims(sub="alice", roles=["admin"]))
        result = await get_current_user(token=token)
        assert result.sub == "alice"
        assert result.roles == ["admin"]

    async def test_require_role_rejects_missing_role(self):
        check = require_role("admin")
        with pytest.raises(ForbiddenError, match="Required role: admin"):
            await check(claims=build_claims(sub="bob", roles=["clerk"]))


class TestRoles:
    def test_has_role(self):
        assert has_role(build_claims(sub="a", roles=["admin"]), "admin")
        assert not has_role(build_claims(sub="a", roles=["clerk"]), "admin")

    def test_superuser_bypasses_role(self):
        assert has_role(build_claims(sub="root", is_superuser=True), "anything")


# ---------------------------------------------------------------------------
# Route guard
# ---------------------------------------------------------------------------


class TestAdminGuard:
    async def test_no_token_returns_401(self, client):
        response = await client.get("/api/v1/user-groups")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_expired_token_returns_401(self, client):
        expired = create_token(Claims(sub="alice", exp=int(time.time()) - 1, roles=["admin"]))
        response = await client.get(
            "/api/v1/user-groups", headers={"Authorization": f"Bearer {expired}"}
        )
        assert response.status_code == 401

    async def test_non_admin_returns_403(self, client):
        response = await client.get("/api/v1/user-groups", headers=_auth(roles=["clerk"]))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    async def test_admin_is_allowed(self, client):
        response = await client.get("/api/v1/user-groups", headers=_auth(roles=["admin"]))
        assert response.status_code == 200

    async def test_superuser_is_allowed_without_admin_role(self, client):
        response = await client.get("/api/v1/user-groups", headers=_auth(is_superuser=True))
        assert response.status_code == 200
