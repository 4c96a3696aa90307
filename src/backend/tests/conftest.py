"""Shared test setup.

JWT_SECRET is required by AppSettings; it must be set before linc_admin is
imported.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402

from linc_admin.auth.jwt import build_claims, create_token  # noqa: E402
from linc_admin.services.lookup_service import lookup_cache  # noqa: E402


def make_token(roles: list[str] | None = None, is_superuser: bool = False) -> str:
    roles = ["admin"] if roles is None else roles
    return create_token(build_claims(sub="admin1", roles=roles, is_superuser=is_superuser))


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture(autouse=True)
def clear_lookup_cache():
    lookup_cache.clear()
    yield
    lookup_cache.clear()
