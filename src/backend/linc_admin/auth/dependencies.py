"""FastAPI dependencies guarding console routes.

Usage:
    @router.get("/protected")
    async def endpoint(claims: Claims = Depends(get_current_user)):
        ...

    router = APIRouter(dependencies=[Depends(require_role("admin"))])
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from linc_admin.auth.jwt import Claims, verify_token
from linc_admin.auth.permissions import has_role
from linc_admin.errors import ForbiddenError, UnauthorizedError

_bearer = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    if credentials is None:
        raise UnauthorizedError("Missing Bearer token")
    return credentials.credentials


async def get_current_user(token: str = Depends(get_bearer_token)) -> Claims:
    return verify_token(token)


def require_role(role: str):
    async def _check(claims: Claims = Depends(get_current_user)) -> Claims:
        if not has_role(claims, role):
            raise ForbiddenError(f"Your role doesn't have access to this page. Required role: {role}")
        return claims

    return _check
