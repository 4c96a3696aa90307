"""JWT verification for the LINC admin console.

Access tokens are issued by the upstream LINC API and signed with a shared
secret; this service only decodes them to guard its routes and forwards the
raw token upstream. create_token/build_claims mirror the upstream issuer.
Claims is a plain dataclass.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from jose import ExpiredSignatureError, JWTError, jwt

from linc_admin.config import settings
from linc_admin.errors import UnauthorizedError

_EXPIRY_SECONDS = 900  # 15 minutes


@dataclass
class Claims:
    sub: str
    exp: int
    roles: list[str] = field(default_factory=list)
    permissions: list[str] = field(default_factory=list)
    is_superuser: bool = False


def create_token(claims: Claims) -> str:
    payload = {
        "sub": claims.sub,
        "roles": claims.roles,
        "permissions": claims.permissions,
        "is_superuser": claims.is_superuser,
        "exp": claims.exp,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def build_claims(
    sub: str,
    roles: list[str] | None = None,
    permissions: list[str] | None = None,
    is_superuser: bool = False,
) -> Claims:
    exp = int(datetime.now(UTC).timestamp()) + _EXPIRY_SECONDS
    return Claims(
        sub=sub,
        exp=exp,
        roles=list(roles or []),
        permissions=list(permissions or []),
        is_superuser=is_superuser,
    )


def verify_token(token: str) -> Claims:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise UnauthorizedError("Token has expired") from exc
    except JWTError as exc:
        raise UnauthorizedError("Invalid token") from exc

    if "sub" not in payload or "exp" not in payload:
        raise UnauthorizedError("Invalid token")

    return Claims(
        sub=str(payload["sub"]),
        exp=payload["exp"],
        roles=list(payload.get("roles") or []),
        permissions=list(payload.get("permissions") or []),
        is_superuser=bool(payload.get("is_superuser", False)),
    )
