"""User management service: REST mapping onto the LINC API user-management
resource, plus the display helpers the users list relies on.

Validation codes reported by the upstream API:
  V06001  user group must be active and valid
  V06003  user name must be unique within the user group
  V06004  email must be valid and unique system-wide
  V06005  ID number must be valid for the selected ID type
"""

import logging
import math
from typing import Any

from linc_admin.clients.linc_api import LincApiClient
from linc_admin.config import settings
from linc_admin.schemas.enums import AuthorityLevel
from linc_admin.schemas.user import (
    Office,
    User,
    UserListResponse,
    UserRow,
    UserSession,
    normalize_keys,
)

log = logging.getLogger(__name__)

_PATH = "user-management"

_STATUS_COLORS = {
    "ACTIVE": "success",
    "PENDING_ACTIVATION": "warning",
    "SUSPENDED": "error",
    "LOCKED": "error",
    "INACTIVE": "info",
}


def status_color(status: str | None) -> str:
    return _STATUS_COLORS.get(status or "", "info")


def authority_level_label(level: str | None) -> str | None:
    if not level:
        return None
    try:
        return AuthorityLevel(level).label
    except ValueError:
        return level


def to_row(user: User) -> UserRow:
    return UserRow(
        user=user,
        display_name=user.display_name,
        status_color=status_color(user.status),
        authority_level_label=authority_level_label(user.authority_level),
    )


class UserService:
    def __init__(self, api: LincApiClient) -> None:
        self.api = api

    # ── CRUD ──────────────────────────────────────────────────────────────────

    async def create_user(self, payload: dict[str, Any]) -> User:
        return User.model_validate(await self.api.post(f"{_PATH}/", payload))

    async def get_user(self, user_id: str) -> User:
        return User.model_validate(await self.api.get(f"{_PATH}/{user_id}"))

    async def list_users(
        self,
        page: int = 1,
        size: int = 20,
        filters: dict[str, Any] | None = None,
    ) -> UserListResponse:
        params = dict(filters or {})
        params["page"] = page
        params["size"] = size
        data = normalize_keys(await self.api.get(f"{_PATH}/", params=params) or {})
        users = [User.model_validate(item) for item in data.get("users", [])]
        total = data.get("total", len(users))
        pages = data.get("pages", math.ceil(total / size) if size else 0)
        return UserListResponse(
            users=[to_row(u) for u in users],
            total=total,
            page=data.get("page", page),
            size=data.get("size", size),
            pages=pages,
            has_next=data.get("has_next", page < pages),
            has_previous=data.get("has_previous", page > 1),
        )

    async def update_user(self, user_id: str, payload: dict[str, Any]) -> User:
        return User.model_validate(await self.api.put(f"{_PATH}/{user_id}", payload))

    async def delete_user(self, user_id: str, soft_delete: bool = True) -> User | None:
        data = await self.api.delete(f"{_PATH}/{user_id}", params={"soft_delete": soft_delete})
        return User.model_validate(data) if data else None

    # ── Search and validation ─────────────────────────────────────────────────

    async def search_users(self, query: str, limit: int | None = None) -> list[User]:
        data = await self.api.get(
            f"{_PATH}/search/users",
            params={"q": query, "limit": limit or settings.USER_SEARCH_LIMIT},
        )
        return [User.model_validate(item) for item in data or []]

    async def validate_username(self, username: str) -> dict[str, Any]:
        """Returns {"available": bool, "message": str}."""
        return await self.api.post(
            f"{_PATH}/validate/username", {}, params={"username": username}
        )

    async def validate_email(self, email: str) -> dict[str, Any]:
        return await self.api.post(f"{_PATH}/validate/email", {}, params={"email": email})

    async def statistics(self) -> dict[str, Any]:
        return normalize_keys(await self.api.get(f"{_PATH}/statistics/overview"))

    async def usernames_in_group(self, user_group_code: str) -> list[str]:
        response = await self.list_users(
            page=1,
            size=settings.LIST_FETCH_LIMIT,
            filters={"user_group_code": user_group_code},
        )
        return [row.user.username for row in response.users]

    # ── Sessions ──────────────────────────────────────────────────────────────

    async def create_session(self, user_id: str, payload: dict[str, Any]) -> UserSession:
        data = await self.api.post(f"{_PATH}/{user_id}/sessions", payload)
        return UserSession.model_validate(data)

    async def list_sessions(self, user_id: str, active_only: bool = True) -> list[UserSession]:
        data = await self.api.get(
            f"{_PATH}/{user_id}/sessions", params={"active_only": active_only}
        )
        return [UserSession.model_validate(item) for item in data or []]

    async def end_session(self, session_id: str) -> dict[str, Any]:
        return await self.api.delete(f"{_PATH}/sessions/{session_id}")

    # ── Lookups ───────────────────────────────────────────────────────────────

    async def offices_by_user_group(self, user_group_id: str) -> list[Office]:
        # No offices endpoint upstream yet.
        log.warning("Offices endpoint not available; using placeholder offices")
        return [
            Office(id="office-a", office_code="A", name="Main Office", user_group_id=user_group_id),
            Office(id="office-b", office_code="B", name="Branch Office", user_group_id=user_group_id),
        ]
