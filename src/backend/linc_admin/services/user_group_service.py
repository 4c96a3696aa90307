"""User group service: REST mapping onto the LINC API user-groups resource.

Upstream endpoints:
  GET    user-groups?skip&limit&<filters>
  GET    user-groups/{id}
  POST   user-groups
  PUT    user-groups/{id}
  DELETE user-groups/{id}                  (soft delete, returns the entity)
  GET    user-groups/by-province/{code}
  GET    user-groups/type/dltc | type/help-desk
  GET    user-groups/statistics
  GET    user-groups/validate-code/{code}
"""

from typing import Any

from linc_admin.clients.linc_api import LincApiClient
from linc_admin.config import settings
from linc_admin.schemas.user_group import UserGroup

_PATH = "user-groups"


class UserGroupService:
    def __init__(self, api: LincApiClient) -> None:
        self.api = api

    async def list_user_groups(
        self,
        filters: dict[str, Any] | None = None,
        page: int = 1,
        size: int = 50,
    ) -> list[UserGroup]:
        params = dict(filters or {})
        params["skip"] = (page - 1) * size
        params["limit"] = size
        data = await self.api.get(_PATH, params=params)
        return [UserGroup.model_validate(item) for item in data or []]

    async def list_all(self) -> list[UserGroup]:
        """Every user group in one call; list pages filter in memory."""
        return await self.list_user_groups(size=settings.LIST_FETCH_LIMIT)

    async def get_user_group(self, user_group_id: str) -> UserGroup:
        return UserGroup.model_validate(await self.api.get(f"{_PATH}/{user_group_id}"))

    async def create_user_group(self, payload: dict[str, Any]) -> UserGroup:
        return UserGroup.model_validate(await self.api.post(_PATH, payload))

    async def update_user_group(self, user_group_id: str, payload: dict[str, Any]) -> UserGroup:
        return UserGroup.model_validate(await self.api.put(f"{_PATH}/{user_group_id}", payload))

    async def delete_user_group(self, user_group_id: str) -> UserGroup | None:
        data = await self.api.delete(f"{_PATH}/{user_group_id}")
        return UserGroup.model_validate(data) if data else None

    async def by_province(self, province_code: str) -> list[UserGroup]:
        data = await self.api.get(f"{_PATH}/by-province/{province_code}")
        return [UserGroup.model_validate(item) for item in data or []]

    async def dltc_groups(self) -> list[UserGroup]:
        data = await self.api.get(f"{_PATH}/type/dltc")
        return [UserGroup.model_validate(item) for item in data or []]

    async def help_desk_groups(self) -> list[UserGroup]:
        data = await self.api.get(f"{_PATH}/type/help-desk")
        return [UserGroup.model_validate(item) for item in data or []]

    async def statistics(self) -> dict[str, Any]:
        return await self.api.get(f"{_PATH}/statistics")

    async def validate_code(self, code: str) -> dict[str, Any]:
        """Returns {"is_available": bool, "message": str}."""
        return await self.api.get(f"{_PATH}/validate-code/{code}")
