"""Location service: locations and their resources on the LINC API."""

from typing import Any

from linc_admin.clients.linc_api import LincApiClient
from linc_admin.config import settings
from linc_admin.schemas.location import Location, LocationResource

_PATH = "locations"


class LocationService:
    def __init__(self, api: LincApiClient) -> None:
        self.api = api

    # ── Locations ─────────────────────────────────────────────────────────────

    async def list_locations(
        self,
        filters: dict[str, Any] | None = None,
        page: int = 1,
        size: int = 50,
    ) -> list[Location]:
        params = dict(filters or {})
        params["skip"] = (page - 1) * size
        params["limit"] = size
        data = await self.api.get(_PATH, params=params)
        return [Location.model_validate(item) for item in data or []]

    async def list_all(self) -> list[Location]:
        return await self.list_locations(size=settings.LIST_FETCH_LIMIT)

    async def get_location(self, location_id: str) -> Location:
        return Location.model_validate(await self.api.get(f"{_PATH}/{location_id}"))

    async def create_location(self, payload: dict[str, Any]) -> Location:
        return Location.model_validate(await self.api.post(_PATH, payload))

    async def update_location(self, location_id: str, payload: dict[str, Any]) -> Location:
        return Location.model_validate(await self.api.put(f"{_PATH}/{location_id}", payload))

    async def delete_location(self, location_id: str) -> Location | None:
        data = await self.api.delete(f"{_PATH}/{location_id}")
        return Location.model_validate(data) if data else None

    async def by_user_group(self, user_group_id: str) -> list[Location]:
        data = await self.api.get(f"{_PATH}/by-user-group/{user_group_id}")
        return [Location.model_validate(item) for item in data or []]

    async def by_province(self, province_code: str) -> list[Location]:
        data = await self.api.get(f"{_PATH}/by-province/{province_code}")
        return [Location.model_validate(item) for item in data or []]

    async def statistics(self) -> dict[str, Any]:
        return await self.api.get(f"{_PATH}/statistics")

    async def nearby(
        self, latitude: float, longitude: float, radius_km: float = 50
    ) -> list[Location]:
        data = await self.api.get(
            f"{_PATH}/nearby",
            params={"latitude": latitude, "longitude": longitude, "radius_km": radius_km},
        )
        return [Location.model_validate(item) for item in data or []]

    # ── Resources ─────────────────────────────────────────────────────────────

    async def list_resources(self, location_id: str) -> list[LocationResource]:
        data = await self.api.get(f"{_PATH}/{location_id}/resources")
        return [LocationResource.model_validate(item) for item in data or []]

    async def create_resource(self, location_id: str, payload: dict[str, Any]) -> LocationResource:
        data = await self.api.post(f"{_PATH}/{location_id}/resources", payload)
        return LocationResource.model_validate(data)

    async def update_resource(
        self, location_id: str, resource_id: str, payload: dict[str, Any]
    ) -> LocationResource:
        data = await self.api.put(f"{_PATH}/{location_id}/resources/{resource_id}", payload)
        return LocationResource.model_validate(data)

    async def delete_resource(self, location_id: str, resource_id: str) -> None:
        await self.api.delete(f"{_PATH}/{location_id}/resources/{resource_id}")
