"""Location and location resource endpoints.

GET    /api/v1/locations                         list page (filter, sort, page, summary)
GET    /api/v1/locations/statistics
GET    /api/v1/locations/form-context            user groups + locations for the form
GET    /api/v1/locations/code-suggestion?user_group_id=
GET    /api/v1/locations/nearby?latitude&longitude&radius_km
GET    /api/v1/locations/by-user-group/{id}
GET    /api/v1/locations/by-province/{code}
GET    /api/v1/locations/{id}
GET    /api/v1/locations/{id}/contact
POST   /api/v1/locations
PUT    /api/v1/locations/{id}
DELETE /api/v1/locations/{id}
GET    /api/v1/locations/{id}/resources
POST   /api/v1/locations/{id}/resources
PUT    /api/v1/locations/{id}/resources/{resource_id}
DELETE /api/v1/locations/{id}/resources/{resource_id}
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from linc_admin import listing
from linc_admin.auth.dependencies import require_role
from linc_admin.clients.dependencies import get_api_client
from linc_admin.clients.linc_api import LincApiClient
from linc_admin.config import settings
from linc_admin.forms import location_form
from linc_admin.forms.contact import ContactFields, load_contact
from linc_admin.schemas.enums import OperationalStatus
from linc_admin.schemas.location import (
    CreateLocationRequest,
    Location,
    LocationCodeSuggestion,
    LocationFormContext,
    LocationPage,
    LocationResource,
    ResourceRequest,
    UpdateLocationRequest,
)
from linc_admin.services.location_service import LocationService
from linc_admin.services.user_group_service import UserGroupService
from linc_admin.services.user_service import UserService

router = APIRouter(
    prefix="/api/v1/locations",
    tags=["locations"],
    dependencies=[Depends(require_role(settings.ADMIN_ROLE))],
)


def _service(api: LincApiClient = Depends(get_api_client)) -> LocationService:
    return LocationService(api)


def _user_group_service(api: LincApiClient = Depends(get_api_client)) -> UserGroupService:
    return UserGroupService(api)


def _user_service(api: LincApiClient = Depends(get_api_client)) -> UserService:
    return UserService(api)


# ── Locations ─────────────────────────────────────────────────────────────────


@router.get("", response_model=LocationPage)
async def list_locations(
    search: str | None = None,
    province_code: str | None = None,
    user_group_id: str | None = None,
    operational_status: OperationalStatus | None = None,
    sort_by: str | None = None,
    descending: bool = False,
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=500),
    svc: LocationService = Depends(_service),
) -> LocationPage:
    locations = await svc.list_all()
    filtered = listing.filter_locations(
        locations,
        search=search,
        province_code=province_code,
        user_group_id=user_group_id,
        operational_status=operational_status.value if operational_status else None,
    )
    items, meta = listing.paginate(
        listing.sort_records(filtered, sort_by, descending), page, page_size
    )
    return LocationPage(items=items, meta=meta, summary=listing.summarize_locations(locations))


@router.get("/statistics")
async def location_statistics(svc: LocationService = Depends(_service)) -> dict[str, Any]:
    return await svc.statistics()


@router.get("/form-context", response_model=LocationFormContext)
async def location_form_context(
    svc: LocationService = Depends(_service),
    user_groups: UserGroupService = Depends(_user_group_service),
) -> LocationFormContext:
    return await location_form.load_context(user_groups, svc)


@router.get("/code-suggestion", response_model=LocationCodeSuggestion)
async def suggest_location_code(
    user_group_id: str,
    svc: LocationService = Depends(_service),
    user_groups: UserGroupService = Depends(_user_group_service),
) -> LocationCodeSuggestion:
    context = await location_form.load_context(user_groups, svc)
    return location_form.suggest_code(context, user_group_id)


@router.get("/nearby", response_model=list[Location])
async def nearby_locations(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(50, gt=0),
    svc: LocationService = Depends(_service),
) -> list[Location]:
    return await svc.nearby(latitude, longitude, radius_km)


@router.get("/by-user-group/{user_group_id}", response_model=list[Location])
async def locations_by_user_group(
    user_group_id: str, svc: LocationService = Depends(_service)
) -> list[Location]:
    return await svc.by_user_group(user_group_id)


@router.get("/by-province/{province_code}", response_model=list[Location])
async def locations_by_province(
    province_code: str, svc: LocationService = Depends(_service)
) -> list[Location]:
    return await svc.by_province(province_code)


@router.get("/{location_id}", response_model=Location)
async def get_location(location_id: str, svc: LocationService = Depends(_service)) -> Location:
    return await svc.get_location(location_id)


@router.get("/{location_id}/contact", response_model=ContactFields)
async def location_contact(
    location_id: str,
    svc: LocationService = Depends(_service),
    users: UserService = Depends(_user_service),
) -> ContactFields:
    return await load_contact(users, await svc.get_location(location_id))


@router.post("", response_model=Location, status_code=status.HTTP_201_CREATED)
async def create_location(
    body: CreateLocationRequest,
    svc: LocationService = Depends(_service),
    user_groups: UserGroupService = Depends(_user_group_service),
) -> Location:
    return await location_form.submit_create(svc, user_groups, body)


@router.put("/{location_id}", response_model=Location)
async def update_location(
    location_id: str,
    body: UpdateLocationRequest,
    svc: LocationService = Depends(_service),
) -> Location:
    return await location_form.submit_update(svc, location_id, body)


@router.delete("/{location_id}", response_model=Location | None)
async def delete_location(
    location_id: str, svc: LocationService = Depends(_service)
) -> Location | None:
    return await svc.delete_location(location_id)


# ── Resources ─────────────────────────────────────────────────────────────────


@router.get("/{location_id}/resources", response_model=list[LocationResource])
async def list_resources(
    location_id: str, svc: LocationService = Depends(_service)
) -> list[LocationResource]:
    return await svc.list_resources(location_id)


@router.post(
    "/{location_id}/resources",
    response_model=LocationResource,
    status_code=status.HTTP_201_CREATED,
)
async def create_resource(
    location_id: str, body: ResourceRequest, svc: LocationService = Depends(_service)
) -> LocationResource:
    return await svc.create_resource(location_id, body.model_dump(mode="json", exclude_none=True))


@router.put("/{location_id}/resources/{resource_id}", response_model=LocationResource)
async def update_resource(
    location_id: str,
    resource_id: str,
    body: ResourceRequest,
    svc: LocationService = Depends(_service),
) -> LocationResource:
    return await svc.update_resource(
        location_id, resource_id, body.model_dump(mode="json", exclude_none=True)
    )


@router.delete("/{location_id}/resources/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    location_id: str, resource_id: str, svc: LocationService = Depends(_service)
) -> None:
    await svc.delete_resource(location_id, resource_id)
