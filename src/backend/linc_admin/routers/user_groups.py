"""User group endpoints.

GET    /api/v1/user-groups                      list page (filter, sort, page, summary)
GET    /api/v1/user-groups/statistics           upstream statistics
GET    /api/v1/user-groups/by-province/{code}
GET    /api/v1/user-groups/type/dltc
GET    /api/v1/user-groups/type/help-desk
POST   /api/v1/user-groups/suggestions          code/name suggestion for the form
GET    /api/v1/user-groups/validate-code/{code}
GET    /api/v1/user-groups/{id}
GET    /api/v1/user-groups/{id}/contact         contact fields for the edit form
GET    /api/v1/user-groups/{id}/offices
POST   /api/v1/user-groups
PUT    /api/v1/user-groups/{id}
DELETE /api/v1/user-groups/{id}                 soft delete
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from linc_admin import listing
from linc_admin.auth.dependencies import require_role
from linc_admin.clients.dependencies import get_api_client
from linc_admin.clients.linc_api import LincApiClient
from linc_admin.config import settings
from linc_admin.forms import user_group_form
from linc_admin.forms.contact import ContactFields, load_contact
from linc_admin.schemas.enums import RegistrationStatus, UserGroupType
from linc_admin.schemas.user import Office
from linc_admin.schemas.user_group import (
    CreateUserGroupRequest,
    UpdateUserGroupRequest,
    UserGroup,
    UserGroupPage,
    UserGroupSuggestion,
    UserGroupSuggestionRequest,
)
from linc_admin.services.user_group_service import UserGroupService
from linc_admin.services.user_service import UserService

router = APIRouter(
    prefix="/api/v1/user-groups",
    tags=["user-groups"],
    dependencies=[Depends(require_role(settings.ADMIN_ROLE))],
)


def _service(api: LincApiClient = Depends(get_api_client)) -> UserGroupService:
    return UserGroupService(api)


def _user_service(api: LincApiClient = Depends(get_api_client)) -> UserService:
    return UserService(api)


@router.get("", response_model=UserGroupPage)
async def list_user_groups(
    search: str | None = None,
    province_code: str | None = None,
    user_group_type: UserGroupType | None = None,
    registration_status: RegistrationStatus | None = None,
    sort_by: str | None = None,
    descending: bool = False,
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=500),
    svc: UserGroupService = Depends(_service),
) -> UserGroupPage:
    user_groups = await svc.list_all()
    filtered = listing.filter_user_groups(
        user_groups,
        search=search,
        province_code=province_code,
        user_group_type=user_group_type.value if user_group_type else None,
        registration_status=registration_status.value if registration_status else None,
    )
    items, meta = listing.paginate(
        listing.sort_records(filtered, sort_by, descending), page, page_size
    )
    return UserGroupPage(
        items=items, meta=meta, summary=listing.summarize_user_groups(user_groups)
    )


@router.get("/statistics")
async def user_group_statistics(svc: UserGroupService = Depends(_service)) -> dict[str, Any]:
    return await svc.statistics()


@router.get("/by-province/{province_code}", response_model=list[UserGroup])
async def user_groups_by_province(
    province_code: str, svc: UserGroupService = Depends(_service)
) -> list[UserGroup]:
    return await svc.by_province(province_code)


@router.get("/type/dltc", response_model=list[UserGroup])
async def dltc_user_groups(svc: UserGroupService = Depends(_service)) -> list[UserGroup]:
    return await svc.dltc_groups()


@router.get("/type/help-desk", response_model=list[UserGroup])
async def help_desk_user_groups(svc: UserGroupService = Depends(_service)) -> list[UserGroup]:
    return await svc.help_desk_groups()


@router.post("/suggestions", response_model=UserGroupSuggestion)
async def suggest_user_group(
    body: UserGroupSuggestionRequest, svc: UserGroupService = Depends(_service)
) -> UserGroupSuggestion:
    return user_group_form.suggest(body, await svc.list_all())


@router.get("/validate-code/{code}")
async def validate_user_group_code(
    code: str, svc: UserGroupService = Depends(_service)
) -> dict[str, Any]:
    return await svc.validate_code(code)


@router.get("/{user_group_id}", response_model=UserGroup)
async def get_user_group(
    user_group_id: str, svc: UserGroupService = Depends(_service)
) -> UserGroup:
    return await svc.get_user_group(user_group_id)


@router.get("/{user_group_id}/contact", response_model=ContactFields)
async def user_group_contact(
    user_group_id: str,
    svc: UserGroupService = Depends(_service),
    users: UserService = Depends(_user_service),
) -> ContactFields:
    return await load_contact(users, await svc.get_user_group(user_group_id))


@router.get("/{user_group_id}/offices", response_model=list[Office])
async def user_group_offices(
    user_group_id: str, users: UserService = Depends(_user_service)
) -> list[Office]:
    return await users.offices_by_user_group(user_group_id)


@router.post("", response_model=UserGroup, status_code=status.HTTP_201_CREATED)
async def create_user_group(
    body: CreateUserGroupRequest, svc: UserGroupService = Depends(_service)
) -> UserGroup:
    return await user_group_form.submit_create(svc, body)


@router.put("/{user_group_id}", response_model=UserGroup)
async def update_user_group(
    user_group_id: str,
    body: UpdateUserGroupRequest,
    svc: UserGroupService = Depends(_service),
) -> UserGroup:
    return await user_group_form.submit_update(svc, user_group_id, body)


@router.delete("/{user_group_id}", response_model=UserGroup | None)
async def delete_user_group(
    user_group_id: str, svc: UserGroupService = Depends(_service)
) -> UserGroup | None:
    return await svc.delete_user_group(user_group_id)
