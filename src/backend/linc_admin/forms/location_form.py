"""Location create/edit form logic."""

import asyncio
import logging
from typing import Any

from linc_admin.errors import ConflictError, DuplicateCodeError, NotFoundError, ValidationError
from linc_admin.forms import codes
from linc_admin.forms.user_group_form import is_duplicate_rejection
from linc_admin.forms.validation import validate_email, validate_postal_code, validate_sa_phone
from linc_admin.schemas.location import (
    CreateLocationRequest,
    Location,
    LocationCodeSuggestion,
    LocationFormContext,
    UpdateLocationRequest,
)
from linc_admin.schemas.user_group import UserGroup
from linc_admin.services.location_service import LocationService
from linc_admin.services.user_group_service import UserGroupService

log = logging.getLogger(__name__)

_ADDRESS_FIELDS = (
    "address_line_1",
    "address_line_2",
    "address_line_3",
    "city",
    "province_code",
    "postal_code",
    "country_code",
)


async def load_context(
    user_groups: UserGroupService, locations: LocationService
) -> LocationFormContext:
    groups, locs = await asyncio.gather(user_groups.list_all(), locations.list_all())
    return LocationFormContext(user_groups=groups, locations=locs)


def _find_group(user_groups: list[UserGroup], user_group_id: str) -> UserGroup:
    for group in user_groups:
        if group.id == user_group_id:
            return group
    raise NotFoundError(f"User group {user_group_id} not found")


def suggest_code(context: LocationFormContext, user_group_id: str) -> LocationCodeSuggestion:
    """Next location code for the group; the province follows the group."""
    group = _find_group(context.user_groups, user_group_id)
    return LocationCodeSuggestion(
        location_code=codes.generate_location_code(group.user_group_code, context.locations),
        province_code=group.province_code,
    )


def validate_fields(body: CreateLocationRequest | UpdateLocationRequest) -> None:
    errors: dict[str, str] = {}
    if message := validate_sa_phone(body.phone_number):
        errors["phone_number"] = message
    if message := validate_email(body.email_address):
        errors["email_address"] = message
    if message := validate_postal_code(body.postal_code):
        errors["postal_code"] = message
    for field in ("max_users", "max_daily_capacity"):
        value = getattr(body, field)
        if value is not None and value < 0:
            errors[field] = "Must be zero or more"
    if errors:
        raise ValidationError("Please correct the highlighted fields", details={"fields": errors})


def build_payload(body: CreateLocationRequest | UpdateLocationRequest) -> dict[str, Any]:
    """Address fields travel nested under "address"; the rest stays flat."""
    data = body.model_dump(mode="json", exclude_none=True)
    address = {key: data.pop(key) for key in _ADDRESS_FIELDS if key in data}
    data["address"] = address
    return data


async def submit_create(
    locations: LocationService,
    user_groups: UserGroupService,
    body: CreateLocationRequest,
) -> Location:
    validate_fields(body)
    try:
        return await locations.create_location(build_payload(body))
    except (ConflictError, ValidationError) as exc:
        if not is_duplicate_rejection(exc):
            raise
        context = await load_context(user_groups, locations)
        suggested = suggest_code(context, body.user_group_id).location_code
        log.warning(
            "Location code %s rejected as duplicate; suggesting %s",
            body.location_code,
            suggested,
        )
        raise DuplicateCodeError(
            f"Location code {body.location_code} is already in use",
            details={"field": "location_code", "suggested_code": suggested},
        ) from exc


async def submit_update(
    locations: LocationService, location_id: str, body: UpdateLocationRequest
) -> Location:
    validate_fields(body)
    return await locations.update_location(location_id, build_payload(body))
