"""User group create/edit form logic.

suggest() derives the code, base name, full name and infrastructure type
code from the province, type and optional name suffix. submit_* validate
the form, build the upstream payload and, when the server rejects the code
as a duplicate, re-prompt with a freshly computed suggestion.
"""

import logging
from typing import Any

from linc_admin.errors import ConflictError, DuplicateCodeError, ValidationError
from linc_admin.forms import codes
from linc_admin.config import settings
from linc_admin.forms.validation import validate_email, validate_postal_code, validate_sa_phone
from linc_admin.schemas.user_group import (
    ADDRESS_FIELDS,
    CreateUserGroupRequest,
    UpdateUserGroupRequest,
    UserGroup,
    UserGroupSuggestion,
    UserGroupSuggestionRequest,
)
from linc_admin.services.user_group_service import UserGroupService

log = logging.getLogger(__name__)

_DUPLICATE_MARKERS = ("already exists", "unique", "duplicate")


def is_duplicate_rejection(exc: Exception) -> bool:
    if isinstance(exc, ConflictError):
        return True
    if isinstance(exc, ValidationError):
        message = exc.message.lower()
        return any(marker in message for marker in _DUPLICATE_MARKERS)
    return False


def suggest(
    request: UserGroupSuggestionRequest, user_groups: list[UserGroup]
) -> UserGroupSuggestion:
    base = codes.base_user_group_name(request.province_code, request.user_group_type)
    return UserGroupSuggestion(
        user_group_code=codes.generate_user_group_code(
            request.province_code, user_groups, exclude_id=request.exclude_id
        ),
        base_name=base,
        user_group_name=codes.compose_name(base, request.name_suffix),
        infrastructure_type_code=codes.infrastructure_type_code(request.user_group_type),
    )


def validate_fields(body: CreateUserGroupRequest | UpdateUserGroupRequest) -> None:
    errors: dict[str, str] = {}
    if not body.user_group_name.strip():
        errors["user_group_name"] = "User group name is required"
    if message := validate_sa_phone(body.phone_number):
        errors["phone_number"] = message
    if message := validate_email(body.email_address):
        errors["email_address"] = message
    if isinstance(body, UpdateUserGroupRequest) and (
        message := validate_postal_code(body.postal_code)
    ):
        errors["postal_code"] = message
    if errors:
        raise ValidationError("Please correct the highlighted fields", details={"fields": errors})


def build_create_payload(body: CreateUserGroupRequest) -> dict[str, Any]:
    payload = body.model_dump(mode="json", exclude_none=True)
    if body.infrastructure_type_code is None:
        payload["infrastructure_type_code"] = codes.infrastructure_type_code(body.user_group_type)
    return payload


def build_update_payload(body: UpdateUserGroupRequest) -> dict[str, Any]:
    """Address fields travel nested under "address" with the province."""
    payload = body.model_dump(mode="json", exclude_none=True)
    address = {key: payload.pop(key) for key in ADDRESS_FIELDS if key in payload}
    if address:
        address.setdefault("country_code", settings.DEFAULT_COUNTRY_CODE)
        if body.province_code is not None:
            address["province_code"] = body.province_code
        payload["address"] = address
    if body.user_group_type is not None and body.infrastructure_type_code is None:
        payload["infrastructure_type_code"] = codes.infrastructure_type_code(body.user_group_type)
    return payload


async def _fresh_code(
    service: UserGroupService, province_code: str | None, exclude_id: str | None = None
) -> str:
    user_groups = await service.list_all()
    if province_code is None:
        current = next((g for g in user_groups if g.id == exclude_id), None)
        province_code = current.province_code if current else None
    if not province_code:
        raise ValidationError("Please select a province", details={"field": "province_code"})
    return codes.generate_user_group_code(province_code, user_groups, exclude_id=exclude_id)


async def submit_create(service: UserGroupService, body: CreateUserGroupRequest) -> UserGroup:
    validate_fields(body)
    try:
        return await service.create_user_group(build_create_payload(body))
    except (ConflictError, ValidationError) as exc:
        if not is_duplicate_rejection(exc):
            raise
        suggested = await _fresh_code(service, body.province_code)
        log.warning(
            "User group code %s rejected as duplicate; suggesting %s",
            body.user_group_code,
            suggested,
        )
        raise DuplicateCodeError(
            f"User group code {body.user_group_code} is already in use",
            details={"field": "user_group_code", "suggested_code": suggested},
        ) from exc


async def submit_update(
    service: UserGroupService, user_group_id: str, body: UpdateUserGroupRequest
) -> UserGroup:
    validate_fields(body)
    try:
        return await service.update_user_group(user_group_id, build_update_payload(body))
    except (ConflictError, ValidationError) as exc:
        if body.user_group_code is None or not is_duplicate_rejection(exc):
            raise
        suggested = await _fresh_code(service, body.province_code, exclude_id=user_group_id)
        log.warning(
            "User group code %s rejected as duplicate on edit; suggesting %s",
            body.user_group_code,
            suggested,
        )
        raise DuplicateCodeError(
            f"User group code {body.user_group_code} is already in use",
            details={"field": "user_group_code", "suggested_code": suggested},
        ) from exc
