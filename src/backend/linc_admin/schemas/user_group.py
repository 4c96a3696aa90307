"""Pydantic schemas for user groups."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from linc_admin.schemas.common import PaginationMeta
from linc_admin.schemas.enums import PROVINCES, RegistrationStatus, UserGroupType

ADDRESS_FIELDS = (
    "address_line_1",
    "address_line_2",
    "address_line_3",
    "city",
    "postal_code",
    "country_code",
)


def check_province(v: str | None) -> str | None:
    if v is not None and v not in PROVINCES:
        msg = f"province_code must be one of {sorted(PROVINCES)}"
        raise ValueError(msg)
    return v


# ── Upstream records ──────────────────────────────────────────────────────────


class UserGroup(BaseModel):
    """User group as returned by the LINC API. Unknown fields pass through."""

    model_config = ConfigDict(extra="allow")

    id: str
    user_group_code: str
    user_group_name: str = ""
    user_group_type: str | None = None
    province_code: str | None = None
    registration_status: str | None = None
    infrastructure_type_code: int | None = None
    contact_person: str | None = None
    contact_user_id: str | None = None
    phone_number: str | None = None
    email: str | None = None
    email_address: str | None = None
    address_line_1: str | None = None
    address_line_2: str | None = None
    address_line_3: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country_code: str | None = None
    description: str | None = None
    operational_notes: str | None = None
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None

    @model_validator(mode="before")
    @classmethod
    def flatten_address(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("address"), dict):
            data = dict(data)
            address = data.pop("address")
            for key in ADDRESS_FIELDS:
                if data.get(key) is None and address.get(key) is not None:
                    data[key] = address[key]
        return data

    @field_validator("user_group_type", "registration_status", mode="before")
    @classmethod
    def coerce_code(cls, v):
        return None if v is None else str(v)


class UserGroupStatistics(BaseModel):
    total: int
    registered: int
    active: int
    inactive: int
    provinces: int
    types: int


class UserGroupPage(BaseModel):
    items: list[UserGroup]
    meta: PaginationMeta
    summary: UserGroupStatistics


# ── Requests ──────────────────────────────────────────────────────────────────


class UserGroupFields(BaseModel):
    contact_person: str | None = None
    contact_user_id: str | None = None
    phone_number: str | None = None
    email_address: str | None = None
    description: str | None = None
    operational_notes: str | None = None
    registration_status: RegistrationStatus = RegistrationStatus.REGISTERED
    is_active: bool = True


class CreateUserGroupRequest(UserGroupFields):
    user_group_code: str
    user_group_name: str
    user_group_type: UserGroupType
    province_code: str
    infrastructure_type_code: int | None = None

    @field_validator("province_code")
    @classmethod
    def validate_province(cls, v: str | None) -> str | None:
        return check_province(v)


class UpdateUserGroupRequest(UserGroupFields):
    user_group_name: str
    user_group_code: str | None = None
    province_code: str | None = None
    user_group_type: UserGroupType | None = None
    infrastructure_type_code: int | None = None
    address_line_1: str | None = None
    address_line_2: str | None = None
    address_line_3: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country_code: str | None = None

    @field_validator("province_code")
    @classmethod
    def validate_province(cls, v: str | None) -> str | None:
        return check_province(v)


class UserGroupSuggestionRequest(BaseModel):
    province_code: str
    user_group_type: UserGroupType
    name_suffix: str = ""
    exclude_id: str | None = None

    @field_validator("province_code")
    @classmethod
    def validate_province(cls, v: str | None) -> str | None:
        return check_province(v)


class UserGroupSuggestion(BaseModel):
    user_group_code: str
    base_name: str
    user_group_name: str
    infrastructure_type_code: int
