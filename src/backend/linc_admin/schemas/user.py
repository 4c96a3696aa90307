"""Pydantic schemas for user management.

The LINC API has served user records in both camelCase
(personalDetails.fullName) and snake_case (personal_details.full_name).
User normalises either shape into one canonical snake_case record on
validation, so nothing past the service boundary checks both spellings.
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from linc_admin.schemas.enums import (
    AuthorityLevel,
    IDType,
    UserStatus,
    UserType,
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def normalize_keys(data: Any) -> Any:
    """Recursively rewrite camelCase dict keys to snake_case.

    When both spellings of a key are present the snake_case value wins.
    """
    if isinstance(data, list):
        return [normalize_keys(item) for item in data]
    if not isinstance(data, dict):
        return data
    out: dict[str, Any] = {}
    for key, value in data.items():
        snake = to_snake(key) if isinstance(key, str) else key
        if snake in out and snake != key:
            continue
        out[snake] = normalize_keys(value)
    return out


# ── Upstream records ──────────────────────────────────────────────────────────


class PersonalDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    id_type: str | None = None
    id_number: str | None = None
    full_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    alternative_phone: str | None = None


class GeographicAssignment(BaseModel):
    model_config = ConfigDict(extra="allow")

    country_code: str | None = None
    province_code: str | None = None
    region: str | None = None


class User(BaseModel):
    """Canonical user record."""

    model_config = ConfigDict(extra="allow")

    id: str
    username: str = ""
    user_group_code: str | None = None
    office_code: str | None = None
    user_name: str | None = None
    user_type_code: str | None = None
    personal_details: PersonalDetails = Field(default_factory=PersonalDetails)
    geographic_assignment: GeographicAssignment = Field(default_factory=GeographicAssignment)
    employee_id: str | None = None
    department: str | None = None
    job_title: str | None = None
    status: str | None = None
    authority_level: str | None = None
    is_active: bool = True
    is_superuser: bool = False
    language: str | None = None
    timezone: str | None = None
    date_format: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    last_login_at: str | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:
        data = normalize_keys(data)
        if isinstance(data, dict):
            if data.get("personal_details") is None:
                data.pop("personal_details", None)
            if data.get("geographic_assignment") is None:
                data.pop("geographic_assignment", None)
            if data.get("user_type_code") is not None:
                data["user_type_code"] = str(data["user_type_code"])
        return data

    @property
    def display_name(self) -> str:
        return self.user_name or self.personal_details.full_name or self.username


class UserRow(BaseModel):
    """A user list row with the display decorations the console shows."""

    user: User
    display_name: str
    status_color: str
    authority_level_label: str | None


class UserListResponse(BaseModel):
    users: list[UserRow]
    total: int
    page: int
    size: int
    pages: int
    has_next: bool
    has_previous: bool


class UserSession(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str | None = None
    user_group_code: str | None = None
    user_number: str | None = None
    workstation_id: str | None = None
    session_type: str | None = None
    session_start: str | None = None
    session_expiry: str | None = None
    is_active: bool = True

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:
        return normalize_keys(data)


class Office(BaseModel):
    id: str
    office_code: str
    name: str
    user_group_id: str
    is_active: bool = True


class ContactOption(BaseModel):
    id: str
    label: str


# ── Requests ──────────────────────────────────────────────────────────────────


class PersonalDetailsRequest(BaseModel):
    id_type: IDType
    id_number: str
    full_name: str
    email: str
    phone_number: str | None = None
    alternative_phone: str | None = None


class GeographicAssignmentRequest(BaseModel):
    country_code: str = "ZA"
    province_code: str
    region: str | None = None


class CreateUserRequest(BaseModel):
    user_group_code: str
    office_code: str
    user_name: str
    user_type_code: UserType = UserType.STANDARD
    username: str
    password: str
    personal_details: PersonalDetailsRequest
    geographic_assignment: GeographicAssignmentRequest
    employee_id: str | None = None
    department: str | None = None
    job_title: str | None = None
    status: UserStatus = UserStatus.ACTIVE
    is_active: bool = True
    authority_level: AuthorityLevel = AuthorityLevel.OFFICE
    role_ids: list[str] = Field(default_factory=list)
    permission_ids: list[str] = Field(default_factory=list)
    custom_privileges: dict[str, bool] | None = None
    require_password_change: bool = True
    require_2fa: bool = False
    language: str = "en"
    timezone: str = "Africa/Johannesburg"
    date_format: str = "DD/MM/YYYY"


class UpdateUserRequest(BaseModel):
    personal_details: dict[str, Any] | None = None
    employee_id: str | None = None
    department: str | None = None
    job_title: str | None = None
    province_code: str | None = None
    region: str | None = None
    user_group_code: str | None = None
    office_code: str | None = None
    language: str | None = None
    timezone: str | None = None
    date_format: str | None = None
    status: UserStatus | None = None
    is_active: bool | None = None
    role_ids: list[str] | None = None
    permission_ids: list[str] | None = None


class CreateSessionRequest(BaseModel):
    user_group_code: str
    user_number: str
    workstation_id: str
    session_type: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
