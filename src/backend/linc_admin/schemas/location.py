"""Pydantic schemas for locations and location resources."""

from pydantic import BaseModel, ConfigDict, Field

from linc_admin.schemas.common import PaginationMeta
from linc_admin.schemas.enums import (
    InfrastructureType,
    LocationScope,
    OperationalStatus,
    ResourceStatus,
    ResourceType,
)
from linc_admin.schemas.user_group import UserGroup

# ── Upstream records ──────────────────────────────────────────────────────────


class Location(BaseModel):
    """Location as returned by the LINC API (flattened address)."""

    model_config = ConfigDict(extra="allow")

    id: str
    location_code: str | None = None
    location_name: str = ""
    user_group_id: str | None = None
    infrastructure_type: str | None = None
    operational_status: str | None = None
    location_scope: str | None = None
    address_line_1: str | None = None
    address_line_2: str | None = None
    address_line_3: str | None = None
    city: str | None = None
    province_code: str | None = None
    postal_code: str | None = None
    country_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    contact_person: str | None = None
    contact_user_id: str | None = None
    phone_number: str | None = None
    email: str | None = None
    email_address: str | None = None
    max_users: int | None = None
    max_daily_capacity: int | None = None
    daily_capacity: int | None = None
    current_load: int | None = None
    is_active: bool = True


class LocationResource(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    location_id: str | None = None
    resource_name: str = ""
    resource_type: str | None = None
    status: str | None = None
    serial_number: str | None = None
    notes: str | None = None
    is_active: bool = True


class LocationStatistics(BaseModel):
    total: int
    operational: int
    provinces: int
    total_capacity: int


class LocationPage(BaseModel):
    items: list[Location]
    meta: PaginationMeta
    summary: LocationStatistics


class LocationFormContext(BaseModel):
    user_groups: list[UserGroup]
    locations: list[Location]


# ── Requests ──────────────────────────────────────────────────────────────────


class AddressFields(BaseModel):
    address_line_1: str = Field(min_length=1)
    address_line_2: str | None = None
    address_line_3: str | None = None
    city: str = Field(min_length=1)
    province_code: str = Field(min_length=1)
    postal_code: str | None = None
    country_code: str = "ZA"


class LocationFields(AddressFields):
    location_name: str = Field(min_length=1)
    infrastructure_type: InfrastructureType = InfrastructureType.FIXED_DLTC
    operational_status: OperationalStatus = OperationalStatus.OPERATIONAL
    location_scope: LocationScope = LocationScope.PROVINCIAL
    contact_person: str | None = None
    contact_user_id: str | None = None
    phone_number: str | None = None
    email_address: str | None = None
    max_users: int | None = None
    max_daily_capacity: int | None = None
    latitude: float | None = None
    longitude: float | None = None
    is_active: bool = True


class CreateLocationRequest(LocationFields):
    location_code: str = Field(min_length=1)
    user_group_id: str = Field(min_length=1)


class UpdateLocationRequest(LocationFields):
    location_code: str | None = None


class LocationCodeSuggestion(BaseModel):
    location_code: str
    province_code: str | None


class ResourceRequest(BaseModel):
    resource_name: str = Field(min_length=1)
    resource_type: ResourceType
    status: ResourceStatus = ResourceStatus.AVAILABLE
    subtype: str | None = None
    manufacturer: str | None = None
    serial_number: str | None = None
    notes: str | None = None
