"""Pydantic schemas for staff (user ↔ location) assignments."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from linc_admin.schemas.enums import AssignmentStatus, AssignmentType


class StaffAssignment(BaseModel):
    """UserLocationAssignment as returned by the LINC API."""

    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str
    location_id: str
    assignment_type: str | None = None
    assignment_status: str | None = None
    effective_date: str | None = None
    expiry_date: str | None = None
    access_level: str | None = None
    can_manage_location: bool = False
    can_assign_others: bool = False
    can_view_reports: bool = False
    can_manage_resources: bool = False
    work_schedule: str | None = None
    responsibilities: str | None = None
    assignment_reason: str | None = None
    notes: str | None = None
    user_username: str | None = None
    user_full_name: str | None = None
    user_email: str | None = None
    is_active: bool = True


class AssignmentFields(BaseModel):
    assignment_type: AssignmentType = AssignmentType.PRIMARY
    assignment_status: AssignmentStatus = AssignmentStatus.ACTIVE
    effective_date: date = Field(default_factory=date.today)
    expiry_date: date | None = None
    access_level: str = "Standard"
    can_manage_location: bool = False
    can_assign_others: bool = False
    can_view_reports: bool = True
    can_manage_resources: bool = False
    work_schedule: str | None = None
    responsibilities: str | None = None
    assignment_reason: str | None = None
    notes: str | None = None
    is_active: bool = True


class AssignStaffRequest(AssignmentFields):
    location_id: str | None = None
    user_id: str = Field(min_length=1)


class UpdateAssignmentRequest(AssignmentFields):
    location_id: str = Field(min_length=1)
