"""Staff assignment form logic."""

from typing import Any

from linc_admin.errors import ValidationError
from linc_admin.schemas.staff_assignment import (
    AssignmentFields,
    AssignStaffRequest,
    StaffAssignment,
    UpdateAssignmentRequest,
)
from linc_admin.services.staff_assignment_service import StaffAssignmentService


def validate_fields(body: AssignmentFields, location_id: str | None) -> None:
    errors: dict[str, str] = {}
    if not location_id:
        errors["location_id"] = "Please select a location"
    if body.expiry_date is not None and body.expiry_date < body.effective_date:
        errors["expiry_date"] = "Expiry date cannot be before the effective date"
    if errors:
        raise ValidationError(next(iter(errors.values())), details={"fields": errors})


def build_payload(body: AssignmentFields) -> dict[str, Any]:
    return body.model_dump(mode="json", exclude={"location_id"}, exclude_none=True)


async def submit_assign(service: StaffAssignmentService, body: AssignStaffRequest) -> StaffAssignment:
    validate_fields(body, body.location_id)
    return await service.assign_staff(body.location_id, build_payload(body))


async def submit_update(
    service: StaffAssignmentService, assignment_id: str, body: UpdateAssignmentRequest
) -> StaffAssignment:
    validate_fields(body, body.location_id)
    return await service.update_assignment(body.location_id, assignment_id, build_payload(body))
