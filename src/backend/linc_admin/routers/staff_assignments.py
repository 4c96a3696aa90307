"""Staff assignment endpoints.

GET    /api/v1/staff-assignments?location=<id>    assignments at a location
GET    /api/v1/staff-assignments/{id}             not available upstream (501)
POST   /api/v1/staff-assignments                  assign a user to a location
PUT    /api/v1/staff-assignments/{id}             update (body carries location_id)
DELETE /api/v1/staff-assignments/{id}?location_id=

Without ?location the list is empty: there is no upstream endpoint listing
every assignment.
"""

from fastapi import APIRouter, Depends, Query, status

from linc_admin.auth.dependencies import require_role
from linc_admin.clients.dependencies import get_api_client
from linc_admin.clients.linc_api import LincApiClient
from linc_admin.config import settings
from linc_admin.forms import staff_assignment_form
from linc_admin.schemas.staff_assignment import (
    AssignStaffRequest,
    StaffAssignment,
    UpdateAssignmentRequest,
)
from linc_admin.services.staff_assignment_service import StaffAssignmentService

router = APIRouter(
    prefix="/api/v1/staff-assignments",
    tags=["staff-assignments"],
    dependencies=[Depends(require_role(settings.ADMIN_ROLE))],
)


def _service(api: LincApiClient = Depends(get_api_client)) -> StaffAssignmentService:
    return StaffAssignmentService(api)


@router.get("", response_model=list[StaffAssignment])
async def list_staff_assignments(
    location: str | None = None,
    svc: StaffAssignmentService = Depends(_service),
) -> list[StaffAssignment]:
    if location:
        return await svc.by_location(location)
    return await svc.list_all()


@router.get("/{assignment_id}", response_model=StaffAssignment)
async def get_staff_assignment(
    assignment_id: str, svc: StaffAssignmentService = Depends(_service)
) -> StaffAssignment:
    return await svc.get_assignment(assignment_id)


@router.post("", response_model=StaffAssignment, status_code=status.HTTP_201_CREATED)
async def assign_staff(
    body: AssignStaffRequest, svc: StaffAssignmentService = Depends(_service)
) -> StaffAssignment:
    return await staff_assignment_form.submit_assign(svc, body)


@router.put("/{assignment_id}", response_model=StaffAssignment)
async def update_staff_assignment(
    assignment_id: str,
    body: UpdateAssignmentRequest,
    svc: StaffAssignmentService = Depends(_service),
) -> StaffAssignment:
    return await staff_assignment_form.submit_update(svc, assignment_id, body)


@router.delete("/{assignment_id}", response_model=StaffAssignment | None)
async def remove_staff_assignment(
    assignment_id: str,
    location_id: str = Query(..., min_length=1),
    svc: StaffAssignmentService = Depends(_service),
) -> StaffAssignment | None:
    return await svc.remove_assignment(location_id, assignment_id)
