"""Staff assignment service.

Assignments are nested under their location upstream
(locations/{id}/staff[/{assignment_id}]). The API has no endpoint listing
every assignment, nor one fetching an assignment by id alone; both are
surfaced as placeholders.
"""

import logging
from typing import Any

from linc_admin.clients.linc_api import LincApiClient
from linc_admin.errors import NotImplementedFeatureError
from linc_admin.schemas.staff_assignment import StaffAssignment

log = logging.getLogger(__name__)

STAFF_LIST_ROUTE = "/dashboard/admin/staff-management"


class StaffAssignmentService:
    def __init__(self, api: LincApiClient) -> None:
        self.api = api

    async def list_all(self) -> list[StaffAssignment]:
        log.warning("Listing all staff assignments is not supported upstream; returning none")
        return []

    async def by_location(self, location_id: str) -> list[StaffAssignment]:
        data = await self.api.get(f"locations/{location_id}/staff")
        return [StaffAssignment.model_validate(item) for item in data or []]

    async def get_assignment(self, assignment_id: str) -> StaffAssignment:
        log.warning("Assignment %s requested by id; no upstream endpoint", assignment_id)
        raise NotImplementedFeatureError(
            "Assignment loading not yet implemented - requires backend endpoint",
            redirect_to=STAFF_LIST_ROUTE,
        )

    async def assign_staff(self, location_id: str, payload: dict[str, Any]) -> StaffAssignment:
        data = await self.api.post(f"locations/{location_id}/staff", payload)
        return StaffAssignment.model_validate(data)

    async def update_assignment(
        self, location_id: str, assignment_id: str, payload: dict[str, Any]
    ) -> StaffAssignment:
        data = await self.api.put(f"locations/{location_id}/staff/{assignment_id}", payload)
        return StaffAssignment.model_validate(data)

    async def remove_assignment(self, location_id: str, assignment_id: str) -> StaffAssignment | None:
        data = await self.api.delete(f"locations/{location_id}/staff/{assignment_id}")
        return StaffAssignment.model_validate(data) if data else None
