"""Tests for the user group, location and staff assignment form flows.

Services are AsyncMocks; these tests cover suggestions, validation,
payload building and the duplicate-code re-prompt.
"""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from linc_admin.errors import (
    ConflictError,
    DuplicateCodeError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from linc_admin.forms import location_form, staff_assignment_form, user_group_form
from linc_admin.schemas.enums import UserGroupType
from linc_admin.schemas.location import CreateLocationRequest, Location, UpdateLocationRequest
from linc_admin.schemas.staff_assignment import (
    AssignStaffRequest,
    StaffAssignment,
    UpdateAssignmentRequest,
)
from linc_admin.schemas.user_group import (
    CreateUserGroupRequest,
    UpdateUserGroupRequest,
    UserGroup,
    UserGroupSuggestionRequest,
)

# ---------------------------------------------------------------------------
# User group form
# ---------------------------------------------------------------------------


def _create_group(**overrides) -> CreateUserGroupRequest:
    data = {
        "user_group_code": "WC02",
        "user_group_name": "Western Cape DLTC",
        "user_group_type": "10",
        "province_code": "WC",
        "phone_number": "0821234567",
        "email_address": "wc@linc.gov.za",
    }
    data.update(overrides)
    return CreateUserGroupRequest(**data)


class TestUserGroupSuggestion:
    def test_suggests_code_names_and_type_code(self):
        groups = [UserGroup(id="1", user_group_code="WC01")]
        request = UserGroupSuggestionRequest(
            province_code="WC", user_group_type=UserGroupType.FIXED_DLTC, name_suffix="Main Branch"
        )
        suggestion = user_group_form.suggest(request, groups)
        assert suggestion.user_group_code == "WC02"
        assert suggestion.base_name == "Western Cape DLTC"
        assert suggestion.user_group_name == "Western Cape DLTC Main Branch"
        assert suggestion.infrastructure_type_code == 10


class TestUserGroupSubmit:
    async def test_create_fills_infrastructure_type_code(self):
        service = AsyncMock()
        service.create_user_group = AsyncMock(
            return_value=UserGroup(id="9", user_group_code="WC02")
        )

        result = await user_group_form.submit_create(service, _create_group())

        assert result.id == "9"
        payload = service.create_user_group.await_args.args[0]
        assert payload["infrastructure_type_code"] == 10
        assert payload["user_group_type"] == "10"
        assert payload["registration_status"] == "2"

    async def test_invalid_fields_are_reported_together(self):
        service = AsyncMock()
        with pytest.raises(ValidationError) as exc_info:
            await user_group_form.submit_create(
                service, _create_group(phone_number="12345", email_address="nope")
            )
        assert set(exc_info.value.details["fields"]) == {"phone_number", "email_address"}
        service.create_user_group.assert_not_called()

    @pytest.mark.parametrize(
        "rejection",
        [
            ConflictError("Conflict"),
            ValidationError("User group code already exists"),
        ],
    )
    async def test_duplicate_rejection_reprompts_with_fresh_code(self, rejection):
        service = AsyncMock()
        service.create_user_group = AsyncMock(side_effect=rejection)
        service.list_all = AsyncMock(
            return_value=[
                UserGroup(id="1", user_group_code="WC01"),
                UserGroup(id="2", user_group_code="WC02"),
            ]
        )

        with pytest.raises(DuplicateCodeError) as exc_info:
            await user_group_form.submit_create(service, _create_group())

        assert exc_info.value.details == {"field": "user_group_code", "suggested_code": "WC03"}

    async def test_other_rejections_propagate(self):
        service = AsyncMock()
        service.create_user_group = AsyncMock(side_effect=ValidationError("V01002: Bad province"))
        with pytest.raises(ValidationError, match="Bad province"):
            await user_group_form.submit_create(service, _create_group())
        service.list_all.assert_not_called()

    async def test_update_recomputes_type_code_when_type_changes(self):
        service = AsyncMock()
        service.update_user_group = AsyncMock(return_value=UserGroup(id="1", user_group_code="WC01"))
        body = UpdateUserGroupRequest(user_group_name="WC Help Desk", user_group_type="30")

        await user_group_form.submit_update(service, "1", body)

        user_group_id, payload = service.update_user_group.await_args.args
        assert user_group_id == "1"
        assert payload["infrastructure_type_code"] == 30

    async def test_duplicate_code_on_edit_reprompts(self):
        service = AsyncMock()
        service.update_user_group = AsyncMock(side_effect=ConflictError("Conflict"))
        service.list_all = AsyncMock(
            return_value=[
                UserGroup(id="1", user_group_code="WC01", province_code="WC"),
                UserGroup(id="2", user_group_code="WC02", province_code="WC"),
            ]
        )
        body = UpdateUserGroupRequest(user_group_name="Western Cape DLTC", user_group_code="WC02")

        with pytest.raises(DuplicateCodeError) as exc_info:
            await user_group_form.submit_update(service, "1", body)

        assert exc_info.value.details == {"field": "user_group_code", "suggested_code": "WC01"}

    async def test_rejection_without_code_change_propagates(self):
        service = AsyncMock()
        service.update_user_group = AsyncMock(side_effect=ConflictError("Conflict"))
        body = UpdateUserGroupRequest(user_group_name="Western Cape DLTC")

        with pytest.raises(ConflictError):
            await user_group_form.submit_update(service, "1", body)
        service.list_all.assert_not_called()

    def test_update_without_address_sends_no_address(self):
        payload = user_group_form.build_update_payload(
            UpdateUserGroupRequest(user_group_name="WC DLTC", province_code="WC")
        )
        assert "address" not in payload
        assert payload["province_code"] == "WC"

    def test_bad_postal_code_on_edit(self):
        with pytest.raises(ValidationError) as exc_info:
            user_group_form.validate_fields(
                UpdateUserGroupRequest(user_group_name="WC DLTC", postal_code="80a1")
            )
        assert exc_info.value.details["fields"] == {"postal_code": "Postal code must be 4 digits"}

    def test_nested_address_is_flattened_on_read(self):
        group = UserGroup.model_validate(
            {
                "id": "1",
                "user_group_code": "WC01",
                "address": {"address_line_1": "1 Long St", "city": "Cape Town"},
            }
        )
        assert group.address_line_1 == "1 Long St"
        assert group.city == "Cape Town"

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            user_group_form.validate_fields(UpdateUserGroupRequest(user_group_name="  "))
        assert exc_info.value.details["fields"] == {"user_group_name": "User group name is required"}

    def test_duplicate_detection(self):
        assert user_group_form.is_duplicate_rejection(ValidationError("Code must be UNIQUE"))
        assert not user_group_form.is_duplicate_rejection(UpstreamError("duplicate"))


# ---------------------------------------------------------------------------
# Location form
# ---------------------------------------------------------------------------


def _create_location(**overrides) -> CreateLocationRequest:
    data = {
        "location_code": "WC01L002",
        "user_group_id": "g1",
        "location_name": "Cape Town Main",
        "address_line_1": "1 Long Street",
        "city": "Cape Town",
        "province_code": "WC",
        "postal_code": "8001",
    }
    data.update(overrides)
    return CreateLocationRequest(**data)


def _location_services(groups=None, locations=None):
    user_groups = AsyncMock()
    user_groups.list_all = AsyncMock(
        return_value=groups
        if groups is not None
        else [UserGroup(id="g1", user_group_code="WC01", province_code="WC")]
    )
    location_service = AsyncMock()
    location_service.list_all = AsyncMock(
        return_value=locations
        if locations is not None
        else [Location(id="l1", location_code="WC01L001")]
    )
    return user_groups, location_service


class TestLocationForm:
    async def test_code_suggestion_follows_user_group(self):
        user_groups, locations = _location_services()
        context = await location_form.load_context(user_groups, locations)
        suggestion = location_form.suggest_code(context, "g1")
        assert suggestion.location_code == "WC01L002"
        assert suggestion.province_code == "WC"

    async def test_unknown_user_group(self):
        user_groups, locations = _location_services()
        context = await location_form.load_context(user_groups, locations)
        with pytest.raises(NotFoundError):
            location_form.suggest_code(context, "missing")

    def test_payload_nests_address(self):
        payload = location_form.build_payload(_create_location())
        assert payload["address"] == {
            "address_line_1": "1 Long Street",
            "city": "Cape Town",
            "province_code": "WC",
            "postal_code": "8001",
            "country_code": "ZA",
        }
        assert "city" not in payload
        assert payload["location_code"] == "WC01L002"
        assert payload["infrastructure_type"] == "10"
        assert payload["operational_status"] == "operational"

    def test_validation_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            location_form.validate_fields(
                _create_location(postal_code="80", max_users=-1, phone_number="021")
            )
        assert set(exc_info.value.details["fields"]) == {"postal_code", "max_users", "phone_number"}

    async def test_duplicate_location_code_reprompts(self):
        user_groups, locations = _location_services(
            locations=[
                Location(id="l1", location_code="WC01L001"),
                Location(id="l2", location_code="WC01L002"),
            ]
        )
        locations.create_location = AsyncMock(side_effect=ConflictError("Location code exists"))

        with pytest.raises(DuplicateCodeError) as exc_info:
            await location_form.submit_create(locations, user_groups, _create_location())

        assert exc_info.value.details == {"field": "location_code", "suggested_code": "WC01L003"}

    async def test_update(self):
        locations = AsyncMock()
        locations.update_location = AsyncMock(return_value=Location(id="l1"))
        body = UpdateLocationRequest(
            location_name="Cape Town Main",
            address_line_1="2 Long Street",
            city="Cape Town",
            province_code="WC",
        )
        await location_form.submit_update(locations, "l1", body)
        location_id, payload = locations.update_location.await_args.args
        assert location_id == "l1"
        assert payload["address"]["address_line_1"] == "2 Long Street"


# ---------------------------------------------------------------------------
# Staff assignment form
# ---------------------------------------------------------------------------


class TestStaffAssignmentForm:
    async def test_location_is_required(self):
        service = AsyncMock()
        with pytest.raises(ValidationError, match="Please select a location"):
            await staff_assignment_form.submit_assign(service, AssignStaffRequest(user_id="u1"))
        service.assign_staff.assert_not_called()

    def test_expiry_before_effective_date(self):
        body = UpdateAssignmentRequest(
            location_id="l1", effective_date=date(2024, 5, 1), expiry_date=date(2024, 4, 1)
        )
        with pytest.raises(ValidationError, match="Expiry date cannot be before"):
            staff_assignment_form.validate_fields(body, body.location_id)

    async def test_assign_posts_to_location(self):
        service = AsyncMock()
        service.assign_staff = AsyncMock(
            return_value=StaffAssignment(id="a1", user_id="u1", location_id="l1")
        )
        body = AssignStaffRequest(location_id="l1", user_id="u1", effective_date=date(2024, 5, 1))

        await staff_assignment_form.submit_assign(service, body)

        location_id, payload = service.assign_staff.await_args.args
        assert location_id == "l1"
        assert "location_id" not in payload
        assert payload["user_id"] == "u1"
        assert payload["assignment_type"] == "PRIMARY"
        assert payload["effective_date"] == "2024-05-01"
        assert payload["can_view_reports"] is True

    async def test_update_uses_body_location(self):
        service = AsyncMock()
        service.update_assignment = AsyncMock(
            return_value=StaffAssignment(id="a1", user_id="u1", location_id="l2")
        )
        body = UpdateAssignmentRequest(location_id="l2", notes="moved")
        await staff_assignment_form.submit_update(service, "a1", body)
        location_id, assignment_id, payload = service.update_assignment.await_args.args
        assert (location_id, assignment_id) == ("l2", "a1")
        assert payload["notes"] == "moved"
