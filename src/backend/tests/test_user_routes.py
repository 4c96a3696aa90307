"""Tests for the user, staff assignment and lookup endpoints, including the
wizard transitions and the live search WebSocket.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from starlette.websockets import WebSocketDisconnect

from linc_admin.auth.jwt import build_claims, create_token
from linc_admin.clients.dependencies import get_http_client
from linc_admin.config import settings
from linc_admin.errors import UpstreamUnavailableError, ValidationError
from linc_admin.main import app
from linc_admin.routers import lookups, staff_assignments, users
from linc_admin.schemas.enums import UserStatus
from linc_admin.schemas.staff_assignment import StaffAssignment
from linc_admin.schemas.user import User, UserListResponse
from linc_admin.services.user_service import UserService

# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


def _jane() -> User:
    return User.model_validate(
        {
            "id": "u1",
            "username": "WC01001",
            "personalDetails": {
                "fullName": "Jane Doe",
                "email": "jane@linc.gov.za",
                "phoneNumber": "0821234567",
            },
        }
    )


def _token(roles: list[str] | None = None) -> str:
    return create_token(build_claims(sub="alice", roles=roles or ["admin"]))


VALID_FORM = {
    "full_name": "Jane Doe",
    "email": "jane@linc.gov.za",
    "id_type": "02",
    "id_number": "8001015009087",
    "user_group_code": "WC01",
    "office_code": "A",
    "user_type_code": "1",
    "province_code": "WC",
    "username": "WC01003",
    "password": "Secret123",
    "confirm_password": "Secret123",
}


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client(admin_headers):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test", headers=admin_headers
    ) as ac:
        yield ac


@pytest.fixture
def user_service():
    service = AsyncMock()
    app.dependency_overrides[users._service] = lambda: service
    return service


@pytest.fixture
def staff_service():
    service = AsyncMock()
    app.dependency_overrides[staff_assignments._service] = lambda: service
    return service


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class TestUserRoutes:
    async def test_list_passes_filters(self, client, user_service):
        user_service.list_users = AsyncMock(
            return_value=UserListResponse(
                users=[], total=0, page=1, size=20, pages=0, has_next=False, has_previous=False
            )
        )
        response = await client.get(
            "/api/v1/users", params={"status": "SUSPENDED", "user_group_code": "WC01"}
        )

        assert response.status_code == 200
        kwargs = user_service.list_users.await_args.kwargs
        assert kwargs["page"] == 1
        assert kwargs["size"] == 20
        assert kwargs["filters"]["status"] == UserStatus.SUSPENDED
        assert kwargs["filters"]["user_group_code"] == "WC01"

    async def test_contact_options_need_two_characters(self, client, user_service):
        response = await client.get("/api/v1/users/contact-options", params={"q": "j"})
        assert response.json() == []
        user_service.search_users.assert_not_called()

    async def test_contact_options_labels(self, client, user_service):
        user_service.search_users = AsyncMock(return_value=[_jane()])
        response = await client.get("/api/v1/users/contact-options", params={"q": "jane"})
        assert response.json() == [
            {"id": "u1", "label": "Jane Doe (WC01001) - jane@linc.gov.za"}
        ]

    async def test_contact_selection_and_clear(self, client, user_service):
        user_service.get_user = AsyncMock(return_value=_jane())

        selected = await client.post("/api/v1/users/contact-selection", json={"user_id": "u1"})
        cleared = await client.post("/api/v1/users/contact-selection", json={})

        assert selected.json() == {
            "contact_user_id": "u1",
            "contact_person": "Jane Doe",
            "email_address": "jane@linc.gov.za",
            "phone_number": "0821234567",
            "read_only": True,
        }
        assert cleared.json()["read_only"] is False
        assert cleared.json()["contact_person"] == ""

    async def test_generate_username(self, client, user_service):
        user_service.usernames_in_group = AsyncMock(return_value=["WC01001"])
        user_service.validate_username = AsyncMock(return_value={"available": True})
        response = await client.get(
            "/api/v1/users/generate-username", params={"user_group_code": "WC01"}
        )
        assert response.json() == {"username": "WC01002"}

    async def test_create_omits_unset_fields(self, client, user_service):
        user_service.create_user = AsyncMock(return_value=_jane())
        response = await client.post(
            "/api/v1/users",
            json={
                "user_group_code": "WC01",
                "office_code": "A",
                "user_name": "Jane Doe",
                "username": "WC01001",
                "password": "Secret123",
                "personal_details": {
                    "id_type": "02",
                    "id_number": "8001015009087",
                    "full_name": "Jane Doe",
                    "email": "jane@linc.gov.za",
                },
                "geographic_assignment": {"province_code": "WC"},
            },
        )
        assert response.status_code == 201
        payload = user_service.create_user.await_args.args[0]
        assert "custom_privileges" not in payload
        assert payload["user_type_code"] == "1"
        assert payload["geographic_assignment"] == {"country_code": "ZA", "province_code": "WC"}

    async def test_upstream_validation_code_is_surfaced(self, client, user_service):
        user_service.update_user = AsyncMock(
            side_effect=ValidationError("V06004: Email must be unique", validation_code="V06004")
        )
        response = await client.put("/api/v1/users/u1", json={"status": "SUSPENDED"})
        assert response.status_code == 422
        assert response.json()["error"]["details"]["validation_code"] == "V06004"
        assert user_service.update_user.await_args.args == ("u1", {"status": "SUSPENDED"})

    async def test_delete_defaults_to_soft(self, client, user_service):
        user_service.delete_user = AsyncMock(return_value=None)
        response = await client.delete("/api/v1/users/u1")
        assert response.status_code == 200
        user_service.delete_user.assert_awaited_once_with("u1", soft_delete=True)

    async def test_sessions(self, client, user_service):
        user_service.list_sessions = AsyncMock(return_value=[])
        user_service.end_session = AsyncMock(return_value={"message": "ended"})

        listed = await client.get("/api/v1/users/u1/sessions", params={"active_only": "false"})
        ended = await client.delete("/api/v1/users/sessions/s1")

        assert listed.json() == []
        user_service.list_sessions.assert_awaited_once_with("u1", active_only=False)
        assert ended.json() == {"message": "ended"}
        user_service.end_session.assert_awaited_once_with("s1")

    async def test_upstream_down_is_503(self, client, user_service):
        user_service.statistics = AsyncMock(
            side_effect=UpstreamUnavailableError("LINC API is unavailable")
        )
        response = await client.get("/api/v1/users/statistics")
        assert response.status_code == 503
        assert response.json()["error"]["code"] == "UPSTREAM_UNAVAILABLE"


# ---------------------------------------------------------------------------
# Wizard
# ---------------------------------------------------------------------------


class TestWizardRoutes:
    async def test_steps(self, client):
        response = await client.get("/api/v1/users/wizard/steps")
        steps = response.json()
        assert [s["key"] for s in steps] == ["basic", "work", "security", "privileges", "review"]
        assert steps[0]["fields"][0] == "full_name"

    async def test_next_with_errors_stays(self, client):
        response = await client.post("/api/v1/users/wizard/next", json={})
        body = response.json()
        assert body["state"]["step"] == 0
        assert body["step"]["key"] == "basic"
        assert body["errors"]["full_name"] == "Full name is required"

    async def test_next_advances(self, client):
        response = await client.post("/api/v1/users/wizard/next", json={"form": VALID_FORM})
        body = response.json()
        assert body["errors"] == {}
        assert body["state"]["step"] == 1
        assert body["step"]["title"] == "Work Assignment"

    async def test_back(self, client):
        response = await client.post("/api/v1/users/wizard/back", json={"step": 3})
        assert response.json()["state"]["step"] == 2

    async def test_privileges_keep_overrides(self, client):
        first = await client.post(
            "/api/v1/users/wizard/privileges",
            json={"state": {}, "privilege": "user_management", "value": True},
        )
        state = first.json()["state"]
        second = await client.post(
            "/api/v1/users/wizard/privileges",
            json={"state": state, "user_type_code": "2"},
        )
        body = second.json()
        assert body["preserved_overrides"] == ["user_management"]
        assert body["state"]["privileges"]["values"]["user_management"] is True
        assert body["state"]["privileges"]["values"]["data_entry"] is False

    async def test_unknown_privilege(self, client):
        response = await client.post(
            "/api/v1/users/wizard/privileges",
            json={"state": {}, "privilege": "root", "value": True},
        )
        assert response.status_code == 422

    async def test_submit_creates_user(self, client, user_service):
        user_service.create_user = AsyncMock(return_value=_jane())
        response = await client.post(
            "/api/v1/users/wizard/submit", json={"step": 4, "form": VALID_FORM}
        )
        assert response.status_code == 201
        payload = user_service.create_user.await_args.args[0]
        assert payload["username"] == "WC01003"
        assert payload["personal_details"]["id_number"] == "8001015009087"

    async def test_submit_from_early_step_is_refused(self, client, user_service):
        response = await client.post(
            "/api/v1/users/wizard/submit", json={"step": 1, "form": VALID_FORM}
        )
        assert response.status_code == 422
        user_service.create_user.assert_not_called()

    async def test_prefill_from_existing_user(self, client, user_service):
        user_service.get_user = AsyncMock(return_value=_jane())
        response = await client.get("/api/v1/users/u1/wizard")
        body = response.json()
        assert body["step"] == 0
        assert body["form"]["full_name"] == "Jane Doe"
        assert body["form"]["username"] == "WC01001"


# ---------------------------------------------------------------------------
# Staff assignments
# ---------------------------------------------------------------------------


class TestStaffAssignmentRoutes:
    async def test_list_by_location(self, client, staff_service):
        staff_service.by_location = AsyncMock(
            return_value=[StaffAssignment(id="a1", user_id="u1", location_id="l1")]
        )
        response = await client.get("/api/v1/staff-assignments", params={"location": "l1"})
        assert [a["id"] for a in response.json()] == ["a1"]
        staff_service.by_location.assert_awaited_once_with("l1")

    async def test_list_without_location_is_placeholder(self, client, staff_service):
        staff_service.list_all = AsyncMock(return_value=[])
        response = await client.get("/api/v1/staff-assignments")
        assert response.json() == []
        staff_service.by_location.assert_not_called()

    async def test_get_by_id_is_not_implemented(self, client):
        app.dependency_overrides[staff_assignments._service] = lambda: _real_staff_service()
        response = await client.get("/api/v1/staff-assignments/a1")
        assert response.status_code == 501
        assert response.json()["error"]["details"]["redirect_to"] == (
            "/dashboard/admin/staff-management"
        )

    async def test_assign_requires_location(self, client, staff_service):
        response = await client.post("/api/v1/staff-assignments", json={"user_id": "u1"})
        assert response.status_code == 422
        assert response.json()["error"]["message"] == "Please select a location"

    async def test_remove(self, client, staff_service):
        staff_service.remove_assignment = AsyncMock(return_value=None)
        response = await client.delete(
            "/api/v1/staff-assignments/a1", params={"location_id": "l1"}
        )
        assert response.status_code == 200
        staff_service.remove_assignment.assert_awaited_once_with("l1", "a1")


def _real_staff_service():
    from linc_admin.services.staff_assignment_service import StaffAssignmentService

    return StaffAssignmentService(AsyncMock())


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class TestLookupRoutes:
    async def test_any_signed_in_user_may_read(self):
        service = AsyncMock()
        service.provinces = AsyncMock(return_value=[{"code": "WC", "name": "Western Cape"}])
        app.dependency_overrides[lookups._service] = lambda: service
        headers = {"Authorization": f"Bearer {_token(['clerk'])}"}
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test", headers=headers
        ) as ac:
            response = await ac.get("/api/v1/lookups/provinces")
        assert response.status_code == 200
        assert response.json()[0]["code"] == "WC"

    async def test_provinces_fall_back_when_upstream_fails(self, client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"detail": "boom"})

        upstream = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        app.dependency_overrides[get_http_client] = lambda: upstream
        response = await client.get("/api/v1/lookups/provinces")
        await upstream.aclose()

        assert response.status_code == 200
        assert {"code": "WC", "name": "Western Cape"} in response.json()

    async def test_format_phone(self, client):
        response = await client.post(
            "/api/v1/lookups/format-phone",
            json={"label": "Cell", "country_code": "+27", "phone_number": "821234567"},
        )
        assert response.json() == {
            "formatted": "+27 82 123 4567",
            "display": "Cell: +27 82 123 4567",
        }


# ---------------------------------------------------------------------------
# Live search WebSocket
# ---------------------------------------------------------------------------


class TestLiveSearch:
    def test_rejects_missing_token(self):
        with TestClient(app) as tc:
            with pytest.raises(WebSocketDisconnect) as exc_info:
                with tc.websocket_connect("/api/v1/users/search/live"):
                    pass
        assert exc_info.value.code == 1008

    def test_rejects_non_admin(self):
        token = _token(["clerk"])
        with TestClient(app) as tc:
            with pytest.raises(WebSocketDisconnect):
                with tc.websocket_connect(f"/api/v1/users/search/live?token={token}"):
                    pass

    def test_pushes_results_for_latest_query(self, monkeypatch):
        monkeypatch.setattr(settings, "USER_SEARCH_DEBOUNCE_MS", 0)
        search = AsyncMock(return_value=[_jane()])
        token = _token()

        with patch.object(UserService, "search_users", search), TestClient(app) as tc:
            with tc.websocket_connect(f"/api/v1/users/search/live?token={token}") as ws:
                ws.send_json({"query": "j"})
                short = ws.receive_json()
                ws.send_json({"query": "jane"})
                found = ws.receive_json()

        assert short["searched"] is False
        assert short["users"] == []
        assert found["searched"] is True
        assert found["query"] == "jane"
        assert found["users"][0]["username"] == "WC01001"
        search.assert_awaited_once_with("jane")

    def test_ignores_frames_that_are_not_json(self, monkeypatch):
        monkeypatch.setattr(settings, "USER_SEARCH_DEBOUNCE_MS", 0)
        search = AsyncMock(return_value=[_jane()])
        token = _token()

        with patch.object(UserService, "search_users", search), TestClient(app) as tc:
            with tc.websocket_connect(f"/api/v1/users/search/live?token={token}") as ws:
                ws.send_text("not json")
                ws.send_json({"query": "jane"})
                found = ws.receive_json()

        assert found["searched"] is True
        assert found["users"][0]["username"] == "WC01001"
