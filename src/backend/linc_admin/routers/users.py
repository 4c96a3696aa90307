"""User management endpoints.

GET    /api/v1/users                              server-paginated list rows
GET    /api/v1/users/statistics
GET    /api/v1/users/search?q=&limit=
GET    /api/v1/users/contact-options?q=           autocomplete labels for contact pickers
POST   /api/v1/users/contact-selection            pick (or clear) a contact user
GET    /api/v1/users/validate/username?username=
GET    /api/v1/users/validate/email?email=
GET    /api/v1/users/generate-username?user_group_code=
GET    /api/v1/users/wizard/steps
POST   /api/v1/users/wizard/next
POST   /api/v1/users/wizard/back
POST   /api/v1/users/wizard/privileges
POST   /api/v1/users/wizard/submit                creates the user
DELETE /api/v1/users/sessions/{session_id}
GET    /api/v1/users/{id}
GET    /api/v1/users/{id}/wizard                  wizard state prefilled from the user
POST   /api/v1/users
PUT    /api/v1/users/{id}
DELETE /api/v1/users/{id}?soft_delete=
POST   /api/v1/users/{id}/sessions
GET    /api/v1/users/{id}/sessions?active_only=
WS     /api/v1/users/search/live                  debounced search, token via ?token= or header
"""

import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel

from linc_admin.auth.dependencies import require_role
from linc_admin.auth.jwt import verify_token
from linc_admin.auth.permissions import has_role
from linc_admin.clients.dependencies import get_api_client, get_http_client
from linc_admin.clients.linc_api import LincApiClient
from linc_admin.config import settings
from linc_admin.errors import LincAdminError, UnauthorizedError
from linc_admin.forms.contact import ContactFields, format_user_option, select_contact
from linc_admin.forms.search import DebouncedSearch, SearchResult
from linc_admin.forms.user_wizard import (
    WIZARD_STEPS,
    UserWizard,
    WizardForm,
    WizardState,
    generate_username,
)
from linc_admin.schemas.enums import UserStatus
from linc_admin.schemas.user import (
    ContactOption,
    CreateSessionRequest,
    CreateUserRequest,
    UpdateUserRequest,
    User,
    UserListResponse,
    UserSession,
)
from linc_admin.schemas.wizard import (
    PrivilegeChange,
    PrivilegeResult,
    WizardStepInfo,
    WizardTransition,
)
from linc_admin.services.user_service import UserService

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
    dependencies=[Depends(require_role(settings.ADMIN_ROLE))],
)

# WebSockets cannot go through HTTPBearer; the live search authenticates itself.
live_router = APIRouter(prefix="/api/v1/users", tags=["users"])


def _service(api: LincApiClient = Depends(get_api_client)) -> UserService:
    return UserService(api)


class ContactSelection(BaseModel):
    user_id: str | None = None


# ── Listing, search and validation ────────────────────────────────────────────


@router.get("", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=1000),
    search: str | None = None,
    status_filter: UserStatus | None = Query(None, alias="status"),
    user_type_code: str | None = None,
    user_group_code: str | None = None,
    province_code: str | None = None,
    svc: UserService = Depends(_service),
) -> UserListResponse:
    filters = {
        "search": search,
        "status": status_filter,
        "user_type_code": user_type_code,
        "user_group_code": user_group_code,
        "province_code": province_code,
    }
    return await svc.list_users(page=page, size=size, filters=filters)


@router.get("/statistics")
async def user_statistics(svc: UserService = Depends(_service)) -> dict[str, Any]:
    return await svc.statistics()


@router.get("/search", response_model=list[User])
async def search_users(
    q: str = Query(..., min_length=1),
    limit: int | None = Query(None, ge=1, le=200),
    svc: UserService = Depends(_service),
) -> list[User]:
    return await svc.search_users(q, limit)


@router.get("/contact-options", response_model=list[ContactOption])
async def contact_options(
    q: str = "",
    svc: UserService = Depends(_service),
) -> list[ContactOption]:
    if len(q.strip()) < settings.USER_SEARCH_MIN_LENGTH:
        return []
    users = await svc.search_users(q.strip())
    return [ContactOption(id=u.id, label=format_user_option(u)) for u in users]


@router.post("/contact-selection", response_model=ContactFields)
async def contact_selection(
    body: ContactSelection, svc: UserService = Depends(_service)
) -> ContactFields:
    user = await svc.get_user(body.user_id) if body.user_id else None
    return select_contact(user)


@router.get("/validate/username")
async def validate_username(
    username: str = Query(..., min_length=1), svc: UserService = Depends(_service)
) -> dict[str, Any]:
    return await svc.validate_username(username)


@router.get("/validate/email")
async def validate_email(
    email: str = Query(..., min_length=1), svc: UserService = Depends(_service)
) -> dict[str, Any]:
    return await svc.validate_email(email)


@router.get("/generate-username")
async def suggest_username(
    user_group_code: str = "", svc: UserService = Depends(_service)
) -> dict[str, str]:
    return {"username": await generate_username(svc, user_group_code)}


# ── Creation wizard ───────────────────────────────────────────────────────────


def _transition(wizard: UserWizard, errors: dict[str, str] | None = None) -> WizardTransition:
    return WizardTransition(
        state=wizard.state, step=WizardStepInfo.at(wizard.state.step), errors=errors or {}
    )


@router.get("/wizard/steps", response_model=list[WizardStepInfo])
async def wizard_steps() -> list[WizardStepInfo]:
    return [WizardStepInfo.at(index) for index in range(len(WIZARD_STEPS))]


@router.post("/wizard/next", response_model=WizardTransition)
async def wizard_next(state: WizardState) -> WizardTransition:
    wizard = UserWizard(state)
    errors = wizard.next()
    return _transition(wizard, errors)


@router.post("/wizard/back", response_model=WizardTransition)
async def wizard_back(state: WizardState) -> WizardTransition:
    wizard = UserWizard(state)
    wizard.back()
    return _transition(wizard)


@router.post("/wizard/privileges", response_model=PrivilegeResult)
async def wizard_privileges(body: PrivilegeChange) -> PrivilegeResult:
    wizard = UserWizard(body.state)
    if body.privilege is not None and body.value is not None:
        wizard.set_privilege(body.privilege, body.value)
    preserved: list[str] = []
    if body.user_type_code is not None:
        preserved = wizard.change_user_type(body.user_type_code)
    if body.reset:
        wizard.reset_privileges()
    return PrivilegeResult(state=wizard.state, preserved_overrides=preserved)


@router.post("/wizard/submit", response_model=User, status_code=status.HTTP_201_CREATED)
async def wizard_submit(state: WizardState, svc: UserService = Depends(_service)) -> User:
    payload = UserWizard(state).submit()
    user = await svc.create_user(payload)
    log.info("Created user %s in group %s", user.username, user.user_group_code)
    return user


# ── Sessions (static path before /{user_id}) ──────────────────────────────────


@router.delete("/sessions/{session_id}")
async def end_session(session_id: str, svc: UserService = Depends(_service)) -> dict[str, Any]:
    return await svc.end_session(session_id) or {}


# ── Users ─────────────────────────────────────────────────────────────────────


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: str, svc: UserService = Depends(_service)) -> User:
    return await svc.get_user(user_id)


@router.get("/{user_id}/wizard", response_model=WizardState)
async def user_wizard_state(user_id: str, svc: UserService = Depends(_service)) -> WizardState:
    return WizardState(form=WizardForm.from_user(await svc.get_user(user_id)))


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(body: CreateUserRequest, svc: UserService = Depends(_service)) -> User:
    return await svc.create_user(body.model_dump(mode="json", exclude_none=True))


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: str, body: UpdateUserRequest, svc: UserService = Depends(_service)
) -> User:
    return await svc.update_user(user_id, body.model_dump(mode="json", exclude_none=True))


@router.delete("/{user_id}", response_model=User | None)
async def delete_user(
    user_id: str, soft_delete: bool = True, svc: UserService = Depends(_service)
) -> User | None:
    return await svc.delete_user(user_id, soft_delete=soft_delete)


@router.post(
    "/{user_id}/sessions", response_model=UserSession, status_code=status.HTTP_201_CREATED
)
async def create_session(
    user_id: str, body: CreateSessionRequest, svc: UserService = Depends(_service)
) -> UserSession:
    return await svc.create_session(user_id, body.model_dump(mode="json", exclude_none=True))


@router.get("/{user_id}/sessions", response_model=list[UserSession])
async def list_sessions(
    user_id: str, active_only: bool = True, svc: UserService = Depends(_service)
) -> list[UserSession]:
    return await svc.list_sessions(user_id, active_only=active_only)


# ── Live search ───────────────────────────────────────────────────────────────


def _websocket_token(websocket: WebSocket, token: str | None) -> str | None:
    if token:
        return token
    header = websocket.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    return credentials if scheme.lower() == "bearer" and credentials else None


@live_router.websocket("/search/live")
async def live_user_search(
    websocket: WebSocket,
    token: str | None = None,
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> None:
    """Client sends {"query": "..."}; server pushes SearchResult messages.

    Only the response for the latest query is pushed; responses that arrive
    after a newer query was sent are dropped.
    """
    bearer = _websocket_token(websocket, token)
    try:
        if bearer is None:
            raise UnauthorizedError("Missing Bearer token")
        claims = verify_token(bearer)
    except LincAdminError as exc:
        log.warning("Live search rejected: %s", exc.message)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    if not has_role(claims, settings.ADMIN_ROLE):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    users = UserService(LincApiClient(http_client, settings.api_root, bearer))

    async def deliver(result: SearchResult) -> None:
        await websocket.send_json(result.model_dump(mode="json"))

    search = DebouncedSearch(
        fetch=users.search_users,
        on_results=deliver,
        delay=settings.USER_SEARCH_DEBOUNCE_MS / 1000,
        min_length=settings.USER_SEARCH_MIN_LENGTH,
    )
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                log.debug("Ignoring non-JSON live search frame")
                continue
            query = message.get("query", "") if isinstance(message, dict) else ""
            await search.submit(str(query))
    except WebSocketDisconnect:
        log.debug("Live search client disconnected")
    finally:
        await search.aclose()
