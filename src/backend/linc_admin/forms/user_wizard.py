"""Five-step user creation wizard.

Steps are declared in WIZARD_STEPS and only list field names; every field's
rule lives in FIELD_VALIDATORS. The wizard itself is stateless on the
server: WizardState travels with each request and UserWizard applies one
transition to it.

  next()    validates the current step and advances only when it passes
  back()    always allowed, never below step 0
  submit()  only from the last step, after validating every step

Privileges default per user type. Any privilege the operator sets by hand
is remembered as an override and survives later user type changes.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from linc_admin.config import settings
from linc_admin.errors import CodeSpaceExhaustedError, ValidationError
from linc_admin.forms import codes
from linc_admin.forms.validation import EMAIL_RE, validate_id_number
from linc_admin.schemas.enums import AuthorityLevel, UserStatus, UserType
from linc_admin.schemas.user import User
from linc_admin.services.user_service import UserService

PRIVILEGE_KEYS = (
    "user_management",
    "report_access",
    "system_configuration",
    "data_entry",
    "approval_rights",
    "location_access",
)

_GRANTED_BY_TYPE: dict[UserType, frozenset[str]] = {
    UserType.ADMIN: frozenset(PRIVILEGE_KEYS),
    UserType.SUPERVISOR: frozenset(
        {"report_access", "data_entry", "approval_rights", "location_access"}
    ),
    UserType.EXAMINER: frozenset({"report_access", "data_entry", "location_access"}),
    UserType.SYSTEM: frozenset({"report_access"}),
    UserType.STANDARD: frozenset({"report_access", "data_entry", "location_access"}),
}


def default_privileges(user_type_code: str) -> dict[str, bool]:
    try:
        granted = _GRANTED_BY_TYPE[UserType(user_type_code)]
    except ValueError:
        granted = _GRANTED_BY_TYPE[UserType.STANDARD]
    return {key: key in granted for key in PRIVILEGE_KEYS}


# ── State ─────────────────────────────────────────────────────────────────────


class WizardForm(BaseModel):
    # Basic information
    full_name: str = ""
    email: str = ""
    phone_number: str = ""
    alternative_phone: str = ""
    id_type: str = ""
    id_number: str = ""
    # Work assignment
    user_group_code: str = ""
    office_code: str = ""
    user_type_code: str = UserType.STANDARD.value
    country_code: str = Field(default_factory=lambda: settings.DEFAULT_COUNTRY_CODE)
    province_code: str = ""
    region: str = ""
    employee_id: str = ""
    department: str = ""
    job_title: str = ""
    infrastructure_number: str = ""
    # Security
    username: str = ""
    password: str = ""
    confirm_password: str = ""
    status: str = UserStatus.ACTIVE.value
    is_active: bool = True
    require_password_change: bool = True
    require_2fa: bool = False
    # Privileges
    authority_level: str = AuthorityLevel.OFFICE.value
    # Settings
    language: str = "en"
    timezone: str = "Africa/Johannesburg"
    date_format: str = "DD/MM/YYYY"

    @classmethod
    def from_user(cls, user: User) -> "WizardForm":
        details = user.personal_details
        geo = user.geographic_assignment
        return cls(
            full_name=details.full_name or "",
            email=details.email or "",
            phone_number=details.phone_number or "",
            alternative_phone=details.alternative_phone or "",
            id_type=details.id_type or "",
            id_number=details.id_number or "",
            user_group_code=user.user_group_code or "",
            office_code=user.office_code or "",
            user_type_code=user.user_type_code or UserType.STANDARD.value,
            country_code=geo.country_code or settings.DEFAULT_COUNTRY_CODE,
            province_code=geo.province_code or "",
            region=geo.region or "",
            employee_id=user.employee_id or "",
            department=user.department or "",
            job_title=user.job_title or "",
            username=user.username,
            status=user.status or UserStatus.ACTIVE.value,
            is_active=user.is_active,
            authority_level=user.authority_level or AuthorityLevel.OFFICE.value,
            language=user.language or "en",
            timezone=user.timezone or "Africa/Johannesburg",
            date_format=user.date_format or "DD/MM/YYYY",
        )


class PrivilegeState(BaseModel):
    values: dict[str, bool] = Field(
        default_factory=lambda: default_privileges(UserType.STANDARD.value)
    )
    overridden: list[str] = Field(default_factory=list)


class WizardState(BaseModel):
    step: int = 0
    form: WizardForm = Field(default_factory=WizardForm)
    privileges: PrivilegeState = Field(default_factory=PrivilegeState)


# ── Steps and field rules ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class WizardStep:
    key: str
    title: str
    fields: tuple[str, ...]


WIZARD_STEPS: tuple[WizardStep, ...] = (
    WizardStep(
        "basic",
        "Basic Information",
        ("full_name", "email", "phone_number", "id_type", "id_number"),
    ),
    WizardStep(
        "work",
        "Work Assignment",
        ("user_group_code", "office_code", "user_type_code", "country_code", "province_code"),
    ),
    WizardStep(
        "security",
        "Security & Authentication",
        ("username", "password", "confirm_password", "status"),
    ),
    WizardStep("privileges", "Privileges & Permissions", ("authority_level",)),
    WizardStep("review", "Review & Submit", ()),
)

LAST_STEP = len(WIZARD_STEPS) - 1

_PHONE_RE = re.compile(r"^[\d\s\-+()]+$")
_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")

FieldRule = Callable[[WizardForm], str | None]


def _required(field: str, message: str) -> FieldRule:
    def rule(form: WizardForm) -> str | None:
        return None if str(getattr(form, field)).strip() else message

    return rule


def _email(form: WizardForm) -> str | None:
    if not form.email.strip():
        return "Email is required"
    if not EMAIL_RE.match(form.email):
        return "Valid email required"
    return None


def _phone(form: WizardForm) -> str | None:
    if form.phone_number and not _PHONE_RE.match(form.phone_number):
        return "Valid phone number required"
    return None


def _id_number(form: WizardForm) -> str | None:
    if not form.id_number.strip():
        return "ID number is required"
    if not form.id_type:
        return None
    return validate_id_number(form.id_type, form.id_number)


def _username(form: WizardForm) -> str | None:
    value = form.username
    if not value:
        return "Username is required"
    if len(value) < 3:
        return "Username must be at least 3 characters"
    if len(value) > 20:
        return "Username cannot exceed 20 characters"
    if not _USERNAME_RE.match(value):
        return "Username can only contain letters, numbers, and underscores"
    return None


def _password(form: WizardForm) -> str | None:
    value = form.password
    if not value:
        return "Password is required"
    if len(value) < 8:
        return "Password must be at least 8 characters"
    if not (
        re.search(r"[a-z]", value) and re.search(r"[A-Z]", value) and re.search(r"\d", value)
    ):
        return "Password must contain uppercase, lowercase, and number"
    return None


def _confirm_password(form: WizardForm) -> str | None:
    if not form.confirm_password:
        return "Confirm password is required"
    if form.confirm_password != form.password:
        return "Passwords must match"
    return None


FIELD_VALIDATORS: dict[str, FieldRule] = {
    "full_name": _required("full_name", "Full name is required"),
    "email": _email,
    "phone_number": _phone,
    "id_type": _required("id_type", "ID type is required"),
    "id_number": _id_number,
    "user_group_code": _required("user_group_code", "User group is required"),
    "office_code": _required("office_code", "Office is required"),
    "user_type_code": _required("user_type_code", "User type is required"),
    "country_code": _required("country_code", "Country is required"),
    "province_code": _required("province_code", "Province is required"),
    "username": _username,
    "password": _password,
    "confirm_password": _confirm_password,
    "status": _required("status", "Status is required"),
    "authority_level": _required("authority_level", "Authority level is required"),
}


def validate_fields(form: WizardForm, fields: tuple[str, ...]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field in fields:
        message = FIELD_VALIDATORS[field](form)
        if message:
            errors[field] = message
    return errors


# ── Transitions ───────────────────────────────────────────────────────────────


class UserWizard:
    def __init__(self, state: WizardState | None = None) -> None:
        self.state = state or WizardState()
        self.state.step = max(0, min(self.state.step, LAST_STEP))

    @property
    def current_step(self) -> WizardStep:
        return WIZARD_STEPS[self.state.step]

    def validate_step(self, index: int | None = None) -> dict[str, str]:
        step = WIZARD_STEPS[self.state.step if index is None else index]
        return validate_fields(self.state.form, step.fields)

    def next(self) -> dict[str, str]:
        """Advance one step if the current step is valid; returns its errors."""
        errors = self.validate_step()
        if not errors:
            self.state.step = min(self.state.step + 1, LAST_STEP)
        return errors

    def back(self) -> None:
        self.state.step = max(self.state.step - 1, 0)

    def validate_all(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        for step in WIZARD_STEPS:
            errors.update(validate_fields(self.state.form, step.fields))
        return errors

    # ── Privileges ────────────────────────────────────────────────────────────

    def set_privilege(self, key: str, value: bool) -> None:
        if key not in PRIVILEGE_KEYS:
            raise ValidationError(f"Unknown privilege '{key}'", details={"privilege": key})
        self.state.privileges.values[key] = value
        if key not in self.state.privileges.overridden:
            self.state.privileges.overridden.append(key)

    def change_user_type(self, user_type_code: str) -> list[str]:
        """Apply the new type's defaults; returns the overrides that were kept."""
        self.state.form.user_type_code = user_type_code
        privileges = self.state.privileges
        defaults = default_privileges(user_type_code)
        for key, value in defaults.items():
            if key not in privileges.overridden:
                privileges.values[key] = value
        return [key for key in PRIVILEGE_KEYS if key in privileges.overridden]

    def reset_privileges(self) -> None:
        self.state.privileges = PrivilegeState(
            values=default_privileges(self.state.form.user_type_code)
        )

    # ── Submission ────────────────────────────────────────────────────────────

    def build_create_request(self) -> dict[str, Any]:
        form = self.state.form
        privileges = self.state.privileges

        def opt(value: str) -> str | None:
            return value or None

        return {
            "user_group_code": form.user_group_code,
            "office_code": form.office_code,
            "user_name": form.full_name,
            "user_type_code": form.user_type_code,
            "username": form.username,
            "password": form.password,
            "personal_details": {
                "id_type": form.id_type,
                "id_number": form.id_number,
                "full_name": form.full_name,
                "email": form.email,
                "phone_number": opt(form.phone_number),
                "alternative_phone": opt(form.alternative_phone),
            },
            "geographic_assignment": {
                "country_code": form.country_code,
                "province_code": form.province_code,
                "region": opt(form.region),
            },
            "employee_id": opt(form.employee_id),
            "department": opt(form.department),
            "job_title": opt(form.job_title),
            "infrastructure_number": opt(form.infrastructure_number),
            "status": form.status,
            "is_active": form.is_active,
            "authority_level": form.authority_level,
            "role_ids": [],
            "permission_ids": [],
            "custom_privileges": dict(privileges.values) if privileges.overridden else None,
            "require_password_change": form.require_password_change,
            "require_2fa": form.require_2fa,
            "language": form.language,
            "timezone": form.timezone,
            "date_format": form.date_format,
        }

    def submit(self) -> dict[str, Any]:
        """Validated create payload; raises ValidationError otherwise."""
        if self.state.step != LAST_STEP:
            raise ValidationError(
                "The user can only be submitted from the review step",
                details={"step": self.state.step},
            )
        errors = self.validate_all()
        if errors:
            raise ValidationError(
                "Please correct the highlighted fields", details={"fields": errors}
            )
        return self.build_create_request()


# ── Username suggestion ───────────────────────────────────────────────────────


async def generate_username(user_service: UserService, user_group_code: str) -> str:
    """Next free <UserGroupCode><3 digits>, confirmed with the server.

    Starts one past the highest number already in the group. If the server
    reports it taken, probes up to USERNAME_PROBE_ATTEMPTS further numbers.
    """
    if not user_group_code:
        raise ValidationError("Please select a user group first")

    existing = await user_service.usernames_in_group(user_group_code)
    candidate = codes.next_username(user_group_code, existing)
    start = codes.username_number(candidate, user_group_code)

    numbers = [start] + [
        start + offset
        for offset in range(1, settings.USERNAME_PROBE_ATTEMPTS + 1)
        if start + offset <= codes.USERNAME_MAX
    ]
    for number in numbers:
        username = codes.format_username(user_group_code, number)
        result = await user_service.validate_username(username)
        if result.get("available"):
            return username

    raise CodeSpaceExhaustedError(
        "Unable to generate available username. Please try manually.",
        details={"prefix": user_group_code, "last_tried": numbers[-1]},
    )
