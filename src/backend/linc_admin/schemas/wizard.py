"""Request/response shapes for the stateless user creation wizard."""

from pydantic import BaseModel, Field

from linc_admin.forms.user_wizard import WIZARD_STEPS, WizardState


class WizardStepInfo(BaseModel):
    index: int
    key: str
    title: str
    fields: list[str]

    @classmethod
    def at(cls, index: int) -> "WizardStepInfo":
        step = WIZARD_STEPS[index]
        return cls(index=index, key=step.key, title=step.title, fields=list(step.fields))


class WizardTransition(BaseModel):
    state: WizardState
    step: WizardStepInfo
    errors: dict[str, str] = Field(default_factory=dict)


class PrivilegeChange(BaseModel):
    """One privilege edit: set a single privilege, switch user type, or reset.

    Exactly one of (privilege + value), user_type_code or reset is expected;
    when several are given they apply in that order.
    """

    state: WizardState
    privilege: str | None = None
    value: bool | None = None
    user_type_code: str | None = None
    reset: bool = False


class PrivilegeResult(BaseModel):
    state: WizardState
    preserved_overrides: list[str] = Field(default_factory=list)
