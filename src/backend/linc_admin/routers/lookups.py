"""Lookup endpoints: provinces, phone codes and phone/province validation.

Any signed-in console user may read lookups; no admin role is required.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from linc_admin.auth.dependencies import get_current_user
from linc_admin.clients.dependencies import get_api_client
from linc_admin.clients.linc_api import LincApiClient
from linc_admin.forms.validation import format_phone_number, phone_display
from linc_admin.services.lookup_service import LookupService

router = APIRouter(
    prefix="/api/v1/lookups",
    tags=["lookups"],
    dependencies=[Depends(get_current_user)],
)


def _service(api: LincApiClient = Depends(get_api_client)) -> LookupService:
    return LookupService(api)


class PhoneRequest(BaseModel):
    country_code: str
    phone_number: str


class ProvinceRequest(BaseModel):
    province_code: str


class PhoneDisplayRequest(BaseModel):
    label: str = "Phone"
    country_code: str | None = None
    phone_number: str | None = None
    simple_phone: str | None = None


@router.get("/provinces")
async def provinces(svc: LookupService = Depends(_service)) -> list[dict[str, Any]]:
    return await svc.provinces()


@router.get("/phone-codes")
async def phone_codes(svc: LookupService = Depends(_service)) -> list[dict[str, Any]]:
    return await svc.phone_codes()


@router.get("/all")
async def all_lookups(svc: LookupService = Depends(_service)) -> dict[str, Any]:
    return await svc.all_lookups()


@router.post("/validate-phone")
async def validate_phone(
    body: PhoneRequest, svc: LookupService = Depends(_service)
) -> dict[str, Any]:
    return await svc.validate_phone(body.country_code, body.phone_number)


@router.post("/validate-province")
async def validate_province(
    body: ProvinceRequest, svc: LookupService = Depends(_service)
) -> dict[str, Any]:
    return await svc.validate_province(body.province_code)


@router.post("/format-phone")
async def format_phone(body: PhoneDisplayRequest) -> dict[str, str | None]:
    formatted = (
        format_phone_number(body.country_code, body.phone_number)
        if body.country_code and body.phone_number
        else body.simple_phone
    )
    return {
        "formatted": formatted,
        "display": phone_display(
            body.label, body.country_code, body.phone_number, body.simple_phone
        ),
    }
