"""Lookup service: provinces, phone codes and remote phone/province checks.

Lookups rarely change, so successful responses are kept in a process-wide
TTL cache (LOOKUP_CACHE_SECONDS). When the upstream API cannot serve a
lookup, built-in fallback data is returned instead; fallbacks are never
cached so the next call retries upstream.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

from linc_admin.clients.linc_api import LincApiClient
from linc_admin.config import settings
from linc_admin.errors import LincAdminError
from linc_admin.schemas.enums import PROVINCES

log = logging.getLogger(__name__)

FALLBACK_PROVINCES: list[dict[str, str]] = [
    {"code": code, "name": name} for code, name in PROVINCES.items()
]

FALLBACK_PHONE_CODES: list[dict[str, str]] = [
    {"country_code": "ZA", "country_name": "South Africa", "phone_code": "+27"},
    {"country_code": "US", "country_name": "United States", "phone_code": "+1"},
    {"country_code": "GB", "country_name": "United Kingdom", "phone_code": "+44"},
    {"country_code": "IN", "country_name": "India", "phone_code": "+91"},
    {"country_code": "CN", "country_name": "China", "phone_code": "+86"},
    {"country_code": "FR", "country_name": "France", "phone_code": "+33"},
    {"country_code": "DE", "country_name": "Germany", "phone_code": "+49"},
    {"country_code": "AU", "country_name": "Australia", "phone_code": "+61"},
    {"country_code": "CA", "country_name": "Canada", "phone_code": "+1"},
    {"country_code": "BR", "country_name": "Brazil", "phone_code": "+55"},
]

_UNAVAILABLE = "Validation service unavailable"


class LookupCache:
    """Key → value store whose entries expire after ttl seconds."""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock() + self.ttl, value)

    def clear(self) -> None:
        self._entries.clear()


lookup_cache = LookupCache(ttl=settings.LOOKUP_CACHE_SECONDS)


class LookupService:
    def __init__(self, api: LincApiClient, cache: LookupCache = lookup_cache) -> None:
        self.api = api
        self.cache = cache

    async def _cached(self, key: str, path: str, fallback: Any) -> Any:
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        try:
            data = await self.api.get(path)
        except LincAdminError as exc:
            log.warning("Lookup %s unavailable, using fallback data: %s", key, exc.message)
            return fallback
        self.cache.set(key, data)
        return data

    async def provinces(self) -> list[dict[str, Any]]:
        return await self._cached("provinces", "lookups/provinces", FALLBACK_PROVINCES)

    async def phone_codes(self) -> list[dict[str, Any]]:
        return await self._cached("phone_codes", "lookups/phone-codes", FALLBACK_PHONE_CODES)

    async def all_lookups(self) -> dict[str, Any]:
        cached = self.cache.get("all_lookups")
        if cached is not None:
            return cached
        try:
            data = await self.api.get("lookups/all")
        except LincAdminError as exc:
            log.warning("Combined lookups unavailable, fetching individually: %s", exc.message)
            provinces, phone_codes = await asyncio.gather(self.provinces(), self.phone_codes())
            return {"provinces": provinces, "phone_codes": phone_codes}
        self.cache.set("all_lookups", data)
        return data

    async def validate_phone(self, country_code: str, phone_number: str) -> dict[str, Any]:
        try:
            return await self.api.post(
                "lookups/validate-phone",
                {"country_code": country_code, "phone_number": phone_number},
            )
        except LincAdminError as exc:
            log.warning("Phone validation unavailable: %s", exc.message)
            return {"is_valid": False, "error_message": _UNAVAILABLE}

    async def validate_province(self, province_code: str) -> dict[str, Any]:
        try:
            return await self.api.post(
                "lookups/validate-province", {"province_code": province_code}
            )
        except LincAdminError as exc:
            log.warning("Province validation unavailable: %s", exc.message)
            return {"is_valid": False, "error_message": _UNAVAILABLE}
