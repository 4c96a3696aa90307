"""List page support: in-memory filter, sort, paginate and summary cards.

User group and location pages load every record once and filter locally;
filter and sort state is passed per request as query parameters, nothing is
kept between requests.
"""

import math
from collections.abc import Sequence
from typing import TypeVar

from pydantic import BaseModel

from linc_admin.errors import ValidationError
from linc_admin.schemas.common import PaginationMeta
from linc_admin.schemas.enums import OperationalStatus, RegistrationStatus
from linc_admin.schemas.location import Location, LocationStatistics
from linc_admin.schemas.user_group import UserGroup, UserGroupStatistics

R = TypeVar("R", bound=BaseModel)


def _matches_search(search: str | None, *values: str | None) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(needle in (value or "").lower() for value in values)


def filter_user_groups(
    user_groups: Sequence[UserGroup],
    search: str | None = None,
    province_code: str | None = None,
    user_group_type: str | None = None,
    registration_status: str | None = None,
) -> list[UserGroup]:
    return [
        ug
        for ug in user_groups
        if _matches_search(search, ug.user_group_name, ug.user_group_code)
        and (not province_code or ug.province_code == province_code)
        and (not user_group_type or ug.user_group_type == user_group_type)
        and (not registration_status or ug.registration_status == registration_status)
    ]


def filter_locations(
    locations: Sequence[Location],
    search: str | None = None,
    province_code: str | None = None,
    user_group_id: str | None = None,
    operational_status: str | None = None,
) -> list[Location]:
    return [
        loc
        for loc in locations
        if _matches_search(search, loc.location_name, loc.location_code)
        and (not province_code or loc.province_code == province_code)
        and (not user_group_id or loc.user_group_id == user_group_id)
        and (not operational_status or loc.operational_status == operational_status)
    ]


def sort_records(records: Sequence[R], sort_by: str | None, descending: bool = False) -> list[R]:
    """Stable sort on one field; records missing the value sort last."""
    if not sort_by:
        return list(records)
    if records and sort_by not in type(records[0]).model_fields:
        raise ValidationError(f"Cannot sort by '{sort_by}'", details={"sort_by": sort_by})

    present = [r for r in records if getattr(r, sort_by, None) is not None]
    missing = [r for r in records if getattr(r, sort_by, None) is None]

    def key(record: R):
        value = getattr(record, sort_by)
        return value.lower() if isinstance(value, str) else value

    return sorted(present, key=key, reverse=descending) + missing


def paginate(records: Sequence[R], page: int = 1, page_size: int = 25) -> tuple[list[R], PaginationMeta]:
    if page < 1 or page_size < 1:
        raise ValidationError("page and page_size must be positive")
    total = len(records)
    pages = math.ceil(total / page_size) if total else 0
    start = (page - 1) * page_size
    meta = PaginationMeta(
        page=page,
        page_size=page_size,
        total=total,
        pages=pages,
        has_next=page < pages,
        has_previous=page > 1,
    )
    return list(records[start : start + page_size]), meta


# ── Summary cards ─────────────────────────────────────────────────────────────


def summarize_user_groups(user_groups: Sequence[UserGroup]) -> UserGroupStatistics:
    active = sum(1 for ug in user_groups if ug.is_active)
    return UserGroupStatistics(
        total=len(user_groups),
        registered=sum(
            1 for ug in user_groups if ug.registration_status == RegistrationStatus.REGISTERED.value
        ),
        active=active,
        inactive=len(user_groups) - active,
        provinces=len({ug.province_code for ug in user_groups if ug.province_code}),
        types=len({ug.user_group_type for ug in user_groups if ug.user_group_type}),
    )


def summarize_locations(locations: Sequence[Location]) -> LocationStatistics:
    return LocationStatistics(
        total=len(locations),
        operational=sum(
            1 for loc in locations if loc.operational_status == OperationalStatus.OPERATIONAL.value
        ),
        provinces=len({loc.province_code for loc in locations if loc.province_code}),
        total_capacity=sum(loc.max_daily_capacity or loc.daily_capacity or 0 for loc in locations),
    )
