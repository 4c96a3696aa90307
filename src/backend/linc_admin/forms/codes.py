"""Code and name suggestions for user groups, locations and users.

Codes are <prefix><zero-padded sequence>:
  user group  WC01       province code + 2 digits (max 99)
  location    WC01L001   user group code + "L" + 3 digits (max 999)
  username    WC01007    user group code + 3 digits (max 999)

Every value produced here is a suggestion computed from whatever list the
caller loaded; the upstream API stays authoritative on uniqueness. When a
prefix has no free slot left, CodeSpaceExhaustedError is raised rather than
returning a value past the cap.
"""

from collections.abc import Iterable

from linc_admin.errors import CodeSpaceExhaustedError
from linc_admin.schemas.enums import PROVINCES, UserGroupType
from linc_admin.schemas.location import Location
from linc_admin.schemas.user_group import UserGroup

USER_GROUP_CODE_WIDTH = 2
USER_GROUP_CODE_MAX = 99
LOCATION_CODE_WIDTH = 3
LOCATION_CODE_MAX = 999
USERNAME_WIDTH = 3
USERNAME_MAX = 999

# "{province}" is replaced with the province display name.
_BASE_NAMES: dict[UserGroupType, str] = {
    UserGroupType.FIXED_DLTC: "{province} DLTC",
    UserGroupType.MOBILE_DLTC: "{province} Mobile DLTC",
    UserGroupType.PRINTING_CENTER: "{province} Printing Center",
    UserGroupType.REGISTERING_AUTHORITY: "{province} Registering Authority",
    UserGroupType.PROVINCIAL_HELP_DESK: "{province} Help Desk",
    UserGroupType.NATIONAL_HELP_DESK: "National Help Desk",
    UserGroupType.VEHICLE_TESTING_STATION: "{province} Testing Station",
    UserGroupType.ADMIN_OFFICE: "{province} Admin Office",
}


def generate_sequential_code(
    prefix: str,
    existing_codes: Iterable[str | None],
    width: int,
    max_sequence: int,
) -> str:
    """Lowest free <prefix><sequence> with sequence in 1..max_sequence."""
    taken = {code for code in existing_codes if code and code.startswith(prefix)}
    for sequence in range(1, max_sequence + 1):
        candidate = f"{prefix}{sequence:0{width}d}"
        if candidate not in taken:
            return candidate
    raise CodeSpaceExhaustedError(
        f"No codes left for prefix '{prefix}' (all {max_sequence} in use)",
        details={"prefix": prefix, "max_sequence": max_sequence},
    )


def generate_user_group_code(
    province_code: str,
    user_groups: Iterable[UserGroup],
    exclude_id: str | None = None,
) -> str:
    """exclude_id leaves out the group being edited so it can keep its slot."""
    codes = [ug.user_group_code for ug in user_groups if ug.id != exclude_id]
    return generate_sequential_code(
        province_code, codes, USER_GROUP_CODE_WIDTH, USER_GROUP_CODE_MAX
    )


def generate_location_code(user_group_code: str, locations: Iterable[Location]) -> str:
    return generate_sequential_code(
        f"{user_group_code}L",
        (loc.location_code for loc in locations),
        LOCATION_CODE_WIDTH,
        LOCATION_CODE_MAX,
    )


def username_number(username: str, user_group_code: str) -> int | None:
    suffix = username[len(user_group_code):]
    if not username.startswith(user_group_code) or len(suffix) != USERNAME_WIDTH:
        return None
    return int(suffix) if suffix.isdigit() else None


def next_username(user_group_code: str, existing_usernames: Iterable[str]) -> str:
    """Highest existing number in the group + 1."""
    numbers = [
        n
        for n in (username_number(u or "", user_group_code) for u in existing_usernames)
        if n is not None
    ]
    nxt = max(numbers, default=0) + 1
    if nxt > USERNAME_MAX:
        raise CodeSpaceExhaustedError(
            f"No usernames left for user group '{user_group_code}'",
            details={"prefix": user_group_code, "max_sequence": USERNAME_MAX},
        )
    return format_username(user_group_code, nxt)


def format_username(user_group_code: str, number: int) -> str:
    return f"{user_group_code}{number:0{USERNAME_WIDTH}d}"


def province_name(province: str) -> str:
    """Accepts a province code (WC) or display name (Western Cape)."""
    return PROVINCES.get(province, province)


def base_user_group_name(province: str, user_group_type: UserGroupType | str) -> str:
    template = _BASE_NAMES.get(UserGroupType(user_group_type))
    if template is None:
        return ""
    return template.format(province=province_name(province))


def compose_name(base: str, suffix: str | None = None) -> str:
    suffix = (suffix or "").strip()
    return f"{base} {suffix}" if suffix else base


def infrastructure_type_code(user_group_type: UserGroupType | str) -> int:
    return int(UserGroupType(user_group_type).value)
