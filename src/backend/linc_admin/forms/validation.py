"""Field validation and phone formatting for console forms.

Validators return an error message, or None when the value is acceptable.
Optional fields accept an empty value unless called with required=True.
"""

import re

from linc_admin.schemas.enums import IDType

# ── Patterns ──────────────────────────────────────────────────────────────────

RSA_ID_RE = re.compile(r"^[0-9]{13}$")
PASSPORT_RE = re.compile(r"^[A-Za-z0-9]+$")
SA_PHONE_RE = re.compile(r"^(\+27|0)[0-9]{9}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
POSTAL_CODE_RE = re.compile(r"^[0-9]{4}$")


def _blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


# ── Identity numbers ──────────────────────────────────────────────────────────


def rsa_id_checksum_ok(id_number: str) -> bool:
    """Luhn-style check digit: digits at odd positions are doubled."""
    if not RSA_ID_RE.match(id_number):
        return False
    digits = [int(c) for c in id_number]
    total = 0
    for i, digit in enumerate(digits[:12]):
        if i % 2 == 1:
            digit *= 2
            if digit > 9:
                digit = digit // 10 + digit % 10
        total += digit
    return (10 - total % 10) % 10 == digits[12]


def validate_id_number(id_type: str | None, id_number: str | None) -> str | None:
    """ID check used by the user wizard; rules depend on the ID type."""
    if _blank(id_type) or _blank(id_number):
        return "ID number and type are required"
    if id_type == IDType.SA_ID.value:
        if not RSA_ID_RE.match(id_number):
            return "RSA ID must be 13 digits"
        if not rsa_id_checksum_ok(id_number):
            return "Invalid RSA ID check digit"
    elif id_type == IDType.PASSPORT.value:
        if not 4 <= len(id_number) <= 20:
            return "Passport must be 4-20 characters"
        if not PASSPORT_RE.match(id_number):
            return "Passport can only contain letters and numbers"
    elif id_type == IDType.FOREIGN_ID.value:
        if not 5 <= len(id_number) <= 25:
            return "Foreign ID must be 5-25 characters"
    return None


# ── Contact details ───────────────────────────────────────────────────────────


def validate_email(value: str | None, required: bool = False) -> str | None:
    if not value:
        return "Email is required" if required else None
    if not EMAIL_RE.match(value):
        return "Please enter a valid email address"
    return None


def validate_sa_phone(value: str | None, required: bool = False) -> str | None:
    if not value:
        return "Phone number is required" if required else None
    if not SA_PHONE_RE.match(value):
        return "Please enter a valid South African phone number"
    return None


def validate_postal_code(value: str | None) -> str | None:
    if not value:
        return None
    if not POSTAL_CODE_RE.match(value):
        return "Postal code must be 4 digits"
    return None


# ── Phone display ─────────────────────────────────────────────────────────────


def format_phone_number(country_code: str, phone_number: str) -> str:
    if not phone_number:
        return ""
    digits = re.sub(r"\D", "", phone_number)
    if country_code == "+27" and len(digits) == 9:
        return f"{country_code} {digits[:2]} {digits[2:5]} {digits[5:]}"
    if country_code == "+1" and len(digits) == 10:
        return f"{country_code} ({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if country_code == "+44" and len(digits) >= 10:
        return f"{country_code} {digits[:4]} {digits[4:]}"
    return f"{country_code} {digits}"


def phone_display(
    label: str,
    country_code: str | None = None,
    phone_number: str | None = None,
    simple_phone: str | None = None,
) -> str | None:
    """'<label>: <number>' for display, or None when there is nothing to show.

    Simple phones (home, work, fax) are shown as entered; cell phones with a
    country code are formatted.
    """
    if simple_phone:
        return f"{label}: {simple_phone}"
    if country_code and phone_number:
        return f"{label}: {format_phone_number(country_code, phone_number)}"
    return None
