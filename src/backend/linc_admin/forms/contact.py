"""Contact user auto-populate for user group and location forms.

Picking a user copies their name, email and phone into the form's contact
fields and locks them; clearing the pick empties and unlocks them. The four
fields always change together.
"""

import logging

from pydantic import BaseModel

from linc_admin.errors import LincAdminError
from linc_admin.schemas.location import Location
from linc_admin.schemas.user import User
from linc_admin.schemas.user_group import UserGroup
from linc_admin.services.user_service import UserService

log = logging.getLogger(__name__)


class ContactFields(BaseModel):
    contact_user_id: str = ""
    contact_person: str = ""
    email_address: str = ""
    phone_number: str = ""
    read_only: bool = False


def apply_contact_user(user: User) -> ContactFields:
    details = user.personal_details
    return ContactFields(
        contact_user_id=user.id,
        contact_person=details.full_name or "",
        email_address=details.email or "",
        phone_number=details.phone_number or "",
        read_only=True,
    )


def clear_contact() -> ContactFields:
    return ContactFields()


def select_contact(user: User | None) -> ContactFields:
    return apply_contact_user(user) if user is not None else clear_contact()


def format_user_option(user: User) -> str:
    """Autocomplete label: '<full name> (<username>) - <email>'."""
    full_name = user.personal_details.full_name or "No Name"
    username = user.username or "No Username"
    email = user.personal_details.email or "No Email"
    return f"{full_name} ({username}) - {email}"


def stored_contact(record: UserGroup | Location) -> ContactFields:
    """Contact fields as saved on a user group or location, editable."""
    return ContactFields(
        contact_user_id=record.contact_user_id or "",
        contact_person=record.contact_person or "",
        email_address=record.email_address or record.email or "",
        phone_number=record.phone_number or "",
    )


async def load_contact(user_service: UserService, record: UserGroup | Location) -> ContactFields:
    """Re-select the stored contact user when an edit form opens.

    When the contact user can no longer be loaded the saved values are kept
    and left editable.
    """
    if not record.contact_user_id:
        return stored_contact(record)
    try:
        user = await user_service.get_user(record.contact_user_id)
    except LincAdminError as exc:
        log.warning("Could not load contact user %s: %s", record.contact_user_id, exc.message)
        return stored_contact(record)
    return apply_contact_user(user)
