"""
Field-level validation for guest registrations.

Runs before any store call and does not depend on the transport: the result is a list
of ``FieldError`` pairs in field order.
"""
import re
from typing import Any, List
from email_validator import validate_email, EmailNotValidError
from app.core.errors import FieldError

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20

_PHONE_RE = re.compile(r"^\+?[0-9 ().\-]*[0-9][0-9 ().\-]*$")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_phone(value: str) -> bool:
    return bool(_PHONE_RE.match(value))


def validate_guest_registration(full_name: Any, email: Any, phone_number: Any, event_id: Any) -> List[FieldError]:
    errors: List[FieldError] = []

    full_name = _text(full_name)
    if not full_name:
        errors.append(FieldError("full_name", "Full name is required"))
    elif len(full_name) > NAME_MAX_LENGTH:
        errors.append(FieldError("full_name", "Name cannot exceed 100 characters"))

    email = _text(email)
    if not email:
        errors.append(FieldError("email", "Email is required"))
    elif len(email) > EMAIL_MAX_LENGTH:
        errors.append(FieldError("email", "Email cannot exceed 100 characters"))
    elif not is_valid_email(email):
        errors.append(FieldError("email", "Invalid email address"))

    phone = _text(phone_number)
    if not phone:
        errors.append(FieldError("phone_number", "Phone number is required"))
    elif len(phone) > PHONE_MAX_LENGTH:
        errors.append(FieldError("phone_number", "Phone number cannot exceed 20 characters"))
    elif not is_valid_phone(phone):
        errors.append(FieldError("phone_number", "Invalid phone number"))

    if isinstance(event_id, bool) or not isinstance(event_id, int):
        errors.append(FieldError("event_id", "Event ID is required"))

    return errors
