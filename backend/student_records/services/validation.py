"""
Validation Service - field-level rules for Student payloads.

Implements the rules shared by the create and update paths:
1. Required fields (create: all present; update: only those supplied)
2. String fields are trimmed; blank counts as missing
3. Email syntax and uniqueness (the record being updated is excluded)
4. Age must be an integer (no range check on the server)

Validation is all-or-nothing: every failing field is collected and a
single ValidationError carries the complete mapping.
"""

import re
from typing import Any, Dict, Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from student_records.errors import UniquenessConflict, ValidationError
from student_records.logging_config import get_logger, log_with_context
from student_records.schemas import (
    REQUIRED_FIELDS, STRING_FIELDS, StudentPayload, ValidationMode, wire_name,
)
from student_records.services.store import StudentStore

logger = get_logger("validation")

_email_adapter = TypeAdapter(EmailStr)
_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def _attribute(field: str) -> str:
    """Display name used in messages: ``year_level`` -> ``year level``."""
    return field.replace("_", " ")


def required_message(field: str) -> str:
    return "The {} field is required.".format(_attribute(field))


def string_message(field: str) -> str:
    return "The {} field must be a string.".format(_attribute(field))


def email_message(field: str = "email") -> str:
    return "The {} field must be a valid email address.".format(_attribute(field))


def integer_message(field: str = "age") -> str:
    return "The {} field must be an integer.".format(_attribute(field))


def is_valid_email(value: str) -> bool:
    """
    Whether ``value`` is a bare email address.

    EmailStr also accepts the display-name form ``Name <addr>`` and returns
    only the address; anything that does not parse back to itself is
    rejected so the stored value is always the address.
    """
    try:
        address = _email_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return address.casefold() == value.casefold()


def coerce_integer(value: Any) -> Optional[int]:
    """
    Return ``value`` as an int, or None if it is not an integer.

    Accepts ints, integral floats (``21.0``) and digit strings with an
    optional sign. Booleans are rejected even though they subclass int.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INTEGER_RE.match(value.strip()):
        return int(value.strip())
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_student(payload: StudentPayload, mode: ValidationMode, store: StudentStore,
                     current_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Validate a payload and return the normalized column values.

    Args:
        payload: Partial student as sent by the client
        mode: CREATE requires every required field; UPDATE validates only
            the fields present in the payload
        store: Used for the email uniqueness check
        current_id: Id of the record being updated, excluded from the
            uniqueness check

    Returns:
        Mapping of column name to coerced value, containing only the
        fields to write

    Raises:
        ValidationError: With one message per failing wire field
    """
    supplied = payload.model_fields_set
    errors: Dict[str, str] = {}
    fields: Dict[str, Any] = {}

    for field in REQUIRED_FIELDS:
        if mode == ValidationMode.UPDATE and field not in supplied:
            continue
        value = getattr(payload, field)
        if _is_blank(value):
            errors[wire_name(field)] = required_message(field)
            continue

        if field in STRING_FIELDS:
            if not isinstance(value, str):
                errors[wire_name(field)] = string_message(field)
                continue
            value = value.strip()
        elif field == "age":
            value = coerce_integer(value)
            if value is None:
                errors[wire_name(field)] = integer_message(field)
                continue

        fields[field] = value

    # middleName is nullable: blank clears it, absent leaves it alone
    if "middle_name" in supplied:
        middle_name = payload.middle_name
        if _is_blank(middle_name):
            fields["middle_name"] = None
        elif not isinstance(middle_name, str):
            errors[wire_name("middle_name")] = string_message("middle_name")
        else:
            fields["middle_name"] = middle_name.strip()

    if "email" in fields:
        email = fields["email"]
        if not is_valid_email(email):
            errors["email"] = email_message()
            del fields["email"]
        elif store.email_taken(email, exclude_id=current_id):
            errors["email"] = UniquenessConflict.MESSAGE
            del fields["email"]

    if errors:
        log_with_context(logger, "INFO",
            "Rejected {} payload with {} invalid field(s)".format(mode.value, len(errors)),
            context={"student_id": current_id},
            extra_data={"errors": errors})
        raise ValidationError(errors)

    return fields
