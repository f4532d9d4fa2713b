"""
Pydantic schemas for the Student resource.

Field names are snake_case in Python and camelCase on the wire
(``first_name`` <-> ``firstName``); the alias generator keeps the two in
step so the JSON contract with the browser client never drifts.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Raw JSON value as sent by a client; the validator reports wrong types
# per field so nothing is rejected while parsing the body
RawValue = Any

REQUIRED_FIELDS = (
    "email", "first_name", "last_name", "age",
    "gender", "course", "year_level", "section",
)
OPTIONAL_FIELDS = ("middle_name",)
STRING_FIELDS = (
    "email", "first_name", "last_name", "middle_name",
    "gender", "course", "year_level", "section",
)

# Choices offered by the form; the API itself accepts any non-empty string
GENDERS = ("Male", "Female", "Other")
YEAR_LEVELS = ("1st", "2nd", "3rd", "4th", "5th")


class ValidationMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class StudentPayload(BaseModel):
    """
    Partial Student as received from a client. Every field is optional.

    Which fields the client actually sent is available through
    ``model_fields_set``, so a missing key and an explicit ``null`` stay
    distinguishable. Unknown keys (including ``id``) are dropped.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    email: RawValue = None
    first_name: RawValue = None
    last_name: RawValue = None
    middle_name: RawValue = None
    age: RawValue = None
    gender: RawValue = None
    course: RawValue = None
    year_level: RawValue = None
    section: RawValue = None


class StudentOut(BaseModel):
    """A stored Student as returned by the API."""
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    email: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    age: int
    gender: str
    course: str
    year_level: str
    section: str
    created_at: Optional[datetime] = Field(default=None, alias="created_at")
    updated_at: Optional[datetime] = Field(default=None, alias="updated_at")


def wire_name(field: str) -> str:
    """Wire (camelCase) name of a model field."""
    return to_camel(field)
