"""
Form Controller - the student detail page in create, view and edit modes.

The mode is passed in explicitly; ``mode_from_query`` is the small adapter
that derives it from the page URL. View and edit switch back and forth
locally. Submitting runs the client-side checks, calls create or update,
and on success marks the form saved and schedules navigation back to the
list after a fixed delay.
"""

import re
import threading
from enum import Enum
from typing import Callable, Dict, Mapping, Optional

from student_records.client.api_client import StudentApiClient
from student_records.errors import FormStateError, StudentRecordsError, ValidationError
from student_records.logging_config import get_logger, log_with_context
from student_records.schemas import StudentOut

logger = get_logger("client")

NEW_STUDENT_ID = "new"
LIST_PATH = "/students"
REDIRECT_DELAY_SECONDS = 1.5
SUBMIT_FAILED = "Failed to save. Please try again."

FORM_FIELDS = (
    "firstName", "middleName", "lastName", "email", "age",
    "gender", "course", "yearLevel", "section",
)

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class FormMode(str, Enum):
    CREATE = "create"
    VIEW = "view"
    EDIT = "edit"


TITLES = {
    FormMode.CREATE: "Add New Student",
    FormMode.VIEW: "Student Details",
    FormMode.EDIT: "Edit Student",
}


def is_new(student_id) -> bool:
    return student_id is None or str(student_id) == NEW_STUDENT_ID


def mode_from_query(student_id, query: Mapping[str, str]) -> FormMode:
    """``edit=true`` wins over ``view=true``; an existing record defaults to edit."""
    if is_new(student_id):
        return FormMode.CREATE
    if query.get("edit") == "true":
        return FormMode.EDIT
    if query.get("view") == "true":
        return FormMode.VIEW
    return FormMode.EDIT


def parse_leading_int(value: str) -> Optional[int]:
    """Integer prefix of ``value`` (``"21 years"`` -> 21), None if there is none."""
    match = _LEADING_INT_RE.match(value or "")
    return int(match.group(1)) if match else None


def validate_form(values: Mapping[str, str]) -> Dict[str, str]:
    """Client-side checks; returns every failing field with its message."""
    errors = {}
    if not values.get("firstName", "").strip():
        errors["firstName"] = "First name is required"
    if not values.get("lastName", "").strip():
        errors["lastName"] = "Last name is required"

    email = values.get("email", "")
    if not email.strip():
        errors["email"] = "Email is required"
    elif not _EMAIL_RE.search(email):
        errors["email"] = "Invalid email format"

    age = values.get("age", "")
    if not age:
        errors["age"] = "Age is required"
    else:
        parsed = parse_leading_int(age)
        if parsed is None or parsed < 1:
            errors["age"] = "Age must be a valid number"

    if not values.get("gender"):
        errors["gender"] = "Gender is required"
    if not values.get("course", "").strip():
        errors["course"] = "Course is required"
    if not values.get("yearLevel", "").strip():
        errors["yearLevel"] = "Year level is required"
    if not values.get("section", "").strip():
        errors["section"] = "Section is required"
    return errors


def _start_timer(delay: float, callback: Callable[[], None]):
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def _sanitize(student: StudentOut) -> Dict[str, str]:
    data = student.model_dump(by_alias=True)
    values = {}
    for field in FORM_FIELDS:
        value = data.get(field)
        values[field] = "" if value is None else str(value)
    return values


class StudentForm:
    """
    State of one detail page.

    Args:
        api: Client used to load and save the record
        student_id: Id of the record, or None / "new" to create one
        mode: VIEW or EDIT for an existing record; ignored when creating
        navigate: Called with the list path once a save has completed
        schedule: ``schedule(delay, callback)`` runs the delayed navigation
        redirect_delay: Seconds between a successful save and navigation
    """

    def __init__(self, api: StudentApiClient, student_id=None, mode: FormMode = FormMode.EDIT,
                 navigate: Callable[[str], None] = None,
                 schedule: Callable[[float, Callable[[], None]], object] = _start_timer,
                 redirect_delay: float = REDIRECT_DELAY_SECONDS):
        self.api = api
        self.student_id = None if is_new(student_id) else student_id
        if self.student_id is None:
            self.mode = FormMode.CREATE
        else:
            # An existing record is never re-created
            mode = FormMode(mode)
            self.mode = FormMode.EDIT if mode == FormMode.CREATE else mode
        self.navigate = navigate
        self.schedule = schedule
        self.redirect_delay = redirect_delay

        self.values: Dict[str, str] = {field: "" for field in FORM_FIELDS}
        self.errors: Dict[str, str] = {}
        self.saving = False
        self.saved = False
        self.loaded = self.mode == FormMode.CREATE

    @property
    def title(self) -> str:
        return TITLES[self.mode]

    @property
    def read_only(self) -> bool:
        return self.mode == FormMode.VIEW

    def load(self):
        """Fetch the existing record into the form (once)."""
        if self.loaded:
            return
        student = self.api.get_student(self.student_id)
        self.values = _sanitize(student)
        self.loaded = True

    def toggle_mode(self) -> FormMode:
        if self.mode == FormMode.CREATE:
            raise FormStateError("A new student has no view mode")
        self.mode = FormMode.EDIT if self.mode == FormMode.VIEW else FormMode.VIEW
        return self.mode

    def set_field(self, name: str, value: str):
        if name not in self.values:
            raise KeyError(name)
        self.values[name] = value
        self.errors.pop(name, None)

    def validate(self) -> bool:
        self.errors = validate_form(self.values)
        return not self.errors

    def submission(self) -> Dict[str, object]:
        data: Dict[str, object] = dict(self.values)
        age = parse_leading_int(self.values["age"])
        data["age"] = age if age is not None else 0
        return data

    def submit(self) -> Optional[StudentOut]:
        """
        Validate and save. Returns the stored record, or None when the
        form or the server rejected it; entered values are kept either way.
        """
        if self.mode == FormMode.VIEW:
            raise FormStateError("Switch to edit mode before saving")
        if self.saved:
            raise FormStateError("Student already saved")
        if not self.validate():
            return None

        self.saving = True
        try:
            if self.mode == FormMode.CREATE:
                student = self.api.create_student(self.submission())
            else:
                student = self.api.update_student(self.student_id, self.submission())
        except ValidationError as exc:
            self.errors.update(exc.errors)
            self.errors["submit"] = SUBMIT_FAILED
            return None
        except StudentRecordsError as exc:
            log_with_context(logger, "WARNING", "Error saving student: {}".format(exc),
                             context={"student_id": self.student_id})
            self.errors["submit"] = SUBMIT_FAILED
            return None
        finally:
            self.saving = False

        self.saved = True
        self.student_id = student.id
        log_with_context(logger, "INFO", "Student {} saved".format(student.id),
                         context={"student_id": student.id})
        if self.navigate is not None:
            self.schedule(self.redirect_delay, lambda: self.navigate(LIST_PATH))
        return student
