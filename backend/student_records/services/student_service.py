"""
Student Service - the five resource operations.

Each operation is a thin orchestration of the validator and the store.
Errors are raised as typed exceptions (ValidationError, NotFoundError)
and mapped to HTTP responses by the routes and the application's
exception handlers.
"""

from typing import List

from student_records.models.student import Student
from student_records.schemas import StudentPayload, ValidationMode
from student_records.services.store import StudentStore
from student_records.services.validation import validate_student


def list_students(store: StudentStore) -> List[Student]:
    return store.list()


def create_student(store: StudentStore, payload: StudentPayload) -> Student:
    """Validate a full payload and insert it. Repeating a create makes a new record."""
    fields = validate_student(payload, ValidationMode.CREATE, store)
    return store.insert(fields)


def get_student(store: StudentStore, student_id: int) -> Student:
    return store.get(student_id)


def update_student(store: StudentStore, student_id: int, payload: StudentPayload) -> Student:
    """
    Apply a partial update.

    The record is looked up first so a missing id is reported as not found
    rather than as a validation failure. Fields absent from the payload
    keep their stored values.
    """
    store.get(student_id)
    fields = validate_student(payload, ValidationMode.UPDATE, store, current_id=student_id)
    return store.patch(student_id, fields)


def delete_student(store: StudentStore, student_id: int) -> None:
    store.remove(student_id)
