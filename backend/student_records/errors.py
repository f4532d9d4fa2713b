"""
Exception types shared by the API, the store adapter and the client.

Every failure the system reports to a caller is one of these, so that a
caller can tell a rejected payload from a missing record from a broken
connection without inspecting messages.
"""

from typing import Dict


class StudentRecordsError(Exception):
    """Base class for all application errors."""


class ValidationError(StudentRecordsError):
    """
    One or more fields of a payload failed validation.

    ``errors`` maps the wire field name (``firstName``, ``email``, ...) to a
    human-readable message. It always holds every failing field, never
    just the first one.
    """

    def __init__(self, errors: Dict[str, str], message: str = "The given data was invalid."):
        super().__init__(message)
        self.message = message
        self.errors = dict(errors)


class UniquenessConflict(ValidationError):
    """A write would give a student an email another student already has."""

    MESSAGE = "The email has already been taken."

    def __init__(self, email: str = None):
        super().__init__({"email": self.MESSAGE})
        self.email = email


class NotFoundError(StudentRecordsError):
    """No student exists with the requested id."""

    def __init__(self, student_id):
        super().__init__("Student {} not found".format(student_id))
        self.student_id = student_id


class TransportError(StudentRecordsError):
    """The API could not be reached or answered with an unexpected failure."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FormStateError(StudentRecordsError):
    """A form action was attempted in a mode that does not offer it."""
