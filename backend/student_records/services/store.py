"""
Store Adapter - persistence interface for Student records.

``StudentStore`` is what the service layer talks to; ``SqlStudentStore``
implements it on top of a SQLAlchemy session. The store owns the canonical
state: it assigns ids, applies partial patches, hard-deletes, and turns a
violated email unique constraint into a typed UniquenessConflict instead
of leaking a database error.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.errors import NotFoundError, UniquenessConflict
from student_records.logging_config import get_logger, log_with_context
from student_records.models.student import Student

logger = get_logger("db")


class StudentStore(ABC):
    """Operations the API layer needs from persistence."""

    @abstractmethod
    def list(self) -> List[Student]:
        """All students in primary-key order."""

    @abstractmethod
    def get(self, student_id: int) -> Student:
        """The student with ``student_id``; raises NotFoundError."""

    @abstractmethod
    def insert(self, fields: Dict[str, Any]) -> Student:
        """Store a new student and return it with its assigned id."""

    @abstractmethod
    def patch(self, student_id: int, fields: Dict[str, Any]) -> Student:
        """Apply only ``fields`` to an existing student; raises NotFoundError."""

    @abstractmethod
    def remove(self, student_id: int) -> None:
        """Permanently delete a student; raises NotFoundError."""

    @abstractmethod
    def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Whether a student other than ``exclude_id`` already uses ``email``."""


class SqlStudentStore(StudentStore):
    """StudentStore backed by the ``students`` table."""

    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[Student]:
        return self.db.query(Student).order_by(Student.id.asc()).all()

    def get(self, student_id: int) -> Student:
        student = self.db.get(Student, student_id)
        if student is None:
            raise NotFoundError(student_id)
        return student

    def insert(self, fields: Dict[str, Any]) -> Student:
        start_time = time.time()
        student = Student(**fields)
        self.db.add(student)
        self._commit(fields.get("email"))
        self.db.refresh(student)

        duration_ms = (time.time() - start_time) * 1000
        log_with_context(logger, "INFO",
            "Inserted student {}".format(student.id),
            context={"student_id": student.id},
            extra_data={"duration_ms": round(duration_ms, 2)})
        return student

    def patch(self, student_id: int, fields: Dict[str, Any]) -> Student:
        student = self.get(student_id)
        if not fields:
            return student

        for column, value in fields.items():
            setattr(student, column, value)
        self._commit(fields.get("email"))
        self.db.refresh(student)

        log_with_context(logger, "INFO",
            "Patched student {}".format(student_id),
            context={"student_id": student_id},
            extra_data={"fields": sorted(fields)})
        return student

    def remove(self, student_id: int) -> None:
        student = self.get(student_id)
        self.db.delete(student)
        self.db.commit()
        log_with_context(logger, "INFO",
            "Deleted student {}".format(student_id),
            context={"student_id": student_id})

    def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Student.id).filter(Student.email == email)
        if exclude_id is not None:
            query = query.filter(Student.id != exclude_id)
        return query.first() is not None

    def _commit(self, email: Optional[str]):
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if "email" not in str(exc.orig).lower():
                raise
            log_with_context(logger, "WARNING",
                "Unique constraint rejected email write",
                context={"email": email})
            raise UniquenessConflict(email)
