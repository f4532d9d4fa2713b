"""
Student model - the single record type managed by the application.

Each student is identified by an auto-incremented integer id. The email
column carries the table's only uniqueness constraint.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, Text, DateTime
from student_records.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Student(Base):
    """
    SQLAlchemy model for the students table.

    Stores personal fields (names, email, age, gender) and academic fields
    (course, year level, section). ``middle_name`` is the only optional
    field; every other column is NOT NULL.
    """
    __tablename__ = "students"
    # Never reuse the id of a deleted row on SQLite
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True,
                doc="Server-assigned student identifier")
    email = Column(Text, nullable=False, unique=True,
                   doc="Student email, unique across all students")
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    middle_name = Column(Text, nullable=True)
    age = Column(Integer, nullable=False)
    gender = Column(Text, nullable=False,
                    doc="Free text; the UI offers Male/Female/Other")
    course = Column(Text, nullable=False)
    year_level = Column(Text, nullable=False,
                        doc="Free text; the UI offers 1st through 5th")
    section = Column(Text, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.first_name} {self.last_name}', email='{self.email}')>"
