"""
Students API routes - the Student resource.

Provides endpoints for:
- Listing all students
- Creating a student
- Viewing, updating (partially) and deleting a single student

Validation failures propagate as ValidationError and are rendered as 422
by the application's exception handler; missing ids become 404 here.
"""

from typing import List
from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from student_records.database import get_session
from student_records.errors import NotFoundError
from student_records.logging_config import get_logger, log_with_context
from student_records.schemas import StudentOut, StudentPayload
from student_records.services import student_service
from student_records.services.store import SqlStudentStore, StudentStore

router = APIRouter()
logger = get_logger("http")

NOT_FOUND_DETAIL = "Student not found"


def get_store(db: Session = Depends(get_session)) -> StudentStore:
    """One store per request, bound to that request's session."""
    return SqlStudentStore(db)


def _not_found(exc: NotFoundError) -> HTTPException:
    log_with_context(logger, "INFO", str(exc), context={"student_id": exc.student_id})
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)


@router.get("/students", response_model=List[StudentOut])
def list_students(store: StudentStore = Depends(get_store)):
    """List every student in insertion order."""
    students = student_service.list_students(store)
    log_with_context(logger, "INFO", "Listed {} students".format(len(students)))
    return students


@router.post("/students", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
def create_student(payload: StudentPayload = Body(...), store: StudentStore = Depends(get_store)):
    """Create a student from a full payload."""
    student = student_service.create_student(store, payload)
    log_with_context(logger, "INFO",
        "Student {} created".format(student.id),
        context={"student_id": student.id})
    return student


@router.get("/students/{student_id}", response_model=StudentOut)
def get_student(student_id: int, store: StudentStore = Depends(get_store)):
    try:
        return student_service.get_student(store, student_id)
    except NotFoundError as exc:
        raise _not_found(exc)


@router.put("/students/{student_id}", response_model=StudentOut)
def update_student(student_id: int, payload: StudentPayload = Body(...),
                   store: StudentStore = Depends(get_store)):
    """Update only the fields present in the payload."""
    try:
        student = student_service.update_student(store, student_id, payload)
    except NotFoundError as exc:
        raise _not_found(exc)

    log_with_context(logger, "INFO",
        "Student {} updated".format(student_id),
        context={"student_id": student_id},
        extra_data={"fields": sorted(payload.model_fields_set)})
    return student


@router.delete("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: int, store: StudentStore = Depends(get_store)):
    try:
        student_service.delete_student(store, student_id)
    except NotFoundError as exc:
        raise _not_found(exc)

    log_with_context(logger, "INFO",
        "Student {} deleted".format(student_id),
        context={"student_id": student_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
