"""
List-View Engine - search, pagination and row padding for the student table.

Works on a snapshot of students fetched once per page load:
1. Filter: case-insensitive substring match on first name, last name,
   email or course (nothing else is searched), order preserved
2. Paginate: fixed page size of 8, pages numbered from 1
3. Pad: the table always renders 8 rows; unused slots are blank (None)

Changing the search term jumps back to page 1. Navigation is clamped to
[1, total_pages]; with no matches total_pages is 0 and both directions
are disabled.
"""

import math
from typing import List, Optional, Sequence

from student_records.client.api_client import StudentApiClient
from student_records.errors import NotFoundError, StudentRecordsError
from student_records.logging_config import get_logger, log_with_context
from student_records.schemas import StudentOut

PAGE_SIZE = 8
SEARCH_FIELDS = ("first_name", "last_name", "email", "course")

logger = get_logger("client")


def matches(student: StudentOut, term: str) -> bool:
    needle = term.lower()
    return any(needle in (getattr(student, field) or "").lower() for field in SEARCH_FIELDS)


def filter_students(students: Sequence[StudentOut], term: str) -> List[StudentOut]:
    return [s for s in students if matches(s, term)]


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(count / page_size)


def paginate(items: Sequence, page: int, page_size: int = PAGE_SIZE) -> list:
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def pad_rows(rows: Sequence, page_size: int = PAGE_SIZE) -> list:
    """Fill a page out to ``page_size`` display rows with None."""
    return list(rows) + [None] * max(page_size - len(rows), 0)


class StudentListView:
    """Search term and current page over one snapshot."""

    def __init__(self, students: Sequence[StudentOut] = (), page_size: int = PAGE_SIZE):
        self.students = list(students)
        self.page_size = page_size
        self.search_term = ""
        self.current_page = 1

    def set_search(self, term: str):
        self.search_term = term or ""
        self.current_page = 1

    @property
    def filtered(self) -> List[StudentOut]:
        return filter_students(self.students, self.search_term)

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered), self.page_size)

    @property
    def page_rows(self) -> List[StudentOut]:
        return paginate(self.filtered, self.current_page, self.page_size)

    @property
    def display_rows(self) -> List[Optional[StudentOut]]:
        return pad_rows(self.page_rows, self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def go_to(self, page: int):
        self.current_page = min(max(page, 1), max(self.total_pages, 1))

    def next_page(self):
        if self.has_next:
            self.current_page += 1

    def previous_page(self):
        if self.has_previous:
            self.current_page -= 1

    def remove(self, student_id: int):
        self.students = [s for s in self.students if s.id != student_id]
        # Deleting the last row of the last page would leave an empty page
        self.go_to(self.current_page)


class StudentListPage:
    """
    The list screen: loads the snapshot and runs the delete confirmation.

    The local snapshot only changes after the API confirms a delete, or
    reports that the record is already gone.
    """

    def __init__(self, api: StudentApiClient):
        self.api = api
        self.view = StudentListView()
        self.loading = False
        self.error: Optional[str] = None
        self.pending_delete: Optional[StudentOut] = None

    def load(self) -> List[StudentOut]:
        self.loading = True
        self.error = None
        try:
            self.view = StudentListView(self.api.fetch_students(), self.view.page_size)
        except StudentRecordsError as exc:
            self.error = "Failed to fetch students"
            log_with_context(logger, "ERROR", "Could not load student list: {}".format(exc))
            raise
        finally:
            self.loading = False
        return self.view.students

    def request_delete(self, student: StudentOut):
        self.pending_delete = student

    def cancel_delete(self):
        self.pending_delete = None

    def confirm_delete(self):
        if self.pending_delete is None:
            return
        student_id = self.pending_delete.id
        try:
            self.api.delete_student(student_id)
        except NotFoundError:
            # Already gone on the server; drop the stale row
            log_with_context(logger, "WARNING",
                "Student {} was already deleted".format(student_id),
                context={"student_id": student_id})
        self.view.remove(student_id)
        self.pending_delete = None
        log_with_context(logger, "INFO", "Removed student {} from list".format(student_id),
                         context={"student_id": student_id})
