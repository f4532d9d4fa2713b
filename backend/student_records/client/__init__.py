"""Client-side logic of the student UI: API transport, list view and form."""

from student_records.client.api_client import StudentApiClient
from student_records.client.form import FormMode, StudentForm, mode_from_query
from student_records.client.list_view import PAGE_SIZE, StudentListPage, StudentListView

__all__ = [
    "StudentApiClient", "FormMode", "StudentForm", "mode_from_query",
    "PAGE_SIZE", "StudentListPage", "StudentListView",
]
