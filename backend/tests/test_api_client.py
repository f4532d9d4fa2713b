import httpx
import pytest

from student_records.client.api_client import StudentApiClient
from student_records.errors import NotFoundError, TransportError, UniquenessConflict, ValidationError


def test_crud_round_trip(api, student_payload):
    created = api.create_student(student_payload)
    assert created.first_name == "Maria"

    assert api.get_student(created.id) == created

    updated = api.update_student(created.id, {"yearLevel": "3rd"})
    assert updated.year_level == "3rd"
    assert updated.first_name == "Maria"

    assert api.delete_student(created.id) is None
    assert api.fetch_students() == []


def test_missing_record_raises_not_found(api):
    with pytest.raises(NotFoundError) as exc_info:
        api.get_student(31)
    assert exc_info.value.student_id == 31

    with pytest.raises(NotFoundError):
        api.delete_student(31)


def test_duplicate_email_raises_uniqueness_conflict(api, student_payload):
    api.create_student(student_payload)
    with pytest.raises(UniquenessConflict):
        api.create_student(student_payload)


def test_field_errors_are_passed_through(api, student_payload):
    student_payload["age"] = "x"
    del student_payload["course"]

    with pytest.raises(ValidationError) as exc_info:
        api.create_student(student_payload)

    assert not isinstance(exc_info.value, UniquenessConflict)
    assert set(exc_info.value.errors) == {"age", "course"}


def _client_with(handler):
    http = httpx.Client(base_url="http://api.test/api", transport=httpx.MockTransport(handler))
    return StudentApiClient(http_client=http)


def test_connection_failure_raises_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        _client_with(handler).fetch_students()

    assert exc_info.value.message == "Failed to fetch students"


def test_server_error_raises_transport_error_with_status():
    def handler(request):
        return httpx.Response(500, json={"message": "An unexpected error occurred. Please try again."})

    with pytest.raises(TransportError) as exc_info:
        _client_with(handler).create_student({"email": "a@example.com"})

    assert exc_info.value.message == "Failed to create student"
    assert exc_info.value.status_code == 500


def test_requests_go_to_base_url():
    seen = []

    def handler(request):
        seen.append((request.method, str(request.url)))
        return httpx.Response(204)

    _client_with(handler).delete_student(5)

    assert seen == [("DELETE", "http://api.test/api/students/5")]
