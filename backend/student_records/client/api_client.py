"""
HTTP client for the Students API, used by the list page and the form.

Every call returns parsed records or raises a typed error:
NotFoundError for 404, ValidationError (or UniquenessConflict) for 422,
and TransportError for connection failures, timeouts and any other
unexpected status. Nothing is retried.
"""

import os
from typing import Any, Dict, List, Optional

import httpx

from student_records.errors import NotFoundError, TransportError, UniquenessConflict, ValidationError
from student_records.logging_config import get_logger, log_with_context
from student_records.schemas import StudentOut

API_URL = os.getenv("API_URL", "http://localhost:8000/api")

logger = get_logger("client")


class StudentApiClient:
    """
    Thin wrapper over an ``httpx.Client`` pointed at the API base URL.

    Pass ``http_client`` to reuse an existing client (a FastAPI TestClient
    works too, its base URL then being the app root plus ``prefix``).
    """

    def __init__(self, base_url: str = None, http_client: httpx.Client = None,
                 prefix: str = "", timeout: float = 30.0):
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            base_url=base_url or API_URL,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        self._prefix = prefix.rstrip("/")

    def close(self):
        if self._owns_client:
            self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ── Operations ───────────────────────────────────────────

    def fetch_students(self) -> List[StudentOut]:
        data = self._request("GET", "/students", failure="Failed to fetch students")
        return [StudentOut.model_validate(item) for item in data]

    def get_student(self, student_id) -> StudentOut:
        data = self._request("GET", "/students/{}".format(student_id),
                             failure="Failed to fetch student", student_id=student_id)
        return StudentOut.model_validate(data)

    def create_student(self, data: Dict[str, Any]) -> StudentOut:
        body = self._request("POST", "/students", json=data, failure="Failed to create student")
        return StudentOut.model_validate(body)

    def update_student(self, student_id, data: Dict[str, Any]) -> StudentOut:
        body = self._request("PUT", "/students/{}".format(student_id), json=data,
                             failure="Failed to update student", student_id=student_id)
        return StudentOut.model_validate(body)

    def delete_student(self, student_id) -> None:
        self._request("DELETE", "/students/{}".format(student_id),
                      failure="Failed to delete student", student_id=student_id)

    # ── Internals ────────────────────────────────────────────

    def _request(self, method: str, path: str, failure: str,
                 json: Optional[Dict[str, Any]] = None, student_id=None):
        url = self._prefix + path
        try:
            response = self._http.request(method, url, json=json)
        except httpx.HTTPError as exc:
            log_with_context(logger, "ERROR",
                "{} {} failed: {}".format(method, url, exc),
                context={"student_id": student_id})
            raise TransportError(failure) from exc

        if response.status_code == 404:
            raise NotFoundError(student_id)
        if response.status_code == 422:
            raise self._validation_error(response)
        if response.is_error:
            log_with_context(logger, "ERROR",
                "{} {} returned {}".format(method, url, response.status_code),
                context={"student_id": student_id})
            raise TransportError(failure, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _validation_error(response: httpx.Response) -> ValidationError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        errors = body.get("errors") or {}
        if errors == {"email": UniquenessConflict.MESSAGE}:
            return UniquenessConflict()
        return ValidationError(errors, message=body.get("message") or "The given data was invalid.")
