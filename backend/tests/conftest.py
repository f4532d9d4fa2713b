import os

# Point the module-level app at an in-memory database and keep logs quiet
# before anything from student_records is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from student_records.client.api_client import StudentApiClient
from student_records.main import create_app
from student_records.services.store import SqlStudentStore


@pytest.fixture
def app():
    """A fresh application with its own empty in-memory database."""
    return create_app("sqlite://")


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store(app):
    session = app.state.session_factory()
    yield SqlStudentStore(session)
    session.close()


@pytest.fixture
def api(client):
    """Client-side API wrapper talking to the test app in-process."""
    return StudentApiClient(http_client=client, prefix="/api")


@pytest.fixture
def student_payload():
    """A valid create payload, as the browser would send it."""
    return {
        "email": "maria.santos@example.com",
        "firstName": "Maria",
        "lastName": "Santos",
        "middleName": "Luz",
        "age": 20,
        "gender": "Female",
        "course": "Computer Science",
        "yearLevel": "2nd",
        "section": "A",
    }
