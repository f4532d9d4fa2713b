"""API tests for the Students resource, run against an in-memory database."""

WIRE_FIELDS = ["email", "firstName", "lastName", "middleName", "age",
               "gender", "course", "yearLevel", "section"]


def _create(client, payload):
    resp = client.post("/api/students", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


# --- GET /api/students ---

def test_list_empty(client):
    resp = client.get("/api/students")
    assert resp.status_code == 200
    assert resp.json() == []


def test_list_returns_created_students_in_order(client, student_payload):
    first = _create(client, student_payload)
    student_payload["email"] = "second@example.com"
    second = _create(client, student_payload)

    resp = client.get("/api/students")

    assert [s["id"] for s in resp.json()] == [first["id"], second["id"]]


# --- POST /api/students ---

def test_create_echoes_input_fields(client, student_payload):
    student_payload["age"] = "20"

    created = _create(client, student_payload)

    assert isinstance(created["id"], int)
    for field in WIRE_FIELDS:
        expected = 20 if field == "age" else student_payload[field]
        assert created[field] == expected
    assert "created_at" in created
    assert "updated_at" in created


def test_create_then_read_returns_identical_record(client, student_payload):
    created = _create(client, student_payload)

    resp = client.get("/api/students/{}".format(created["id"]))

    assert resp.status_code == 200
    assert resp.json() == created


def test_create_missing_fields_returns_422_and_creates_nothing(client, student_payload):
    del student_payload["email"]
    del student_payload["section"]

    resp = client.post("/api/students", json=student_payload)

    assert resp.status_code == 422
    body = resp.json()
    assert body["message"] == "The given data was invalid."
    assert set(body["errors"]) == {"email", "section"}
    assert client.get("/api/students").json() == []


def test_create_duplicate_email_is_rejected(client, student_payload):
    _create(client, student_payload)
    student_payload["firstName"] = "Other"

    resp = client.post("/api/students", json=student_payload)

    assert resp.status_code == 422
    assert resp.json()["errors"] == {"email": "The email has already been taken."}
    assert len(client.get("/api/students").json()) == 1


def test_repeated_create_with_new_email_makes_a_second_record(client, student_payload):
    first = _create(client, student_payload)
    student_payload["email"] = "maria.santos2@example.com"
    second = _create(client, student_payload)
    assert first["id"] != second["id"]


def test_create_with_non_object_body_is_422(client):
    resp = client.post("/api/students", json=["not", "an", "object"])
    assert resp.status_code == 422
    assert "errors" in resp.json()


def test_create_with_nested_values_reports_every_failing_field(client, student_payload):
    student_payload["course"] = {"name": "CS"}
    student_payload["firstName"] = {"x": 1}
    student_payload["age"] = "abc"
    del student_payload["lastName"]

    resp = client.post("/api/students", json=student_payload)

    assert resp.status_code == 422
    assert resp.json()["errors"] == {
        "course": "The course field must be a string.",
        "firstName": "The first name field must be a string.",
        "age": "The age field must be an integer.",
        "lastName": "The last name field is required.",
    }


def test_create_with_display_name_email_is_rejected(client, student_payload):
    student_payload["email"] = "Maria Santos <maria.santos@example.com>"
    resp = client.post("/api/students", json=student_payload)
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"email": "The email field must be a valid email address."}

    student_payload["email"] = "maria.santos@example.com"
    assert client.post("/api/students", json=student_payload).status_code == 201
    assert len(client.get("/api/students").json()) == 1


# --- GET /api/students/{id} ---

def test_read_missing_is_404(client):
    resp = client.get("/api/students/999")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Student not found"}


def test_read_non_numeric_id_is_404(client):
    resp = client.get("/api/students/new")
    assert resp.status_code == 404


# --- PUT /api/students/{id} ---

def test_partial_update_changes_only_supplied_field(client, student_payload):
    student_payload["section"] = "A"
    created = _create(client, student_payload)

    resp = client.put("/api/students/{}".format(created["id"]), json={"section": "B"})

    assert resp.status_code == 200
    updated = resp.json()
    for field in WIRE_FIELDS + ["id", "created_at"]:
        if field != "section":
            assert updated[field] == created[field]
    assert updated["section"] == "B"


def test_update_can_clear_middle_name(client, student_payload):
    created = _create(client, student_payload)
    resp = client.put("/api/students/{}".format(created["id"]), json={"middleName": None})
    assert resp.json()["middleName"] is None


def test_update_with_empty_body_returns_record_unchanged(client, student_payload):
    created = _create(client, student_payload)
    resp = client.put("/api/students/{}".format(created["id"]), json={})
    assert resp.status_code == 200
    assert resp.json()["email"] == created["email"]


def test_update_ignores_id_in_body(client, student_payload):
    created = _create(client, student_payload)
    resp = client.put("/api/students/{}".format(created["id"]), json={"id": 42, "section": "C"})
    assert resp.json()["id"] == created["id"]


def test_update_invalid_field_is_422_and_changes_nothing(client, student_payload):
    created = _create(client, student_payload)

    resp = client.put("/api/students/{}".format(created["id"]),
                      json={"age": "twenty", "section": "Z"})

    assert resp.status_code == 422
    assert resp.json()["errors"] == {"age": "The age field must be an integer."}
    assert client.get("/api/students/{}".format(created["id"])).json()["section"] == "A"


def test_update_keeping_own_email_is_allowed(client, student_payload):
    created = _create(client, student_payload)
    resp = client.put("/api/students/{}".format(created["id"]),
                      json={"email": created["email"], "age": 22})
    assert resp.status_code == 200
    assert resp.json()["age"] == 22


def test_update_to_another_students_email_is_422(client, student_payload):
    first = _create(client, student_payload)
    student_payload["email"] = "other@example.com"
    second = _create(client, student_payload)

    resp = client.put("/api/students/{}".format(second["id"]), json={"email": first["email"]})

    assert resp.status_code == 422
    assert "email" in resp.json()["errors"]


def test_update_missing_is_404(client):
    resp = client.put("/api/students/999", json={"section": "B"})
    assert resp.status_code == 404


# --- DELETE /api/students/{id} ---

def test_delete_then_read_is_404(client, student_payload):
    created = _create(client, student_payload)

    resp = client.delete("/api/students/{}".format(created["id"]))

    assert resp.status_code == 204
    assert resp.content == b""
    assert client.get("/api/students/{}".format(created["id"])).status_code == 404


def test_delete_missing_is_404(client):
    assert client.delete("/api/students/999").status_code == 404


def test_deleted_email_can_be_reused(client, student_payload):
    created = _create(client, student_payload)
    client.delete("/api/students/{}".format(created["id"]))
    _create(client, student_payload)


# --- Ambient endpoints and headers ---

def test_every_response_has_request_id(client):
    resp = client.get("/api/students")
    assert resp.headers.get("X-Request-ID")


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
