from sqlalchemy.exc import OperationalError

from shared.auth import create_access_token
from shared.permissions import Role


async def _submit(client, payload):
    response = await client.post("/api/admissions", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def test_submit_application(client, application_payload):
    response = await client.post("/api/admissions", json=application_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["priority"] == "normal"
    assert body["applicationNumber"]
    assert body["studentName"] == "Asha Rao"
    assert body["class"] == "3"
    assert body["dateOfBirth"] == "2014-05-02"
    assert body["studentId"] is None
    assert [document["name"] for document in body["documents"]] == [
        "Birth Certificate",
        "Previous School Records",
    ]
    assert {document["status"] for document in body["documents"]} == {"pending"}


async def test_submit_accepts_snake_case_fields(client):
    body = await _submit(client, {
        "student_name": "Nikhil Jain",
        "date_of_birth": "2015-08-19",
        "class": "Grade 2",
        "parent_name": "Sunita Jain",
        "phone": "9876543210",
    })

    assert body["studentName"] == "Nikhil Jain"
    assert body["class"] == "Grade 2"


async def test_submit_reports_missing_fields(client, application_payload):
    payload = application_payload()
    del payload["studentName"]
    del payload["phone"]

    response = await client.post("/api/admissions", json=payload)

    assert response.status_code == 422
    missing = {tuple(error["loc"]) for error in response.json()["detail"]}
    assert ("body", "studentName") in missing
    assert ("body", "phone") in missing


async def test_submit_rejects_bad_values(client, application_payload):
    response = await client.post(
        "/api/admissions",
        json=application_payload(email="not-an-email", dateOfBirth="02/05/2014", priority="whenever"),
    )

    assert response.status_code == 422
    fields = {error["loc"][-1] for error in response.json()["detail"]}
    assert {"email", "dateOfBirth", "priority"} <= fields


async def test_approve_first_student_of_class(client, application_payload, admin_headers):
    application = await _submit(client, application_payload())

    response = await client.post(f"/api/admissions/{application['id']}/approve", headers=admin_headers)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["message"] == "Application approved and student created"
    assert body["rollNumber"].endswith("001")
    assert body["rollNumber"] == "202603001"
    assert body["admissionNumber"] == application["applicationNumber"]
    assert body["student"]["division"] == "3-A"
    assert body["student"]["section"] == "A"
    assert body["student"]["class"] == "3"
    assert body["student"]["admissionNumber"] == application["applicationNumber"]
    assert body["admission"]["status"] == "approved"
    assert body["admission"]["studentId"] == body["student"]["id"]
    assert body["admission"]["approvedDate"] is not None


async def test_approve_unknown_application(client, admin_headers):
    response = await client.post("/api/admissions/999999/approve", headers=admin_headers)

    assert response.status_code == 404
    assert "999999" in response.json()["detail"]

    students = await client.get("/api/students", headers=admin_headers)
    assert students.json() == []


async def test_reapprove_is_a_conflict(client, application_payload, admin_headers):
    application = await _submit(client, application_payload())
    url = f"/api/admissions/{application['id']}/approve"

    assert (await client.post(url, headers=admin_headers)).status_code == 200
    second = await client.post(url, headers=admin_headers)

    assert second.status_code == 409
    assert "already approved" in second.json()["detail"]
    students = await client.get("/api/students", headers=admin_headers)
    assert len(students.json()) == 1


async def test_list_and_filter_applications(client, application_payload, auth_headers):
    await _submit(client, application_payload())
    await _submit(client, application_payload(studentName="Vikram Shah", parentName="Meera Shah", **{"class": "5"}))
    headers = auth_headers(Role.PRINCIPAL)

    everything = await client.get("/api/admissions", headers=headers)
    assert everything.status_code == 200
    assert [item["studentName"] for item in everything.json()] == ["Vikram Shah", "Asha Rao"]

    by_class = await client.get("/api/admissions", params={"class": "3"}, headers=headers)
    assert [item["studentName"] for item in by_class.json()] == ["Asha Rao"]

    by_search = await client.get("/api/admissions", params={"search": "meera"}, headers=headers)
    assert [item["studentName"] for item in by_search.json()] == ["Vikram Shah"]

    by_status = await client.get("/api/admissions", params={"status": "approved"}, headers=headers)
    assert by_status.json() == []

    bad_status = await client.get("/api/admissions", params={"status": "archived"}, headers=headers)
    assert bad_status.status_code == 422


async def test_get_single_application(client, application_payload, admin_headers):
    application = await _submit(client, application_payload())

    found = await client.get(f"/api/admissions/{application['id']}", headers=admin_headers)
    missing = await client.get("/api/admissions/424242", headers=admin_headers)

    assert found.status_code == 200
    assert found.json()["applicationNumber"] == application["applicationNumber"]
    assert missing.status_code == 404


async def test_reject_then_approve(client, application_payload, admin_headers):
    application = await _submit(client, application_payload())

    rejected = await client.post(
        f"/api/admissions/{application['id']}/reject",
        json={"remarks": "Seats filled"},
        headers=admin_headers,
    )
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"
    assert rejected.json()["remarks"] == "Seats filled"

    approve = await client.post(f"/api/admissions/{application['id']}/approve", headers=admin_headers)
    assert approve.status_code == 409


async def test_reject_without_body(client, application_payload, admin_headers):
    application = await _submit(client, application_payload())

    rejected = await client.post(f"/api/admissions/{application['id']}/reject", headers=admin_headers)

    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"


async def test_status_and_document_updates(client, application_payload, admin_headers):
    application = await _submit(client, application_payload())
    base = f"/api/admissions/{application['id']}"

    review = await client.patch(f"{base}/status", json={"status": "document_review"}, headers=admin_headers)
    assert review.status_code == 200
    assert review.json()["status"] == "document_review"

    no_date = await client.patch(f"{base}/status", json={"status": "interview_scheduled"}, headers=admin_headers)
    assert no_date.status_code == 400

    interview = await client.patch(
        f"{base}/status",
        json={"status": "interview_scheduled", "interviewDate": "2026-11-02T10:30:00"},
        headers=admin_headers,
    )
    assert interview.status_code == 200
    assert interview.json()["interviewDate"].startswith("2026-11-02T10:30")

    closing = await client.patch(f"{base}/status", json={"status": "approved"}, headers=admin_headers)
    assert closing.status_code == 400

    document_id = application["documents"][0]["id"]
    verified = await client.patch(f"{base}/documents/{document_id}", json={"status": "verified"}, headers=admin_headers)
    assert verified.status_code == 200
    assert verified.json()["documents"][0]["status"] == "verified"

    unknown = await client.patch(f"{base}/documents/nope", json={"status": "verified"}, headers=admin_headers)
    assert unknown.status_code == 404


async def test_protected_routes_require_a_token(client, application_payload):
    application = await _submit(client, application_payload())

    listing = await client.get("/api/admissions")
    approve = await client.post(f"/api/admissions/{application['id']}/approve")
    garbage = await client.get("/api/admissions", headers={"Authorization": "Bearer not-a-jwt"})

    assert listing.status_code == 401
    assert approve.status_code == 401
    assert garbage.status_code == 401
    assert listing.headers["WWW-Authenticate"] == "Bearer"


async def test_roles_without_admissions_access_are_forbidden(client, application_payload, auth_headers):
    application = await _submit(client, application_payload())

    listing = await client.get("/api/admissions", headers=auth_headers(Role.CLASS_TEACHER))
    assert listing.status_code == 403
    assert "admissions" in listing.json()["detail"]

    for role in (Role.STUDENT, Role.PARENT, Role.ACCOUNTANT, Role.CLASS_TEACHER):
        response = await client.post(f"/api/admissions/{application['id']}/approve", headers=auth_headers(role))
        assert response.status_code == 403

    # Nothing happened to the application.
    current = await client.get(f"/api/admissions/{application['id']}", headers=auth_headers(Role.SUPER_ADMIN))
    assert current.json()["status"] == "pending"
    assert current.json()["studentId"] is None
    students = await client.get("/api/students", headers=auth_headers(Role.SUPER_ADMIN))
    assert students.json() == []


async def test_unknown_role_in_token_is_forbidden(client):
    token = create_access_token({"id": 9, "username": "ghost", "email": "", "role": "janitor"})
    response = await client.get("/api/admissions", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


async def test_database_errors_are_opaque(client, admin_headers, monkeypatch):
    async def broken(*args, **kwargs):
        raise OperationalError("SELECT secret_table", {}, Exception("disk I/O error at /var/lib/db"))

    monkeypatch.setattr("services.admissions.api.admission_router.list_admissions", broken)

    response = await client.get("/api/admissions", headers=admin_headers)

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to process request"}
    assert "secret" not in response.text


async def test_class_in_another_script_can_be_enrolled(client, application_payload, admin_headers):
    application = await _submit(client, application_payload(**{"class": "केजी"}))

    response = await client.post(f"/api/admissions/{application['id']}/approve", headers=admin_headers)

    assert response.status_code == 200, response.text
    assert response.json()["rollNumber"] == "2026कज001"
    assert response.json()["student"]["class"] == "केजी"


async def test_class_without_a_code_is_rejected_at_submission(client, application_payload):
    response = await client.post("/api/admissions", json=application_payload(**{"class": "--"}))

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "class"]


async def test_exhausted_roll_number_retries_are_opaque(client, application_payload, admin_headers, monkeypatch):
    first = await _submit(client, application_payload())
    taken = (await client.post(f"/api/admissions/{first['id']}/approve", headers=admin_headers)).json()["rollNumber"]
    second = await _submit(client, application_payload(studentName="Kabir Mehta"))

    async def always_taken(*args, **kwargs):
        return taken

    monkeypatch.setattr("services.admissions.controllers.admission_service.generate_roll_number", always_taken)

    response = await client.post(f"/api/admissions/{second['id']}/approve", headers=admin_headers)

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to process request"}
    current = await client.get(f"/api/admissions/{second['id']}", headers=admin_headers)
    assert current.json()["status"] == "pending"
    assert current.json()["studentId"] is None
    students = await client.get("/api/students", headers=admin_headers)
    assert len(students.json()) == 1
