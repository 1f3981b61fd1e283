import pytest

from conftest import HEADACHE

BOOKING = {
    "doctorName": "Dr. Sarah Johnson",
    "doctorSpecialty": "General Practitioner",
    "scheduledAt": "2030-03-14T09:30:00",
}


def _book(client, headers, **overrides):
    return client.post("/api/consultations", json={**BOOKING, **overrides}, headers=headers)


def test_list_doctors_is_public(client):
    resp = client.get("/api/doctors")
    assert resp.status_code == 200
    doctors = resp.json()
    assert len(doctors) == 4
    assert {d["available"] for d in doctors} == {True, False}


def test_book_consultation_defaults_to_pending(client, auth_headers):
    resp = _book(client, auth_headers, notes="Prefer a morning slot")

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["status"] == "pending"
    assert body["doctorName"] == "Dr. Sarah Johnson"
    assert body["scheduledAt"] == "2030-03-14T09:30:00"
    assert body["notes"] == "Prefer a morning slot"
    assert body["assessmentId"] is None


def test_book_unavailable_doctor_is_rejected(client, auth_headers):
    resp = _book(client, auth_headers, doctorName="Dr. James Ndlovu")
    assert resp.status_code == 400


def test_book_consultation_linked_to_own_assessment(client, auth_headers):
    assessment = client.post(
        "/api/assessments", json={"symptoms": [HEADACHE], "bodyParts": ["head"]}, headers=auth_headers
    ).json()

    resp = _book(client, auth_headers, assessmentId=assessment["id"])

    assert resp.status_code == 200
    assert resp.json()["assessmentId"] == assessment["id"]


def test_book_consultation_linked_to_foreign_assessment(client, auth_headers, other_headers):
    assessment = client.post(
        "/api/assessments", json={"symptoms": [HEADACHE], "bodyParts": ["head"]}, headers=other_headers
    ).json()

    assert _book(client, auth_headers, assessmentId=assessment["id"]).status_code == 403
    assert _book(client, auth_headers, assessmentId=424242).status_code == 404


def test_book_consultation_requires_doctor_fields(client, auth_headers):
    resp = client.post("/api/consultations", json={"scheduledAt": BOOKING["scheduledAt"]}, headers=auth_headers)
    assert resp.status_code == 422


def test_list_consultations_newest_first_and_scoped(client, auth_headers, other_headers):
    first = _book(client, auth_headers).json()
    second = _book(client, auth_headers, doctorName="Dr. Michael Chen", doctorSpecialty="Internal Medicine").json()
    _book(client, other_headers)

    resp = client.get("/api/consultations", headers=auth_headers)

    assert [c["id"] for c in resp.json()] == [second["id"], first["id"]]


@pytest.mark.parametrize("new_status", ["pending", "confirmed", "completed", "cancelled"])
def test_update_status_accepts_known_values(client, auth_headers, new_status):
    created = _book(client, auth_headers).json()

    resp = client.patch(
        f"/api/consultations/{created['id']}/status", json={"status": new_status}, headers=auth_headers
    )

    assert resp.status_code == 200
    assert resp.json()["status"] == new_status


def test_update_status_rejects_unknown_value(client, auth_headers):
    created = _book(client, auth_headers).json()

    resp = client.patch(
        f"/api/consultations/{created['id']}/status", json={"status": "rescheduled"}, headers=auth_headers
    )

    assert resp.status_code == 422
    listed = client.get("/api/consultations", headers=auth_headers).json()
    assert listed[0]["status"] == "pending"


def test_update_status_of_foreign_consultation_is_forbidden(client, auth_headers, other_headers):
    created = _book(client, other_headers).json()

    resp = client.patch(
        f"/api/consultations/{created['id']}/status", json={"status": "cancelled"}, headers=auth_headers
    )
    assert resp.status_code == 403


def test_update_status_of_missing_consultation(client, auth_headers):
    resp = client.patch("/api/consultations/31337/status", json={"status": "cancelled"}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Consultation not found"}


def test_offset_aware_schedule_is_stored_as_utc(client, auth_headers):
    created = _book(client, auth_headers, scheduledAt="2030-03-14T09:30:00+02:00").json()

    assert created["scheduledAt"] == "2030-03-14T07:30:00"
    listed = client.get("/api/consultations", headers=auth_headers).json()
    assert listed[0]["scheduledAt"] == "2030-03-14T07:30:00"


def test_utc_suffix_schedule_keeps_wall_time(client, auth_headers):
    created = _book(client, auth_headers, scheduledAt="2030-03-14T09:30:00Z").json()
    assert created["scheduledAt"] == "2030-03-14T09:30:00"
