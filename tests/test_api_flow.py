"""
HTTP-level tests: a patient journey through the routers and the error mapping.
"""

import pytest


@pytest.fixture
def patient_id(client):
    response = client.post("/patients/", json={"name": "Chidi Okafor", "phone": "08031234567"})
    assert response.status_code == 201
    return response.json()["data"]["patient_id"]


@pytest.fixture
def hmo_patient_id(client):
    response = client.post(
        "/patients/",
        json={"name": "Bola Ade", "phone": "08039876543", "patient_type": "hmo", "hmo_provider": "Hygeia"},
    )
    assert response.status_code == 201
    return response.json()["data"]["patient_id"]


def _walk_in(client, patient_id, doctor_id="STAFF-002"):
    response = client.post(
        "/appointments/walk-in",
        json={"patient_id": patient_id, "doctor_id": doctor_id, "presenting_complaints": "Cough"},
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_cash_consultation_over_http(client, patient_id):
    check_in = _walk_in(client, patient_id)
    assert check_in["visit"]["department"] == "doctor_queue"
    assert check_in["visit"]["diagnosis"] == "Pending"
    assert check_in["bill"]["total"] == 5000.0

    paid = client.post(f"/billing/{check_in['bill']['bill_id']}/pay", json={"method": "cash"})
    assert paid.status_code == 200
    assert paid.json()["data"]["bill"]["status"] == "paid"
    assert paid.json()["data"]["bill"]["payment_reference"].startswith("CASH-")

    vitals = client.post("/clinical/vitals", json={"patient_id": patient_id, "temperature": "37.9"})
    assert vitals.status_code == 200
    assert vitals.json()["data"]["department"] == "doctor_queue"

    consult = client.post(
        "/clinical/consultations",
        json={
            "patient_id": patient_id,
            "diagnosis": "Upper respiratory infection",
            "destination": "pharmacy",
            "prescriptions": [{"medication": "Amoxicillin", "dosage": "500mg", "quantity": 2, "unit_price": 1200}],
        },
    )
    assert consult.status_code == 200
    assert consult.json()["data"]["visit"]["diagnosis"] == "With Pharmacy: Upper respiratory infection"

    billed = client.post("/clinical/pharmacy/bills", json={"patient_id": patient_id})
    assert billed.status_code in (200, 201)
    pharmacy_bill = billed.json()["data"]["bill"]
    assert pharmacy_bill["total"] == 2400.0

    paid = client.post(f"/billing/{pharmacy_bill['bill_id']}/pay", json={"method": "transfer", "reference": "TRF-778"})
    data = paid.json()["data"]
    assert data["visit"]["department"] == "completed"
    assert data["appointment"]["status"] == "completed"

    history = client.get(f"/patients/{patient_id}/history")
    assert history.status_code == 200


def test_hmo_desk_over_http(client, hmo_patient_id):
    check_in = _walk_in(client, hmo_patient_id, doctor_id="STAFF-003")
    assert check_in["visit"]["diagnosis"] == "With HMO: Initial Consultation"
    claim_id = check_in["claim"]["claim_id"]

    feed = client.get("/hmo/claims/changes").json()["data"]
    assert feed["changed"] is True
    assert [c["claim_id"] for c in feed["claims"]] == [claim_id]

    quiet = client.get("/hmo/claims/changes", params={"since": feed["revision"]})
    assert quiet.json()["data"]["changed"] is False
    assert quiet.json()["message"] == "No changes"

    processed = client.post(f"/hmo/claims/{claim_id}/process", json={"decision": "approved", "approval_code": "AUTH-9"})
    assert processed.status_code == 200
    assert processed.json()["data"]["visit"]["department"] == "vitals"

    again = client.post(f"/hmo/claims/{claim_id}/process", json={"decision": "approved"})
    assert again.status_code == 400
    assert again.json()["error"] == "INVALID_TRANSITION"

    moved = client.get("/hmo/claims/changes", params={"since": feed["revision"]}).json()["data"]
    assert moved["changed"] is True
    assert moved["claims"][0]["status"] == "approved"


def test_unknown_patient_is_404(client):
    response = client.get("/patients/P-9999")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "PATIENT_NOT_FOUND"


def test_request_validation_is_422(client):
    response = client.post("/patients/", json={"phone": "0803"})
    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"


def test_patient_edit_over_http(client, patient_id):
    edited = client.patch(f"/patients/{patient_id}", json={"address": "5 Awolowo Road", "version": 1})
    assert edited.status_code == 200
    assert edited.json()["data"]["address"] == "5 Awolowo Road"
    assert edited.json()["data"]["version"] == 2

    stale = client.patch(f"/patients/{patient_id}", json={"address": "Old address", "version": 1})
    assert stale.status_code == 409
    assert stale.json()["error"] == "STALE_ENTITY"

    no_provider = client.patch(f"/patients/{patient_id}", json={"patient_type": "hmo"})
    assert no_provider.status_code == 422
    assert no_provider.json()["error"] == "MISSING_FIELD"

    assert client.get(f"/patients/{patient_id}").json()["data"]["address"] == "5 Awolowo Road"


def test_card_without_reference_is_422(client, patient_id):
    check_in = _walk_in(client, patient_id)
    response = client.post(f"/billing/{check_in['bill']['bill_id']}/pay", json={"method": "card"})
    assert response.status_code == 422
    assert response.json()["error"] == "MISSING_FIELD"


def test_insufficient_balance_is_400(client, patient_id):
    check_in = _walk_in(client, patient_id)
    response = client.post(f"/billing/{check_in['bill']['bill_id']}/pay", json={"method": "balance"})
    assert response.status_code == 400
    assert response.json()["error"] == "INSUFFICIENT_BALANCE"


def test_deposit_then_pay_from_balance(client, patient_id):
    deposit = client.post(f"/patients/{patient_id}/deposits", json={"amount": 6000})
    assert deposit.status_code == 201
    assert deposit.json()["data"]["patient_balance"] == 6000.0

    check_in = _walk_in(client, patient_id)
    paid = client.post(f"/billing/{check_in['bill']['bill_id']}/pay", json={"method": "balance"})
    assert paid.status_code == 200
    assert paid.json()["data"]["patient_balance"] == 1000.0


def test_search_and_doctor_roster(client, patient_id):
    found = client.get("/patients/search", params={"q": "chidi"}).json()["data"]
    assert [p["patient_id"] for p in found] == [patient_id]

    doctors = client.get("/appointments/doctors").json()["data"]
    assert {d["staff_id"] for d in doctors} == {"STAFF-002", "STAFF-003", "STAFF-004", "STAFF-005"}


def test_fee_calculator(client):
    response = client.post(
        "/billing/calculate",
        json={"items": [{"description": "Consultation", "unit_price": 5000}], "is_staff": True},
    )
    data = response.json()["data"]
    assert data["total"] == 4000.0
    assert data["discount"] == 20
    assert data["formatted_total"] == "₦4,000"
