"""
Bill to HMO claim linkage and HMO desk decisions.
"""

import pytest

from hospitalflow.application.dto.claim_dto import ProcessClaimRequest
from hospitalflow.application.dto.clinical_dto import CompleteConsultationRequest, OrderLine
from hospitalflow.application.use_cases.complete_consultation import CompleteConsultationUseCase
from hospitalflow.application.use_cases.hmo_claims import (
    CompleteClaimUseCase,
    ProcessHMOClaimUseCase,
    RefreshHMOClaimsUseCase,
)
from hospitalflow.domain.entities.bill import Bill, BillItem
from hospitalflow.domain.entities.patient import Patient
from hospitalflow.domain.enums.billing import BillStatus, BillType, PaymentMethod
from hospitalflow.domain.enums.claims import ClaimDecision, ClaimStatus, SourceDepartment
from hospitalflow.domain.enums.pathway import Department
from hospitalflow.domain.enums.workflow import (
    AppointmentStatus,
    ConsultationDestination,
    PatientType,
    VisitType,
)
from hospitalflow.domain.errors import (
    DuplicateClaimError,
    InvalidFieldError,
    InvalidTransitionError,
    MissingFieldError,
)
from hospitalflow.domain.services import claims
from hospitalflow.domain.value_objects.care_location import CareLocation


def _hmo_patient():
    return Patient(
        patient_id="P-1001",
        name="Ada Obi",
        phone="080",
        patient_type=PatientType.HMO,
        hmo_provider="Hygeia",
    )


def _bill(bill_id="BILL-1001"):
    return Bill(
        bill_id=bill_id,
        patient_id="P-1001",
        patient_name="Ada Obi",
        bill_type=BillType.PHARMACY,
        items=[
            BillItem(description="Artemether", quantity=1, unit_price=2500),
            BillItem(description="Paracetamol", quantity=2, unit_price=200),
        ],
    )


@pytest.mark.parametrize(
    "source,expected",
    [
        (SourceDepartment.DOCTOR, "HMO-CONS-P-1001-BILL-1001"),
        (SourceDepartment.PHARMACY, "HMO-PHARM-BILL-1001"),
        (SourceDepartment.LABORATORY, "HMO-LAB-BILL-1001"),
        (SourceDepartment.INJECTION_ROOM, "HMO-INJ-BILL-1001"),
    ],
)
def test_claim_ids(source, expected):
    assert claims.claim_id_for(source, "P-1001", "BILL-1001") == expected


def test_claim_mirrors_bill_items_unapproved():
    bill = _bill()
    claim = claims.claim_from_bill(bill, _hmo_patient(), SourceDepartment.PHARMACY)

    assert claim.source_id == bill.bill_id
    assert claim.hmo_provider == "Hygeia"
    assert claim.status == ClaimStatus.PENDING
    assert [i.item_id for i in claim.items] == [i.item_id for i in bill.items]
    assert not any(i.approved for i in claim.items)
    assert claim.total == bill.total


def test_partial_approval_totals():
    bill = _bill()
    claim = claims.claim_from_bill(bill, _hmo_patient(), SourceDepartment.PHARMACY)
    claim.approve("HMO Desk", item_ids=[bill.items[0].item_id])

    assert claim.approved_total == bill.items[0].amount
    assert claim.status == ClaimStatus.APPROVED


def test_ensure_unlinked_refuses_second_claim():
    bill = _bill()
    claim = claims.claim_from_bill(bill, _hmo_patient(), SourceDepartment.PHARMACY)
    with pytest.raises(DuplicateClaimError):
        claims.ensure_unlinked(bill, [claim])


def test_claim_decisions_are_final():
    claim = claims.claim_from_bill(_bill(), _hmo_patient(), SourceDepartment.PHARMACY)
    claim.reject("HMO Desk", "Not covered")
    with pytest.raises(InvalidTransitionError):
        claim.approve("HMO Desk")
    with pytest.raises(InvalidTransitionError):
        claim.complete()


@pytest.mark.parametrize(
    "source,decision,department",
    [
        (SourceDepartment.DOCTOR, ClaimDecision.APPROVED, Department.VITALS),
        (SourceDepartment.PHARMACY, ClaimDecision.APPROVED, Department.COMPLETED),
        (SourceDepartment.LABORATORY, ClaimDecision.APPROVED, Department.LABORATORY),
        (SourceDepartment.INJECTION_ROOM, ClaimDecision.APPROVED, Department.INJECTION_ROOM),
        (SourceDepartment.PHARMACY, ClaimDecision.REJECTED, Department.PHARMACY),
        (SourceDepartment.LABORATORY, ClaimDecision.REJECTED, Department.DOCTOR_QUEUE),
        (SourceDepartment.INJECTION_ROOM, ClaimDecision.REJECTED, Department.DOCTOR_QUEUE),
    ],
)
def test_routes_after_decision(source, decision, department):
    location = CareLocation(Department.HMO_DESK, "Malaria")
    routed = claims.route_after_decision(location, source, decision)
    assert routed == CareLocation(department, "Malaria")


def test_rejected_consultation_is_cancelled():
    location = CareLocation(Department.HMO_DESK, "Initial Consultation")
    routed = claims.route_after_decision(location, SourceDepartment.DOCTOR, ClaimDecision.REJECTED)
    assert routed == CareLocation(Department.COMPLETED, "Cancelled")


def test_rejected_vaccination_is_cancelled():
    location = CareLocation(Department.HMO_DESK, "Vaccination")
    routed = claims.route_after_decision(
        location, SourceDepartment.INJECTION_ROOM, ClaimDecision.REJECTED, VisitType.VACCINATION
    )
    assert routed == CareLocation(Department.COMPLETED, "Cancelled")


@pytest.mark.asyncio
async def test_hmo_check_in_opens_one_doctor_claim(store, register, walk_in):
    patient = await register(hmo=True)
    outcome = await walk_in(patient)

    assert outcome.bill.status == BillStatus.PAID
    assert outcome.bill.payment_method == PaymentMethod.HMO
    assert outcome.bill.payment_reference.startswith("HMO-AUTO")
    assert outcome.claim.source_department == SourceDepartment.DOCTOR
    assert outcome.claim.source_id == outcome.bill.bill_id
    assert outcome.visit.location == CareLocation(Department.HMO_DESK, "Initial Consultation")
    assert len(await store.claims.find_by_patient(patient.patient_id)) == 1


@pytest.mark.asyncio
async def test_approving_consultation_sends_patient_to_vitals(store, register, walk_in):
    patient = await register(hmo=True)
    outcome = await walk_in(patient)

    result = await ProcessHMOClaimUseCase(store).execute(
        ProcessClaimRequest(
            claim_id=outcome.claim.claim_id,
            decision=ClaimDecision.APPROVED,
            approval_code="AUTH-123",
        )
    )

    assert result.claim.status == ClaimStatus.APPROVED
    assert result.claim.processed_by == "HMO Desk"
    assert result.bill.status == BillStatus.PAID
    assert result.bill.payment_reference == "AUTH-123"
    assert result.visit.department == Department.VITALS
    assert "AUTH-123" in result.visit.notes


@pytest.mark.asyncio
async def test_rejecting_consultation_cancels_appointment(store, register, walk_in):
    patient = await register(hmo=True)
    outcome = await walk_in(patient)

    result = await ProcessHMOClaimUseCase(store).execute(
        ProcessClaimRequest(
            claim_id=outcome.claim.claim_id,
            decision=ClaimDecision.REJECTED,
            rejection_reason="Policy expired",
        )
    )

    assert result.claim.status == ClaimStatus.REJECTED
    assert result.bill.status == BillStatus.CANCELLED
    assert result.visit.location == CareLocation(Department.COMPLETED, "Cancelled")
    assert result.appointment.status == AppointmentStatus.CANCELLED
    stored = await store.appointments.find_by_id(outcome.appointment.appointment_id)
    assert stored.status == AppointmentStatus.CANCELLED


@pytest.mark.asyncio
async def test_rejection_needs_reason(store, register, walk_in):
    patient = await register(hmo=True)
    outcome = await walk_in(patient)

    with pytest.raises(MissingFieldError):
        await ProcessHMOClaimUseCase(store).execute(
            ProcessClaimRequest(claim_id=outcome.claim.claim_id, decision=ClaimDecision.REJECTED)
        )
    claim = await store.claims.find_by_id(outcome.claim.claim_id)
    assert claim.status == ClaimStatus.PENDING


@pytest.mark.asyncio
async def test_unknown_approved_items_are_refused(store, register, walk_in):
    patient = await register(hmo=True)
    outcome = await walk_in(patient)

    with pytest.raises(InvalidFieldError):
        await ProcessHMOClaimUseCase(store).execute(
            ProcessClaimRequest(
                claim_id=outcome.claim.claim_id,
                decision=ClaimDecision.APPROVED,
                approved_item_ids=["ITEM-NOPE"],
            )
        )


@pytest.mark.asyncio
async def test_claim_cannot_be_processed_twice(store, register, walk_in):
    patient = await register(hmo=True)
    outcome = await walk_in(patient)
    use_case = ProcessHMOClaimUseCase(store)
    request = ProcessClaimRequest(claim_id=outcome.claim.claim_id, decision=ClaimDecision.APPROVED)

    await use_case.execute(request)
    with pytest.raises(InvalidTransitionError):
        await use_case.execute(request)


@pytest.mark.asyncio
async def test_lab_order_for_hmo_patient_waits_on_desk(store, register, walk_in, fee_schedule):
    patient = await register(hmo=True)
    outcome = await walk_in(patient)
    await ProcessHMOClaimUseCase(store).execute(
        ProcessClaimRequest(claim_id=outcome.claim.claim_id, decision=ClaimDecision.APPROVED)
    )
    stored = await store.patients.find_by_id(patient.patient_id)
    stored.current_visit().move_to(Department.DOCTOR_QUEUE)
    await store.patients.update(stored)

    lab = await CompleteConsultationUseCase(store, fee_schedule).execute(
        CompleteConsultationRequest(
            patient_id=patient.patient_id,
            diagnosis="Typhoid",
            destination=ConsultationDestination.LABORATORY,
            lab_tests=[OrderLine(description="Widal test", unit_price=3000)],
        )
    )

    assert lab.bill.status == BillStatus.HMO_PENDING
    assert lab.claim.claim_id == f"HMO-LAB-{lab.bill.bill_id}"
    assert lab.visit.location == CareLocation(Department.HMO_DESK, "Typhoid")

    rejected = await ProcessHMOClaimUseCase(store).execute(
        ProcessClaimRequest(
            claim_id=lab.claim.claim_id,
            decision=ClaimDecision.REJECTED,
            rejection_reason="Not covered",
        )
    )
    assert rejected.visit.location == CareLocation(Department.DOCTOR_QUEUE, "Typhoid")
    # Only the consultation claim cancels the appointment.
    assert rejected.appointment is None
    appointment = await store.appointments.find_by_id(outcome.appointment.appointment_id)
    assert appointment.status == AppointmentStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_complete_claim_requires_approval(store, register, walk_in):
    patient = await register(hmo=True)
    outcome = await walk_in(patient)

    with pytest.raises(InvalidTransitionError):
        await CompleteClaimUseCase(store).execute(outcome.claim.claim_id)

    await ProcessHMOClaimUseCase(store).execute(
        ProcessClaimRequest(claim_id=outcome.claim.claim_id, decision=ClaimDecision.APPROVED)
    )
    claim = await CompleteClaimUseCase(store).execute(outcome.claim.claim_id)
    assert claim.status == ClaimStatus.COMPLETED


@pytest.mark.asyncio
async def test_refresh_opens_missing_claims_once(store, register, fee_schedule):
    patient = await register(hmo=True)
    bill = Bill(
        bill_id=await store.bills.next_id(),
        patient_id=patient.patient_id,
        patient_name=patient.name,
        bill_type=BillType.LABORATORY,
        items=[BillItem(description="Malaria parasite", unit_price=1500)],
        status=BillStatus.HMO_PENDING,
    )
    await store.bills.add(bill)

    created = await RefreshHMOClaimsUseCase(store, fee_schedule).execute()
    assert [c.source_id for c in created] == [bill.bill_id]
    assert created[0].source_department == SourceDepartment.LABORATORY

    assert await RefreshHMOClaimsUseCase(store, fee_schedule).execute() == []
