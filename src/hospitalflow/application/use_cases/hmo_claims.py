"""
HMO desk use cases: adjudicating claims, watching the claim feed and
repairing bills that never got their claim.
"""

import logging
from typing import List, Optional

from ...core.utils import format_display_date
from ...domain.entities.claim import HMOClaim
from ...domain.enums.billing import BillStatus, BillType, PaymentMethod
from ...domain.enums.claims import ClaimDecision, ClaimStatus, SourceDepartment
from ...domain.enums.pathway import Department
from ...domain.enums.workflow import AppointmentStatus
from ...domain.errors import InvalidFieldError, InvalidTransitionError
from ...domain.services.appointments import transition
from ...domain.services.claims import (
    DEFAULT_APPROVAL_REFERENCE,
    decision_note,
    route_after_decision,
)
from ...domain.value_objects.fee_schedule import FeeSchedule
from ..dto.claim_dto import (
    ClaimFeedResponse,
    ProcessClaimRequest,
    ProcessClaimResponse,
    WatchClaimsRequest,
)
from ..ports.store import HospitalStore
from ..services import change_feed as topics
from ..services.billing_service import SOURCE_FOR_BILL_TYPE, BillingService
from ..services.lifecycle import settle_visit
from ..services.lookups import require_bill, require_claim, require_patient, require_text

logger = logging.getLogger("hospitalflow")


class ProcessHMOClaimUseCase:
    """Approve or reject a pending claim and move the bill and patient accordingly."""

    def __init__(self, store: HospitalStore, desk_name: str = "HMO Desk"):
        self._store = store
        self._desk_name = desk_name

    async def execute(self, request: ProcessClaimRequest) -> ProcessClaimResponse:
        claim = await require_claim(self._store, request.claim_id)
        decision = ClaimDecision(request.decision)
        target = ClaimStatus.APPROVED if decision == ClaimDecision.APPROVED else ClaimStatus.REJECTED
        if claim.status != ClaimStatus.PENDING:
            raise InvalidTransitionError("claim", claim.claim_id, claim.status.value, target.value)

        reason = None
        if decision == ClaimDecision.REJECTED:
            reason = require_text(request.rejection_reason, "rejection_reason", "when rejecting a claim")
        if request.approved_item_ids is not None:
            known = {item.item_id for item in claim.items}
            unknown = [item_id for item_id in request.approved_item_ids if item_id not in known]
            if unknown:
                raise InvalidFieldError("approved_item_ids", unknown, "not items of this claim")

        bill = await require_bill(self._store, claim.source_id)
        patient = await require_patient(self._store, claim.patient_id)
        visit = patient.find_visit(bill.visit_id) if bill.visit_id else patient.latest_visit

        appointment = None
        if (
            decision == ClaimDecision.REJECTED
            and claim.source_department == SourceDepartment.DOCTOR
            and bill.appointment_id
        ):
            candidate = await self._store.appointments.find_by_id(bill.appointment_id)
            # Only the original consultation bill cancels the appointment; upgrade bills do not.
            if candidate is not None and candidate.bill_id == bill.bill_id and candidate.is_open:
                appointment = candidate

        approver = (request.approver or "").strip() or self._desk_name
        code = (request.approval_code or "").strip() or None

        if decision == ClaimDecision.APPROVED:
            claim.approve(approver, code, request.approved_item_ids, request.notes)
            reference = code or DEFAULT_APPROVAL_REFERENCE
            if bill.status == BillStatus.PAID:
                bill.payment_method = PaymentMethod.HMO
                bill.payment_reference = reference
                bill.processed_by = approver
            else:
                bill.mark_paid(PaymentMethod.HMO, reference, approver)
        else:
            claim.reject(approver, reason, request.notes)
            if bill.status != BillStatus.CANCELLED:
                bill.cancel(f"Rejected by {approver}: {reason}")

        dose_dropped = (
            decision == ClaimDecision.REJECTED
            and bill.bill_type == BillType.VACCINATION
            and patient.remove_vaccination(bill.bill_id)
        )

        if visit is not None:
            cascade = appointment is not None
            if cascade or visit.location.is_at(Department.HMO_DESK):
                visit.location = route_after_decision(
                    visit.location, claim.source_department, decision, visit.visit_type
                )
            visit.append_note(
                decision_note(claim, decision, self._desk_name, format_display_date(), code)
            )
        if appointment is not None:
            transition(appointment, AppointmentStatus.CANCELLED)
            appointment.cancellation_reason = f"HMO claim rejected: {reason}"

        claim = await self._store.claims.update(claim)
        bill = await self._store.bills.update(bill)
        if visit is not None or dose_dropped:
            await self._store.patients.update(patient)
        if appointment is not None:
            appointment = await self._store.appointments.update(appointment)
        elif visit is not None and visit.location.is_completed:
            appointment = await settle_visit(self._store, visit)

        logger.info(
            f"Claim {claim.claim_id} {claim.status.value} by {approver}; bill {bill.bill_id} "
            f"[{bill.status.value}]"
            + (f", visit now {visit.location}" if visit is not None else "")
        )
        return ProcessClaimResponse(claim=claim, bill=bill, visit=visit, appointment=appointment)


class CompleteClaimUseCase:
    """Mark an approved claim completed once the service has been delivered."""

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, claim_id: str) -> HMOClaim:
        claim = await require_claim(self._store, claim_id)
        claim.complete()
        claim = await self._store.claims.update(claim)
        logger.info(f"Claim {claim.claim_id} completed")
        return claim


class ListClaimsUseCase:
    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, status: Optional[ClaimStatus] = None) -> List[HMOClaim]:
        claims = await self._store.claims.find_by_status(status)
        return sorted(claims, key=lambda c: c.date, reverse=True)


class WatchClaimsUseCase:
    """Long-poll the claim topic.

    Without ``since`` the current claims are returned immediately. With it,
    the call waits up to ``timeout`` seconds for the claim revision to move
    and returns ``changed=False`` with no claims when it does not.
    """

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: WatchClaimsRequest) -> ClaimFeedResponse:
        feed = self._store.feed
        if request.since is None:
            revision = feed.revision(topics.CLAIM)
            changed = True
        else:
            revision = await feed.wait_for_change(topics.CLAIM, request.since, request.timeout)
            changed = revision > request.since

        claims: List[HMOClaim] = []
        if changed:
            claims = await ListClaimsUseCase(self._store).execute(request.status)
        return ClaimFeedResponse(revision=revision, changed=changed, claims=claims)


class RefreshHMOClaimsUseCase:
    """Open the missing claim for every HMO bill awaiting adjudication.

    Covers ``hmo_pending`` bills and HMO-paid consultation bills.
    """

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._billing = BillingService(store, fee_schedule)

    async def execute(self) -> List[HMOClaim]:
        created: List[HMOClaim] = []
        for bill in await self._store.bills.find_all():
            awaiting = bill.status == BillStatus.HMO_PENDING or (
                bill.bill_type == BillType.CONSULTATION
                and bill.status == BillStatus.PAID
                and bill.payment_method == PaymentMethod.HMO
            )
            if not awaiting:
                continue
            if await self._store.claims.find_by_source_id(bill.bill_id) is not None:
                continue
            patient = await self._store.patients.find_by_id(bill.patient_id)
            if patient is None or not patient.is_hmo:
                continue
            source = bill.source_department or SOURCE_FOR_BILL_TYPE.get(bill.bill_type)
            if source is None:
                continue
            created.append(await self._billing.open_claim_for_bill(bill, patient, source))

        if created:
            logger.info(f"Claim refresh opened {len(created)} missing claim(s)")
        return created
