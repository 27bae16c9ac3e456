"""Cash point use cases: taking payment and applying the staff discount."""

import logging

from ...core.utils import format_display_date, generate_reference
from ...domain.entities.bill import Bill
from ...domain.enums.billing import BillDestination, BillStatus, BillType, PaymentMethod
from ...domain.enums.pathway import Department
from ...domain.errors import (
    InsufficientBalanceError,
    InvalidFieldError,
    InvalidTransitionError,
    MissingFieldError,
)
from ...domain.services import fees
from ...domain.value_objects.fee_schedule import FeeSchedule
from ..dto.billing_dto import PaymentResponse, ProcessPaymentRequest
from ..ports.store import HospitalStore
from ..services.lifecycle import settle_visit
from ..services.lookups import require_bill, require_patient

logger = logging.getLogger("hospitalflow")

REFERENCE_PREFIXES = {
    PaymentMethod.CASH: "CASH",
    PaymentMethod.BALANCE: "BALANCE",
}
REFERENCE_REQUIRED = (PaymentMethod.CARD, PaymentMethod.TRANSFER)


class ProcessPaymentUseCase:
    """Settle a pending bill at the cash point.

    Only two payments move the patient: a pharmacy bill paid at the cash
    point discharges the visit, and a vaccination bill sends the patient to
    the injection room.
    """

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._fee_schedule = fee_schedule

    async def execute(self, request: ProcessPaymentRequest) -> PaymentResponse:
        bill = await require_bill(self._store, request.bill_id)
        if bill.status != BillStatus.PENDING:
            raise InvalidTransitionError(
                "bill", bill.bill_id, bill.status.value, BillStatus.PAID.value
            )
        method = PaymentMethod(request.method)
        if method == PaymentMethod.HMO:
            raise InvalidFieldError(
                "method", method.value, "HMO bills are settled at the HMO desk"
            )
        reference = (request.reference or "").strip()
        if method in REFERENCE_REQUIRED and not reference:
            raise MissingFieldError("reference", f"for {method.value} payments")

        patient = await require_patient(self._store, bill.patient_id)
        fees.apply_staff_discount(bill, patient.is_staff, self._fee_schedule)
        total = bill.total
        if method == PaymentMethod.BALANCE and patient.balance < total:
            raise InsufficientBalanceError(patient.patient_id, patient.balance, total)
        if method in REFERENCE_PREFIXES:
            reference = generate_reference(REFERENCE_PREFIXES[method])

        processed_by = request.processed_by or "Cash Point"
        bill.mark_paid(method, reference, processed_by)

        visit = patient.find_visit(bill.visit_id) if bill.visit_id else None
        visit_moved = visit is not None and self._route_visit(bill, visit)
        if visit_moved:
            visit.append_note(
                f"Cash Point ({format_display_date()}): {bill.bill_type.value} bill "
                f"{bill.bill_id} paid, {fees.format_currency(total)} by {method.value}"
            )

        bill = await self._store.bills.update(bill)
        if visit_moved:
            patient = await self._store.patients.update(patient)
        if method == PaymentMethod.BALANCE:
            patient = await self._store.patients.update_balance(patient.patient_id, -total)

        appointment = await settle_visit(self._store, visit)

        logger.info(
            f"Bill {bill.bill_id} paid by {method.value} ({reference}): "
            f"{fees.format_currency(total)}"
        )
        return PaymentResponse(
            bill=bill,
            patient_balance=patient.balance,
            visit=visit,
            appointment=appointment,
        )

    @staticmethod
    def _route_visit(bill: Bill, visit) -> bool:
        if not visit.location.is_at(Department.CASH_POINT):
            return False
        if bill.bill_type == BillType.PHARMACY:
            bill.destination = BillDestination.FINAL
            visit.move_to(Department.COMPLETED)
            return True
        if bill.bill_type == BillType.VACCINATION:
            bill.destination = BillDestination.INJECTION
            visit.move_to(Department.INJECTION_ROOM)
            return True
        return False


class ApplyStaffDiscountUseCase:
    """Record the staff discount on an unpaid bill."""

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._fee_schedule = fee_schedule

    async def execute(self, bill_id: str) -> Bill:
        bill = await require_bill(self._store, bill_id)
        if bill.status not in (BillStatus.PENDING, BillStatus.HMO_PENDING):
            raise InvalidFieldError("bill_id", bill_id, f"bill is already {bill.status.value}")
        patient = await require_patient(self._store, bill.patient_id)
        if not patient.is_staff:
            raise InvalidFieldError(
                "patient_id", patient.patient_id, "staff discount applies to staff patients only"
            )

        if fees.apply_staff_discount(bill, True, self._fee_schedule):
            bill = await self._store.bills.update(bill)
            logger.info(
                f"Staff discount of {bill.discount}% applied to bill {bill.bill_id}: "
                f"{fees.format_currency(bill.original_total)} -> {fees.format_currency(bill.total)}"
            )
        return bill
