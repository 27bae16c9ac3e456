"""Cancel Consultation use case."""

import logging

from ...core.utils import format_display_date
from ...domain.enums.billing import BillStatus, PaymentMethod
from ...domain.enums.pathway import Department
from ...domain.enums.workflow import AppointmentStatus
from ...domain.errors import CancellationNotAllowedError, InvalidTransitionError
from ...domain.services.appointments import can_cancel, transition
from ...domain.services.fees import format_currency
from ...domain.services.pathway import CANCELLED
from ...domain.value_objects.money import ZERO
from ..dto.appointment_dto import CancelConsultationRequest, CancelConsultationResponse
from ..ports.store import HospitalStore
from ..services.lookups import require_appointment, require_patient

logger = logging.getLogger("hospitalflow")


class CancelConsultationUseCase:
    """Cancel an appointment before the patient has reached a clinical department.

    A cash patient who already paid is refunded to their deposit balance. Bills
    still pending on the visit, such as prescriptions awaiting the cash point,
    are cancelled with it.
    """

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: CancelConsultationRequest) -> CancelConsultationResponse:
        appointment = await require_appointment(self._store, request.appointment_id)
        if not appointment.is_open:
            raise InvalidTransitionError(
                "appointment",
                appointment.appointment_id,
                appointment.status.value,
                AppointmentStatus.CANCELLED.value,
            )

        patient = await require_patient(self._store, appointment.patient_id)
        visit = patient.find_visit(appointment.visit_id) if appointment.visit_id else None
        if not can_cancel(appointment, visit):
            raise CancellationNotAllowedError(appointment.appointment_id, visit.department.value)

        bill = None
        if appointment.bill_id:
            bill = await self._store.bills.find_by_id(appointment.bill_id)

        # Prescriptions billed at the cash point are dropped along with the consultation.
        open_bills = []
        if visit is not None and visit.location.is_at(Department.CASH_POINT):
            open_bills = [
                b
                for b in await self._store.bills.find_by_visit(visit.visit_id)
                if b.status == BillStatus.PENDING and b.bill_id != appointment.bill_id
            ]

        reason = (request.reason or "").strip() or "Cancelled at front desk"
        cancelled_by = request.cancelled_by or "Front Desk"
        stamp = format_display_date()

        refund = ZERO
        bill_changed = bill is not None and bill.status != BillStatus.CANCELLED
        if bill_changed:
            if bill.status == BillStatus.PAID and bill.payment_method != PaymentMethod.HMO:
                refund = bill.total
            note = f"Cancelled by {cancelled_by} ({stamp}): {reason}"
            if refund > 0:
                note = f"{note}. Refunded {format_currency(refund)} to patient balance"
            bill.cancel(note)
        for open_bill in open_bills:
            open_bill.cancel(f"Cancelled by {cancelled_by} ({stamp}): {reason}")

        if visit is not None:
            visit.move_to(Department.COMPLETED, CANCELLED)
            visit.append_note(f"Consultation cancelled by {cancelled_by} ({stamp}): {reason}")

        transition(appointment, AppointmentStatus.CANCELLED)
        appointment.cancellation_reason = reason

        if bill_changed:
            bill = await self._store.bills.update(bill)
        for open_bill in open_bills:
            await self._store.bills.update(open_bill)
        if visit is not None:
            patient = await self._store.patients.update(patient)
        if refund > 0:
            patient = await self._store.patients.update_balance(patient.patient_id, refund)
        appointment = await self._store.appointments.update(appointment)

        logger.info(
            f"Appointment {appointment.appointment_id} cancelled by {cancelled_by}"
            + (f"; refunded {format_currency(refund)}" if refund > 0 else "")
        )
        return CancelConsultationResponse(
            appointment=appointment,
            bill=bill,
            visit=visit,
            refunded_amount=refund,
            patient_balance=patient.balance,
        )
