"""
Appointment lifecycle rules.

``transition`` is the only writer of ``Appointment.status``. ``settle`` is
called whenever a bill or visit reaches a terminal state, so the stored
status never lags behind the patient's real progress.
"""

from datetime import datetime
from typing import Dict, FrozenSet, Optional

from ..entities.appointment import Appointment
from ..entities.bill import Bill
from ..entities.visit import Visit
from ..enums.billing import BillStatus
from ..enums.pathway import Department
from ..enums.workflow import AppointmentStatus
from ..errors import InvalidTransitionError

ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {AppointmentStatus.IN_PROGRESS, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.IN_PROGRESS: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}

CANCELLABLE_DEPARTMENTS = frozenset(
    {Department.DOCTOR_QUEUE, Department.VITALS, Department.CASH_POINT}
)

# Departments from which a paid consultation can still move to another doctor.
DOCTOR_CHANGE_DEPARTMENTS = frozenset(
    {Department.DOCTOR_QUEUE, Department.VITALS, Department.CASH_POINT}
)


def can_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def transition(appointment: Appointment, target: AppointmentStatus) -> Appointment:
    if not can_transition(appointment.status, target):
        raise InvalidTransitionError(
            "appointment", appointment.appointment_id, appointment.status.value, target.value
        )
    appointment.status = target
    appointment.updated_at = datetime.utcnow()
    return appointment


def is_settled(bill: Optional[Bill], visit: Optional[Visit]) -> bool:
    """Consultation paid for and the patient has left the pathway."""
    if bill is None or visit is None:
        return False
    return bill.is_settled and visit.department == Department.COMPLETED


def settle(appointment: Appointment, bill: Optional[Bill], visit: Optional[Visit]) -> bool:
    """Complete an in-progress appointment once its bill and visit are terminal.

    Returns True when the status changed.
    """
    if appointment.status != AppointmentStatus.IN_PROGRESS:
        return False
    if not is_settled(bill, visit):
        return False
    transition(appointment, AppointmentStatus.COMPLETED)
    return True


def can_cancel(appointment: Appointment, visit: Optional[Visit]) -> bool:
    if appointment.status == AppointmentStatus.SCHEDULED:
        return True
    if appointment.status != AppointmentStatus.IN_PROGRESS:
        return False
    if visit is None:
        return True
    return visit.department in CANCELLABLE_DEPARTMENTS


def can_change_doctor(appointment: Appointment, bill: Optional[Bill], visit: Optional[Visit]) -> bool:
    if not appointment.is_open:
        return False
    if bill is None or bill.status == BillStatus.PENDING:
        return True
    if bill.status == BillStatus.PAID:
        return visit is None or visit.department in DOCTOR_CHANGE_DEPARTMENTS
    return False
