"""
Keeps appointment status in step with bills and visits.
"""

import logging
from typing import Optional

from ...domain.entities.visit import Visit
from ...domain.entities.appointment import Appointment
from ...domain.services.appointments import settle
from ..ports.store import HospitalStore

logger = logging.getLogger("hospitalflow")


async def settle_visit(store: HospitalStore, visit: Optional[Visit]) -> Optional[Appointment]:
    """Complete the visit's appointment if its consultation is paid and the visit closed.

    Reads the consultation bill from the store so that a payment written
    earlier in the same operation is seen.
    """
    if visit is None:
        return None
    appointment = await store.appointments.find_by_visit(visit.visit_id)
    if appointment is None:
        return None

    bill = await store.bills.find_by_id(appointment.bill_id) if appointment.bill_id else None
    if settle(appointment, bill, visit):
        appointment = await store.appointments.update(appointment)
        logger.info(
            f"Appointment {appointment.appointment_id} completed "
            f"(visit {visit.visit_id}, bill {appointment.bill_id})"
        )
    return appointment
