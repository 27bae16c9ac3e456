"""
Bill creation with automatic HMO claim linkage.

Every bill raised for an HMO patient by a clinical department gets exactly
one pending claim; cash patients get a plain pending bill.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from ...core.utils import generate_reference
from ...domain.entities.bill import Bill, BillItem
from ...domain.entities.claim import HMOClaim
from ...domain.entities.patient import Patient
from ...domain.enums.billing import BillStatus, BillType, PaymentMethod
from ...domain.enums.claims import ClaimStatus, SourceDepartment
from ...domain.errors import DuplicateClaimError
from ...domain.services import fees
from ...domain.services.claims import claim_from_bill
from ...domain.value_objects.fee_schedule import FeeSchedule
from ..ports.store import HospitalStore

logger = logging.getLogger("hospitalflow")

# Department inferred for bills created before the source was recorded.
SOURCE_FOR_BILL_TYPE = {
    BillType.CONSULTATION: SourceDepartment.DOCTOR,
    BillType.PHARMACY: SourceDepartment.PHARMACY,
    BillType.LABORATORY: SourceDepartment.LABORATORY,
    BillType.INJECTION: SourceDepartment.INJECTION_ROOM,
    BillType.VACCINATION: SourceDepartment.INJECTION_ROOM,
}


class BillingService:
    """Raises bills and their HMO claims against the shared store."""

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._fee_schedule = fee_schedule

    async def build_bill(
        self,
        patient: Patient,
        bill_type: BillType,
        items: List[BillItem],
        *,
        source: Optional[SourceDepartment] = None,
        visit_id: Optional[str] = None,
        appointment_id: Optional[str] = None,
        prepaid_by_hmo: bool = False,
        processed_by: Optional[str] = None,
    ) -> Bill:
        """Construct (but do not store) a bill for the patient.

        HMO patients' departmental bills wait on the HMO desk; ``prepaid_by_hmo``
        marks the bill paid up front with an automatic HMO reference.
        """
        bill = Bill(
            bill_id=await self._store.bills.next_id(),
            patient_id=patient.patient_id,
            patient_name=patient.name,
            bill_type=bill_type,
            items=items,
            visit_id=visit_id,
            appointment_id=appointment_id,
            source_department=source,
            processed_by=processed_by,
        )
        fees.apply_staff_discount(bill, patient.is_staff, self._fee_schedule)

        if patient.is_hmo and prepaid_by_hmo:
            bill.status = BillStatus.PAID
            bill.payment_method = PaymentMethod.HMO
            bill.payment_reference = generate_reference("HMO-AUTO")
            bill.payment_date = datetime.utcnow()
        elif patient.is_hmo and source is not None:
            bill.status = BillStatus.HMO_PENDING
        return bill

    async def store_bill(self, patient: Patient, bill: Bill) -> Tuple[Bill, Optional[HMOClaim]]:
        """Persist the bill and, for HMO patients, its pending claim."""
        bill = await self._store.bills.add(bill)
        claim = None
        if patient.is_hmo and bill.source_department is not None:
            claim = await self.open_claim_for_bill(bill, patient, bill.source_department)

        logger.info(
            f"Bill {bill.bill_id} ({bill.bill_type.value}) raised for patient "
            f"{patient.patient_id}: {fees.format_currency(bill.total)} [{bill.status.value}]"
        )
        return bill, claim

    async def create_bill(
        self, patient: Patient, bill_type: BillType, items: List[BillItem], **options
    ) -> Tuple[Bill, Optional[HMOClaim]]:
        bill = await self.build_bill(patient, bill_type, items, **options)
        return await self.store_bill(patient, bill)

    async def open_claim_for_bill(
        self, bill: Bill, patient: Patient, source: SourceDepartment
    ) -> HMOClaim:
        existing = await self._store.claims.find_by_source_id(bill.bill_id)
        if existing is not None:
            raise DuplicateClaimError(bill.bill_id, existing.claim_id)

        claim = await self._store.claims.add(claim_from_bill(bill, patient, source))
        logger.info(
            f"HMO claim {claim.claim_id} opened for bill {bill.bill_id} "
            f"({patient.hmo_provider})"
        )
        return claim

    async def complete_claim_for(self, bill: Bill) -> Optional[HMOClaim]:
        """Close the approved claim behind a bill once its service is delivered."""
        claim = await self._store.claims.find_by_source_id(bill.bill_id)
        if claim is None or claim.status != ClaimStatus.APPROVED:
            return claim
        claim.complete()
        return await self._store.claims.update(claim)
