"""Create Deposit use case."""

import logging

from ...core.utils import generate_reference
from ...domain.entities.bill import Bill, BillItem
from ...domain.enums.billing import BillStatus, BillType, ItemType, PaymentMethod
from ...domain.errors import InvalidFieldError
from ...domain.services.fees import format_currency
from ..dto.billing_dto import DepositRequest, DepositResponse
from ..ports.store import HospitalStore
from ..services.lookups import require_patient

logger = logging.getLogger("hospitalflow")


class CreateDepositUseCase:
    """Top up a patient's deposit balance with a paid deposit bill."""

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: DepositRequest) -> DepositResponse:
        if request.amount <= 0:
            raise InvalidFieldError("amount", request.amount, "deposit must be positive")
        method = PaymentMethod(request.method)
        if method in (PaymentMethod.HMO, PaymentMethod.BALANCE):
            raise InvalidFieldError("method", method.value, "not accepted for deposits")
        patient = await require_patient(self._store, request.patient_id)

        received_by = request.received_by or "Cash Point"
        bill = Bill(
            bill_id=await self._store.bills.next_deposit_id(),
            patient_id=patient.patient_id,
            patient_name=patient.name,
            bill_type=BillType.DEPOSIT,
            items=[
                BillItem(
                    description="Patient deposit",
                    quantity=1,
                    unit_price=request.amount,
                    item_type=ItemType.DEPOSIT,
                )
            ],
        )
        bill.mark_paid(method, request.reference or generate_reference("DEP"), received_by)

        bill = await self._store.bills.add(bill)
        patient = await self._store.patients.update_balance(patient.patient_id, request.amount)

        logger.info(
            f"Deposit {bill.bill_id} of {format_currency(request.amount)} for patient "
            f"{patient.patient_id}; balance {format_currency(patient.balance)}"
        )
        return DepositResponse(bill=bill, patient_balance=patient.balance)
