"""Cash point endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...application.dto.billing_dto import ProcessPaymentRequest
from ...application.use_cases.billing_queries import GetBillUseCase, ListPendingBillsUseCase
from ...application.use_cases.process_payment import (
    ApplyStaffDiscountUseCase,
    ProcessPaymentUseCase,
)
from ...domain.services import fees
from ..deps import FeeScheduleDep, SettingsDep, StoreDep
from ..schemas.appointments import AppointmentSchema
from ..schemas.billing import (
    BillSchema,
    CalculateTotalRequest,
    CalculateTotalResponse,
    PaymentRequest,
)
from ..schemas.common import ApiResponse, ErrorResponse, as_amount
from ..schemas.visits import VisitSchema
from ..utils.responses import ok

router = APIRouter(prefix="/billing", tags=["billing"])


class PaymentResponse(BaseModel):
    bill: BillSchema
    patient_balance: float
    visit: Optional[VisitSchema] = None
    appointment: Optional[AppointmentSchema] = None


@router.get("/pending", response_model=ApiResponse[List[BillSchema]])
async def list_pending_bills(request: Request, store: StoreDep):
    bills = await ListPendingBillsUseCase(store).execute()
    return ok(request, data=[BillSchema.from_domain(b) for b in bills], message="OK")


@router.post("/calculate", response_model=ApiResponse[CalculateTotalResponse])
async def calculate_total(
    http_request: Request,
    request: CalculateTotalRequest,
    fee_schedule: FeeScheduleDep,
    settings: SettingsDep,
):
    subtotal = fees.calculate_total([item.to_domain() for item in request.items])
    pricing = fees.final_total(subtotal, request.is_staff, fee_schedule)
    return ok(
        http_request,
        data=CalculateTotalResponse(
            subtotal=as_amount(subtotal),
            total=as_amount(pricing.total),
            discount=pricing.discount,
            discount_reason=pricing.discount_reason,
            formatted_total=fees.format_currency(pricing.total, settings.hospital.currency_symbol),
        ),
        message="OK",
    )


@router.get("/{bill_id}", response_model=ApiResponse[BillSchema])
async def get_bill(request: Request, bill_id: str, store: StoreDep):
    bill = await GetBillUseCase(store).execute(bill_id)
    return ok(request, data=BillSchema.from_domain(bill), message="OK")


@router.post(
    "/{bill_id}/pay",
    response_model=ApiResponse[PaymentResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Bill not payable or balance too low"},
        422: {"model": ErrorResponse, "description": "Missing payment reference"},
    },
)
async def pay_bill(
    http_request: Request,
    bill_id: str,
    request: PaymentRequest,
    store: StoreDep,
    fee_schedule: FeeScheduleDep,
):
    result = await ProcessPaymentUseCase(store, fee_schedule).execute(
        ProcessPaymentRequest(
            bill_id=bill_id,
            method=request.method,
            reference=request.reference,
            processed_by=request.processed_by,
        )
    )
    return ok(
        http_request,
        data=PaymentResponse(
            bill=BillSchema.from_domain(result.bill),
            patient_balance=as_amount(result.patient_balance),
            visit=VisitSchema.from_domain(result.visit) if result.visit else None,
            appointment=(
                AppointmentSchema.from_domain(result.appointment) if result.appointment else None
            ),
        ),
        message="Paid",
    )


@router.post("/{bill_id}/staff-discount", response_model=ApiResponse[BillSchema])
async def apply_staff_discount(
    request: Request, bill_id: str, store: StoreDep, fee_schedule: FeeScheduleDep
):
    bill = await ApplyStaffDiscountUseCase(store, fee_schedule).execute(bill_id)
    return ok(request, data=BillSchema.from_domain(bill), message="OK")
