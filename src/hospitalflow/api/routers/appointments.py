"""Appointment endpoints: booking, check-in, walk-in, cancellation and doctor changes."""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from ...application.dto.appointment_dto import (
    CancelConsultationRequest,
    ChangeDoctorRequest as ChangeDoctorDTO,
    CheckInRequest as CheckInDTO,
    ScheduleAppointmentRequest as ScheduleAppointmentDTO,
    WalkInRequest as WalkInDTO,
)
from ...application.services.lookups import require_appointment
from ...application.use_cases.cancel_consultation import CancelConsultationUseCase
from ...application.use_cases.change_consultation_doctor import ChangeConsultationDoctorUseCase
from ...application.use_cases.check_in_appointment import (
    CheckInAppointmentUseCase,
    CreateWalkInConsultationUseCase,
)
from ...application.use_cases.schedule_appointment import ScheduleAppointmentUseCase
from ...domain.enums.workflow import AppointmentStatus
from ..deps import FeeScheduleDep, StoreDep
from ..schemas.appointments import (
    AppointmentSchema,
    CancelAppointmentRequest,
    CancelAppointmentResponse,
    ChangeDoctorRequest,
    ChangeDoctorResponse,
    CheckInRequest,
    CheckInResponse,
    ScheduleAppointmentRequest,
    StaffSchema,
    WalkInRequest,
)
from ..schemas.billing import BillSchema
from ..schemas.claims import ClaimSchema
from ..schemas.common import ApiResponse, ErrorResponse, as_amount
from ..schemas.visits import VisitSchema
from ..utils.responses import ok

router = APIRouter(prefix="/appointments", tags=["appointments"])


def _check_in_response(result) -> CheckInResponse:
    return CheckInResponse(
        appointment=AppointmentSchema.from_domain(result.appointment),
        visit=VisitSchema.from_domain(result.visit),
        bill=BillSchema.from_domain(result.bill),
        claim=ClaimSchema.from_domain(result.claim) if result.claim else None,
    )


@router.post(
    "/",
    response_model=ApiResponse[AppointmentSchema],
    status_code=status.HTTP_201_CREATED,
    summary="Book an appointment",
)
async def schedule_appointment(
    http_request: Request, request: ScheduleAppointmentRequest, store: StoreDep
):
    appointment = await ScheduleAppointmentUseCase(store).execute(
        ScheduleAppointmentDTO(
            patient_id=request.patient_id,
            doctor_id=request.doctor_id,
            date=request.date,
            time=request.time,
            consultation_type=request.consultation_type,
        )
    )
    return ok(http_request, data=AppointmentSchema.from_domain(appointment), message="Created")


@router.get("/", response_model=ApiResponse[List[AppointmentSchema]])
async def list_appointments(
    request: Request,
    store: StoreDep,
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
):
    if status_filter is not None:
        appointments = await store.appointments.find_by_status(status_filter)
    else:
        appointments = []
        for appointment_status in AppointmentStatus:
            appointments.extend(await store.appointments.find_by_status(appointment_status))
    appointments.sort(key=lambda a: (a.date, a.time))
    return ok(request, data=[AppointmentSchema.from_domain(a) for a in appointments], message="OK")


@router.get("/doctors", response_model=ApiResponse[List[StaffSchema]])
async def list_doctors(request: Request, store: StoreDep):
    doctors = await store.staff.find_doctors()
    return ok(request, data=[StaffSchema.from_domain(d) for d in doctors], message="OK")


@router.post(
    "/walk-in",
    response_model=ApiResponse[CheckInResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create and check in an unbooked consultation",
)
async def create_walk_in(
    http_request: Request, request: WalkInRequest, store: StoreDep, fee_schedule: FeeScheduleDep
):
    result = await CreateWalkInConsultationUseCase(store, fee_schedule).execute(
        WalkInDTO(
            patient_id=request.patient_id,
            doctor_id=request.doctor_id,
            presenting_complaints=request.presenting_complaints,
            consultation_type=request.consultation_type,
            processed_by=request.processed_by,
        )
    )
    return ok(http_request, data=_check_in_response(result), message="Checked in")


@router.get("/{appointment_id}", response_model=ApiResponse[AppointmentSchema])
async def get_appointment(request: Request, appointment_id: str, store: StoreDep):
    appointment = await require_appointment(store, appointment_id)
    return ok(request, data=AppointmentSchema.from_domain(appointment), message="OK")


@router.post(
    "/{appointment_id}/check-in",
    response_model=ApiResponse[CheckInResponse],
    responses={400: {"model": ErrorResponse, "description": "Appointment not scheduled"}},
)
async def check_in(
    http_request: Request,
    appointment_id: str,
    request: CheckInRequest,
    store: StoreDep,
    fee_schedule: FeeScheduleDep,
):
    result = await CheckInAppointmentUseCase(store, fee_schedule).execute(
        CheckInDTO(
            appointment_id=appointment_id,
            presenting_complaints=request.presenting_complaints,
            processed_by=request.processed_by,
        )
    )
    return ok(http_request, data=_check_in_response(result), message="Checked in")


@router.post(
    "/{appointment_id}/cancel",
    response_model=ApiResponse[CancelAppointmentResponse],
    responses={400: {"model": ErrorResponse, "description": "Too late to cancel"}},
)
async def cancel_appointment(
    http_request: Request,
    appointment_id: str,
    request: CancelAppointmentRequest,
    store: StoreDep,
):
    result = await CancelConsultationUseCase(store).execute(
        CancelConsultationRequest(
            appointment_id=appointment_id,
            reason=request.reason,
            cancelled_by=request.cancelled_by,
        )
    )
    return ok(
        http_request,
        data=CancelAppointmentResponse(
            appointment=AppointmentSchema.from_domain(result.appointment),
            bill=BillSchema.from_domain(result.bill) if result.bill else None,
            refunded_amount=as_amount(result.refunded_amount),
            patient_balance=as_amount(result.patient_balance),
        ),
        message="Cancelled",
    )


@router.post("/{appointment_id}/change-doctor", response_model=ApiResponse[ChangeDoctorResponse])
async def change_doctor(
    http_request: Request,
    appointment_id: str,
    request: ChangeDoctorRequest,
    store: StoreDep,
    fee_schedule: FeeScheduleDep,
):
    result = await ChangeConsultationDoctorUseCase(store, fee_schedule).execute(
        ChangeDoctorDTO(
            appointment_id=appointment_id,
            new_doctor_id=request.new_doctor_id,
            changed_by=request.changed_by,
        )
    )
    return ok(
        http_request,
        data=ChangeDoctorResponse(
            appointment=AppointmentSchema.from_domain(result.appointment),
            bill=BillSchema.from_domain(result.bill) if result.bill else None,
            upgrade_bill=BillSchema.from_domain(result.upgrade_bill) if result.upgrade_bill else None,
            claim=ClaimSchema.from_domain(result.claim) if result.claim else None,
            fee_difference=as_amount(result.fee_difference),
        ),
        message="Doctor changed",
    )
