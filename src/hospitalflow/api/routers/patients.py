"""Patient-related API endpoints."""

import logging
from typing import List, Literal

from fastapi import APIRouter, Request, status

from ...application.dto.billing_dto import DepositRequest as DepositDTO
from ...application.dto.patient_dto import (
    CreatePatientFromStaffRequest,
    RegisterPatientRequest as RegisterPatientDTO,
    SearchPatientsRequest,
    UpdatePatientRequest as UpdatePatientDTO,
)
from ...application.services.lookups import require_patient
from ...application.use_cases.billing_queries import GetPatientBillsUseCase
from ...application.use_cases.create_deposit import CreateDepositUseCase
from ...application.use_cases.register_patient import (
    CreatePatientFromStaffUseCase,
    RegisterPatientUseCase,
    UpdatePatientUseCase,
)
from ...application.use_cases.search_patients import (
    GetPatientHistoryUseCase,
    SearchPatientsUseCase,
)
from ..deps import StoreDep
from ..schemas.appointments import AppointmentSchema
from ..schemas.billing import BillSchema, DepositRequest, DepositResponse
from ..schemas.common import ApiResponse, ErrorResponse, as_amount
from ..schemas.patients import (
    PatientDetailSchema,
    PatientHistorySchema,
    PatientSchema,
    RegisterPatientRequest,
    StaffPatientRequest,
    UpdatePatientRequest,
)
from ..schemas.visits import VisitSchema
from ..utils.responses import ok

router = APIRouter(prefix="/patients", tags=["patients"])
logger = logging.getLogger("hospitalflow")


@router.post(
    "/",
    response_model=ApiResponse[PatientSchema],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new cash or HMO patient",
    responses={
        422: {"model": ErrorResponse, "description": "Missing or invalid fields"},
    },
)
async def register_patient(http_request: Request, request: RegisterPatientRequest, store: StoreDep):
    patient = await RegisterPatientUseCase(store).execute(
        RegisterPatientDTO(
            name=request.name,
            phone=request.phone,
            patient_type=request.patient_type,
            hmo_provider=request.hmo_provider,
            gender=request.gender,
            date_of_birth=request.date_of_birth,
            address=request.address,
            email=request.email,
        )
    )
    return ok(http_request, data=PatientSchema.from_domain(patient), message="Created")


@router.post(
    "/from-staff",
    response_model=ApiResponse[PatientSchema],
    status_code=status.HTTP_201_CREATED,
    summary="Register a staff member as a patient (idempotent)",
)
async def create_patient_from_staff(
    http_request: Request, request: StaffPatientRequest, store: StoreDep
):
    patient = await CreatePatientFromStaffUseCase(store).execute(
        CreatePatientFromStaffRequest(
            staff_id=request.staff_id,
            phone=request.phone,
            gender=request.gender,
            date_of_birth=request.date_of_birth,
        )
    )
    return ok(http_request, data=PatientSchema.from_domain(patient), message="OK")


@router.get("/", response_model=ApiResponse[List[PatientSchema]], summary="List patients")
async def list_patients(request: Request, store: StoreDep, limit: int = 100, offset: int = 0):
    patients = await store.patients.find_all(limit=limit, offset=offset)
    return ok(request, data=[PatientSchema.from_domain(p) for p in patients], message="OK")


@router.get(
    "/search",
    response_model=ApiResponse[List[PatientSchema]],
    summary="Case-insensitive search by name, ID or phone",
)
async def search_patients(
    request: Request,
    store: StoreDep,
    q: str,
    by: Literal["name", "id", "phone"] = "name",
):
    patients = await SearchPatientsUseCase(store).execute(SearchPatientsRequest(term=q, by=by))
    return ok(request, data=[PatientSchema.from_domain(p) for p in patients], message="OK")


@router.get("/{patient_id}", response_model=ApiResponse[PatientDetailSchema])
async def get_patient(request: Request, patient_id: str, store: StoreDep):
    patient = await require_patient(store, patient_id)
    return ok(request, data=PatientDetailSchema.from_domain(patient), message="OK")


@router.patch(
    "/{patient_id}",
    response_model=ApiResponse[PatientSchema],
    summary="Edit patient details",
    responses={
        404: {"model": ErrorResponse, "description": "Patient not found"},
        409: {"model": ErrorResponse, "description": "Patient changed since it was read"},
        422: {"model": ErrorResponse, "description": "Missing or invalid fields"},
    },
)
async def update_patient(
    http_request: Request, patient_id: str, request: UpdatePatientRequest, store: StoreDep
):
    patient = await UpdatePatientUseCase(store).execute(
        UpdatePatientDTO(patient_id=patient_id, **request.model_dump())
    )
    return ok(http_request, data=PatientSchema.from_domain(patient), message="Updated")


@router.get("/{patient_id}/visits", response_model=ApiResponse[List[VisitSchema]])
async def get_patient_visits(request: Request, patient_id: str, store: StoreDep):
    patient = await require_patient(store, patient_id)
    visits = [VisitSchema.from_domain(v) for v in reversed(patient.visits)]
    return ok(request, data=visits, message="OK")


@router.get("/{patient_id}/appointments", response_model=ApiResponse[List[AppointmentSchema]])
async def get_patient_appointments(request: Request, patient_id: str, store: StoreDep):
    await require_patient(store, patient_id)
    appointments = await store.appointments.find_by_patient(patient_id)
    data = [AppointmentSchema.from_domain(a) for a in sorted(appointments, key=lambda a: a.created_at)]
    return ok(request, data=data, message="OK")


@router.get("/{patient_id}/bills", response_model=ApiResponse[List[BillSchema]])
async def get_patient_bills(request: Request, patient_id: str, store: StoreDep):
    bills = await GetPatientBillsUseCase(store).execute(patient_id)
    return ok(request, data=[BillSchema.from_domain(b) for b in bills], message="OK")


@router.get("/{patient_id}/history", response_model=ApiResponse[PatientHistorySchema])
async def get_patient_history(request: Request, patient_id: str, store: StoreDep):
    history = await GetPatientHistoryUseCase(store).execute(patient_id)
    return ok(request, data=PatientHistorySchema.from_domain(history), message="OK")


@router.post(
    "/{patient_id}/deposits",
    response_model=ApiResponse[DepositResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Top up the patient's deposit balance",
)
async def create_deposit(
    http_request: Request, patient_id: str, request: DepositRequest, store: StoreDep
):
    result = await CreateDepositUseCase(store).execute(
        DepositDTO(
            patient_id=patient_id,
            amount=request.amount,
            method=request.method,
            reference=request.reference,
            received_by=request.received_by,
        )
    )
    return ok(
        http_request,
        data=DepositResponse(
            bill=BillSchema.from_domain(result.bill),
            patient_balance=as_amount(result.patient_balance),
        ),
        message="Deposit recorded",
    )
