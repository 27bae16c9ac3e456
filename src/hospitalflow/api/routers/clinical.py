"""Clinical workflow endpoints from vitals through to discharge."""

from fastapi import APIRouter, Request, status

from ...application.dto.clinical_dto import (
    BillPrescriptionsRequest as BillPrescriptionsDTO,
    CompleteConsultationRequest as CompleteConsultationDTO,
    CompleteInjectionRequest as CompleteInjectionDTO,
    CompleteLabRequest as CompleteLabDTO,
    DischargeAdmissionRequest as DischargeAdmissionDTO,
    DispenseRequest as DispenseDTO,
    RecordVitalsRequest as RecordVitalsDTO,
    VaccinationRequest as VaccinationDTO,
)
from ...application.use_cases.complete_consultation import CompleteConsultationUseCase
from ...application.use_cases.complete_injection import CompleteInjectionUseCase
from ...application.use_cases.complete_lab import CompleteLabUseCase
from ...application.use_cases.discharge_admission import DischargeAdmissionUseCase
from ...application.use_cases.pharmacy import BillPrescriptionsUseCase, DispenseMedicationUseCase
from ...application.use_cases.record_vitals import RecordVitalsUseCase
from ...application.use_cases.request_vaccination import RequestVaccinationUseCase
from ...domain.entities.visit import VitalSigns
from ..deps import FeeScheduleDep, StoreDep
from ..schemas.clinical import (
    BillPrescriptionsRequest,
    ClinicalOutcomeSchema,
    CompleteConsultationRequest,
    CompleteInjectionRequest,
    CompleteLabRequest,
    DischargeAdmissionRequest,
    DispenseRequest,
    RecordVitalsRequest,
    VaccinationRequest,
)
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.visits import VisitSchema
from ..utils.responses import ok

router = APIRouter(prefix="/clinical", tags=["clinical"])

PATHWAY_ERRORS = {
    400: {"model": ErrorResponse, "description": "Patient is not at this department"},
    404: {"model": ErrorResponse, "description": "Patient not found"},
}


@router.post("/vitals", response_model=ApiResponse[VisitSchema], responses=PATHWAY_ERRORS)
async def record_vitals(http_request: Request, request: RecordVitalsRequest, store: StoreDep):
    readings = request.model_dump(exclude={"patient_id"})
    visit = await RecordVitalsUseCase(store).execute(
        RecordVitalsDTO(patient_id=request.patient_id, vitals=VitalSigns(**readings))
    )
    return ok(http_request, data=VisitSchema.from_domain(visit), message="Vitals recorded")


@router.post(
    "/consultations",
    response_model=ApiResponse[ClinicalOutcomeSchema],
    responses=PATHWAY_ERRORS,
    summary="Record the doctor's diagnosis and send the patient on",
)
async def complete_consultation(
    http_request: Request,
    request: CompleteConsultationRequest,
    store: StoreDep,
    fee_schedule: FeeScheduleDep,
):
    outcome = await CompleteConsultationUseCase(store, fee_schedule).execute(
        CompleteConsultationDTO(
            patient_id=request.patient_id,
            diagnosis=request.diagnosis,
            destination=request.destination,
            prescriptions=[rx.to_domain() for rx in request.prescriptions],
            lab_tests=[line.to_domain() for line in request.lab_tests],
            injections=[line.to_domain() for line in request.injections],
            notes=request.notes,
            doctor_name=request.doctor_name,
        )
    )
    return ok(http_request, data=ClinicalOutcomeSchema.from_domain(outcome), message="OK")


@router.post(
    "/pharmacy/bills",
    response_model=ApiResponse[ClinicalOutcomeSchema],
    status_code=status.HTTP_201_CREATED,
    responses=PATHWAY_ERRORS,
)
async def bill_prescriptions(
    http_request: Request,
    request: BillPrescriptionsRequest,
    store: StoreDep,
    fee_schedule: FeeScheduleDep,
):
    outcome = await BillPrescriptionsUseCase(store, fee_schedule).execute(
        BillPrescriptionsDTO(
            patient_id=request.patient_id,
            items=[line.to_domain() for line in request.items],
            processed_by=request.processed_by,
        )
    )
    return ok(http_request, data=ClinicalOutcomeSchema.from_domain(outcome), message="Billed")


@router.post("/pharmacy/bills/{bill_id}/dispense", response_model=ApiResponse[ClinicalOutcomeSchema])
async def dispense(
    http_request: Request,
    bill_id: str,
    request: DispenseRequest,
    store: StoreDep,
    fee_schedule: FeeScheduleDep,
):
    outcome = await DispenseMedicationUseCase(store, fee_schedule).execute(
        DispenseDTO(bill_id=bill_id, dispensed_by=request.dispensed_by)
    )
    return ok(http_request, data=ClinicalOutcomeSchema.from_domain(outcome), message="Dispensed")


@router.post("/lab/results", response_model=ApiResponse[ClinicalOutcomeSchema], responses=PATHWAY_ERRORS)
async def complete_lab(
    http_request: Request,
    request: CompleteLabRequest,
    store: StoreDep,
    fee_schedule: FeeScheduleDep,
):
    outcome = await CompleteLabUseCase(store, fee_schedule).execute(
        CompleteLabDTO(
            patient_id=request.patient_id,
            results=request.results,
            completed_by=request.completed_by,
            notes=request.notes,
        )
    )
    return ok(http_request, data=ClinicalOutcomeSchema.from_domain(outcome), message="Results recorded")


@router.post(
    "/injections/complete",
    response_model=ApiResponse[ClinicalOutcomeSchema],
    responses=PATHWAY_ERRORS,
)
async def complete_injection(
    http_request: Request,
    request: CompleteInjectionRequest,
    store: StoreDep,
    fee_schedule: FeeScheduleDep,
):
    outcome = await CompleteInjectionUseCase(store, fee_schedule).execute(
        CompleteInjectionDTO(
            patient_id=request.patient_id,
            administered_by=request.administered_by,
            notes=request.notes,
        )
    )
    return ok(http_request, data=ClinicalOutcomeSchema.from_domain(outcome), message="Completed")


@router.post(
    "/admissions/discharge",
    response_model=ApiResponse[ClinicalOutcomeSchema],
    responses=PATHWAY_ERRORS,
    summary="Discharge a patient waiting on admission",
)
async def discharge_admission(
    http_request: Request,
    request: DischargeAdmissionRequest,
    store: StoreDep,
):
    outcome = await DischargeAdmissionUseCase(store).execute(
        DischargeAdmissionDTO(
            patient_id=request.patient_id,
            discharge_diagnosis=request.discharge_diagnosis,
            discharged_by=request.discharged_by,
            notes=request.notes,
        )
    )
    return ok(http_request, data=ClinicalOutcomeSchema.from_domain(outcome), message="Discharged")


@router.post(
    "/vaccinations",
    response_model=ApiResponse[ClinicalOutcomeSchema],
    status_code=status.HTTP_201_CREATED,
)
async def request_vaccination(
    http_request: Request,
    request: VaccinationRequest,
    store: StoreDep,
    fee_schedule: FeeScheduleDep,
):
    outcome = await RequestVaccinationUseCase(store, fee_schedule).execute(
        VaccinationDTO(
            patient_id=request.patient_id,
            vaccine=request.vaccine,
            dose_number=request.dose_number,
            price=request.price,
            requested_by=request.requested_by,
        )
    )
    return ok(http_request, data=ClinicalOutcomeSchema.from_domain(outcome), message="Created")
