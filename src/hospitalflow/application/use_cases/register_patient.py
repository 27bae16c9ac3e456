"""Register Patient use cases: walk-up registration, staff-as-patient and edits."""

import logging

from ...domain.entities.patient import Patient
from ...domain.enums.workflow import PatientType
from ...domain.errors import StaffNotFoundError
from ..dto.patient_dto import (
    CreatePatientFromStaffRequest,
    RegisterPatientRequest,
    UpdatePatientRequest,
)
from ..ports.store import HospitalStore
from ..services.lookups import require_patient, require_text

logger = logging.getLogger("hospitalflow")


class RegisterPatientUseCase:
    """Use case for registering a new cash or HMO patient."""

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: RegisterPatientRequest) -> Patient:
        """Execute the register patient use case."""
        name = require_text(request.name, "name")
        phone = require_text(request.phone, "phone")
        patient_type = PatientType(request.patient_type)
        hmo_provider = None
        if patient_type == PatientType.HMO:
            hmo_provider = require_text(request.hmo_provider, "hmo_provider", "for HMO patients")

        patient = Patient(
            patient_id=await self._store.patients.next_id(),
            name=name,
            phone=phone,
            patient_type=patient_type,
            hmo_provider=hmo_provider,
            gender=request.gender,
            date_of_birth=request.date_of_birth,
            address=request.address,
            email=request.email,
        )
        patient = await self._store.patients.add(patient)
        logger.info(
            f"Registered {patient.patient_type.value} patient {patient.patient_id}"
            + (f" ({hmo_provider})" if hmo_provider else "")
        )
        return patient


class CreatePatientFromStaffUseCase:
    """Register a staff member as a cash patient entitled to the staff discount.

    Returns the existing record when the staff member is already registered.
    """

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: CreatePatientFromStaffRequest) -> Patient:
        staff = await self._store.staff.find_by_id(request.staff_id)
        if staff is None:
            raise StaffNotFoundError(request.staff_id)

        existing = await self._store.patients.find_by_staff_id(staff.staff_id)
        if existing is not None:
            return existing

        phone = require_text(request.phone or staff.phone, "phone", "for staff patients")
        patient = Patient(
            patient_id=await self._store.patients.next_id(),
            name=staff.name,
            phone=phone,
            patient_type=PatientType.CASH,
            gender=request.gender,
            date_of_birth=request.date_of_birth,
            email=staff.email,
            is_staff=True,
            staff_id=staff.staff_id,
        )
        patient = await self._store.patients.add(patient)
        logger.info(f"Staff member {staff.staff_id} registered as patient {patient.patient_id}")
        return patient


class UpdatePatientUseCase:
    """Edit the demographic and payment details of a registered patient.

    Writes through the versioned store update, so an edit based on a stale
    read fails with a conflict instead of overwriting a newer change.
    """

    EDITABLE = ("gender", "date_of_birth", "address", "email")

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: UpdatePatientRequest) -> Patient:
        patient = await require_patient(self._store, request.patient_id)

        name = patient.name if request.name is None else require_text(request.name, "name")
        phone = patient.phone if request.phone is None else require_text(request.phone, "phone")
        patient_type = PatientType(request.patient_type or patient.patient_type)
        hmo_provider = None
        if patient_type == PatientType.HMO:
            provider = patient.hmo_provider if request.hmo_provider is None else request.hmo_provider
            hmo_provider = require_text(provider, "hmo_provider", "for HMO patients")

        patient.name = name
        patient.phone = phone
        patient.patient_type = patient_type
        patient.hmo_provider = hmo_provider
        for attr in self.EDITABLE:
            value = getattr(request, attr)
            if value is not None:
                setattr(patient, attr, value)
        if request.version is not None:
            patient.version = request.version

        patient = await self._store.patients.update(patient)
        logger.info(f"Patient {patient.patient_id} updated (v{patient.version})")
        return patient
