"""
Shared fixtures: a seeded in-memory store, the default fee schedule and
helpers that walk a patient to the start of a consultation.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from hospitalflow.adapters.store.memory import InMemoryHospitalStore
from hospitalflow.adapters.store.seed import seed_default_staff
from hospitalflow.app import create_app
from hospitalflow.application.dto.appointment_dto import WalkInRequest
from hospitalflow.application.dto.billing_dto import ProcessPaymentRequest
from hospitalflow.application.dto.patient_dto import (
    CreatePatientFromStaffRequest,
    RegisterPatientRequest,
)
from hospitalflow.application.use_cases.check_in_appointment import (
    CreateWalkInConsultationUseCase,
)
from hospitalflow.application.use_cases.process_payment import ProcessPaymentUseCase
from hospitalflow.application.use_cases.register_patient import (
    CreatePatientFromStaffUseCase,
    RegisterPatientUseCase,
)
from hospitalflow.core.config import ClaimFeedSettings, Settings, StoreSettings
from hospitalflow.domain.enums.billing import PaymentMethod
from hospitalflow.domain.enums.workflow import PatientType
from hospitalflow.domain.value_objects.fee_schedule import FeeSchedule

# Seeded roster IDs
GENERAL_DOCTOR = "STAFF-002"
PEDIATRICIAN = "STAFF-003"
CARDIOLOGIST = "STAFF-004"
NURSE = "STAFF-006"


@pytest.fixture
def fee_schedule():
    return FeeSchedule()


@pytest_asyncio.fixture
async def store():
    hospital = InMemoryHospitalStore()
    await seed_default_staff(hospital)
    return hospital


@pytest.fixture
def register(store):
    """Register a patient: ``await register("Ada", hmo=True)``."""

    async def _register(name="Ada Obi", phone="08030000001", hmo=False, provider="AXA Mansard"):
        request = RegisterPatientRequest(
            name=name,
            phone=phone,
            patient_type=PatientType.HMO if hmo else PatientType.CASH,
            hmo_provider=provider if hmo else None,
        )
        return await RegisterPatientUseCase(store).execute(request)

    return _register


@pytest.fixture
def register_staff(store):
    async def _register_staff(staff_id=NURSE, phone="08030000099"):
        request = CreatePatientFromStaffRequest(staff_id=staff_id, phone=phone)
        return await CreatePatientFromStaffUseCase(store).execute(request)

    return _register_staff


@pytest.fixture
def walk_in(store, fee_schedule):
    """Start a walk-in consultation and return the check-in outcome."""

    async def _walk_in(patient, doctor_id=GENERAL_DOCTOR, complaints="Fever and headache"):
        request = WalkInRequest(
            patient_id=patient.patient_id,
            doctor_id=doctor_id,
            presenting_complaints=complaints,
        )
        return await CreateWalkInConsultationUseCase(store, fee_schedule).execute(request)

    return _walk_in


@pytest.fixture
def pay(store, fee_schedule):
    async def _pay(bill_id, method=PaymentMethod.CASH, reference=None):
        request = ProcessPaymentRequest(bill_id=bill_id, method=method, reference=reference)
        return await ProcessPaymentUseCase(store, fee_schedule).execute(request)

    return _pay


@pytest.fixture
def amount():
    return lambda value: Decimal(value).quantize(Decimal("0.01"))


@pytest.fixture
def test_settings():
    return Settings(
        app_env="testing",
        hmo=ClaimFeedSettings(poll_interval_seconds=0.2, refresh_enabled=False),
        store=StoreSettings(seed_demo_data=True),
    )


@pytest.fixture
def client(test_settings):
    """Test client with the lifespan run, so the staff roster is seeded."""
    with TestClient(create_app(settings=test_settings)) as test_client:
        yield test_client
