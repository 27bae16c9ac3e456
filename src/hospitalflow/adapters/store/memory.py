"""
In-memory implementation of the hospital store.

Entities are deep-copied on the way in and out, so a caller can only change
stored state through ``update``. ``update`` is a compare-and-swap on the
entity's ``version``; every accepted write bumps the version and publishes a
change on the shared feed.
"""

import copy
import logging
from decimal import Decimal
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from ...application.ports.repositories import (
    AppointmentRepository,
    BillRepository,
    ClaimRepository,
    PatientRepository,
    StaffRepository,
)
from ...application.ports.store import HospitalStore
from ...application.services import change_feed as topics
from ...application.services.change_feed import ChangeFeed
from ...core.exceptions import StoreError
from ...domain.entities.appointment import Appointment
from ...domain.entities.bill import Bill
from ...domain.entities.claim import HMOClaim
from ...domain.entities.patient import Patient
from ...domain.entities.staff import Staff
from ...domain.enums.billing import BillStatus
from ...domain.enums.claims import ClaimStatus
from ...domain.enums.workflow import AppointmentStatus, StaffRole
from ...domain.errors import (
    AppointmentNotFoundError,
    BillNotFoundError,
    ClaimNotFoundError,
    DomainError,
    DuplicateClaimError,
    PatientNotFoundError,
    StaffNotFoundError,
    StaleEntityError,
)

logger = logging.getLogger("hospitalflow")

T = TypeVar("T")


class _Sequence:
    """Monotonic ID generator, e.g. ``BILL-1001``, ``BILL-1002``."""

    def __init__(self, prefix: str, start: int, width: int = 0) -> None:
        self._prefix = prefix
        self._next = start
        self._width = width

    def __call__(self) -> str:
        value = self._next
        self._next += 1
        return f"{self._prefix}{value:0{self._width}d}"


class _VersionedCollection(Generic[T]):
    """Dict of entities keyed by ID with optimistic version checks."""

    def __init__(
        self,
        topic: str,
        entity_name: str,
        key: Callable[[T], str],
        not_found: Callable[[str], DomainError],
        feed: ChangeFeed,
    ) -> None:
        self._topic = topic
        self._entity_name = entity_name
        self._key = key
        self._not_found = not_found
        self._feed = feed
        self._items: Dict[str, T] = {}

    def get(self, entity_id: str) -> Optional[T]:
        stored = self._items.get(entity_id)
        return copy.deepcopy(stored) if stored is not None else None

    def values(self) -> List[T]:
        return [copy.deepcopy(item) for item in self._items.values()]

    def insert(self, entity: T) -> T:
        entity_id = self._key(entity)
        if entity_id in self._items:
            raise StoreError(
                f"{self._entity_name} '{entity_id}' already exists",
                {"entity": self._entity_name, "entity_id": entity_id},
            )
        entity.version = 1
        self._items[entity_id] = copy.deepcopy(entity)
        self._feed.publish(self._topic, entity_id, entity.version)
        return entity

    def replace(self, entity: T) -> T:
        entity_id = self._key(entity)
        # No await between the version read and the write, so the swap is atomic on the loop.
        current = self._items.get(entity_id)
        if current is None:
            raise self._not_found(entity_id)
        if current.version != entity.version:
            logger.warning(
                f"Stale write rejected for {self._entity_name} {entity_id}: "
                f"expected v{entity.version}, stored v{current.version}"
            )
            raise StaleEntityError(self._entity_name, entity_id, entity.version, current.version)

        entity.version = current.version + 1
        self._items[entity_id] = copy.deepcopy(entity)
        self._feed.publish(self._topic, entity_id, entity.version)
        return entity


class InMemoryPatientRepository(PatientRepository):
    def __init__(self, feed: ChangeFeed) -> None:
        self._items = _VersionedCollection(
            topics.PATIENT, "Patient", lambda p: p.patient_id, PatientNotFoundError, feed
        )
        self._ids = _Sequence("P-", 1001)

    async def next_id(self) -> str:
        return self._ids()

    async def add(self, patient: Patient) -> Patient:
        return self._items.insert(patient)

    async def update(self, patient: Patient) -> Patient:
        patient.touch()
        return self._items.replace(patient)

    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        return self._items.get(patient_id)

    async def find_by_staff_id(self, staff_id: str) -> Optional[Patient]:
        for patient in self._items.values():
            if patient.staff_id == staff_id:
                return patient
        return None

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Patient]:
        return self._items.values()[offset:offset + limit]

    async def search(self, term: str, by: str = "name") -> List[Patient]:
        needle = (term or "").strip().lower()
        if not needle:
            return []

        def field_of(patient: Patient) -> str:
            if by == "id":
                return patient.patient_id
            if by == "phone":
                return patient.phone
            return patient.name

        return [p for p in self._items.values() if needle in field_of(p).lower()]

    async def update_balance(self, patient_id: str, delta: Decimal) -> Patient:
        patient = self._items.get(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        patient.adjust_balance(delta)
        patient.touch()
        return self._items.replace(patient)


class InMemoryAppointmentRepository(AppointmentRepository):
    def __init__(self, feed: ChangeFeed) -> None:
        self._items = _VersionedCollection(
            topics.APPOINTMENT,
            "Appointment",
            lambda a: a.appointment_id,
            AppointmentNotFoundError,
            feed,
        )
        self._ids = _Sequence("A-", 1001)

    async def next_id(self) -> str:
        return self._ids()

    async def add(self, appointment: Appointment) -> Appointment:
        return self._items.insert(appointment)

    async def update(self, appointment: Appointment) -> Appointment:
        return self._items.replace(appointment)

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        return self._items.get(appointment_id)

    async def find_by_patient(self, patient_id: str) -> List[Appointment]:
        return [a for a in self._items.values() if a.patient_id == patient_id]

    async def find_by_visit(self, visit_id: str) -> Optional[Appointment]:
        for appointment in self._items.values():
            if appointment.visit_id == visit_id:
                return appointment
        return None

    async def find_by_status(self, status: AppointmentStatus) -> List[Appointment]:
        return [a for a in self._items.values() if a.status == status]


class InMemoryBillRepository(BillRepository):
    def __init__(self, feed: ChangeFeed) -> None:
        self._items = _VersionedCollection(
            topics.BILL, "Bill", lambda b: b.bill_id, BillNotFoundError, feed
        )
        self._ids = _Sequence("BILL-", 1001)
        self._deposit_ids = _Sequence("BILL-DEP-", 1001)

    async def next_id(self) -> str:
        return self._ids()

    async def next_deposit_id(self) -> str:
        return self._deposit_ids()

    async def add(self, bill: Bill) -> Bill:
        return self._items.insert(bill)

    async def update(self, bill: Bill) -> Bill:
        return self._items.replace(bill)

    async def find_by_id(self, bill_id: str) -> Optional[Bill]:
        return self._items.get(bill_id)

    async def find_by_patient(self, patient_id: str) -> List[Bill]:
        return [b for b in self._items.values() if b.patient_id == patient_id]

    async def find_by_visit(self, visit_id: str) -> List[Bill]:
        return [b for b in self._items.values() if b.visit_id == visit_id]

    async def find_pending(self) -> List[Bill]:
        return [b for b in self._items.values() if b.status == BillStatus.PENDING]

    async def find_all(self) -> List[Bill]:
        return self._items.values()


class InMemoryClaimRepository(ClaimRepository):
    def __init__(self, feed: ChangeFeed) -> None:
        self._items = _VersionedCollection(
            topics.CLAIM, "HMOClaim", lambda c: c.claim_id, ClaimNotFoundError, feed
        )

    async def add(self, claim: HMOClaim) -> HMOClaim:
        existing = await self.find_by_source_id(claim.source_id)
        if existing is not None:
            raise DuplicateClaimError(claim.source_id, existing.claim_id)
        return self._items.insert(claim)

    async def update(self, claim: HMOClaim) -> HMOClaim:
        return self._items.replace(claim)

    async def find_by_id(self, claim_id: str) -> Optional[HMOClaim]:
        return self._items.get(claim_id)

    async def find_by_source_id(self, source_id: str) -> Optional[HMOClaim]:
        for claim in self._items.values():
            if claim.source_id == source_id:
                return claim
        return None

    async def find_by_status(self, status: Optional[ClaimStatus] = None) -> List[HMOClaim]:
        claims = self._items.values()
        if status is None:
            return claims
        return [c for c in claims if c.status == status]

    async def find_by_patient(self, patient_id: str) -> List[HMOClaim]:
        return [c for c in self._items.values() if c.patient_id == patient_id]


class InMemoryStaffRepository(StaffRepository):
    def __init__(self, feed: ChangeFeed) -> None:
        self._items = _VersionedCollection(
            topics.STAFF, "Staff", lambda s: s.staff_id, StaffNotFoundError, feed
        )
        self._ids = _Sequence("STAFF-", 1, width=3)

    async def next_id(self) -> str:
        return self._ids()

    async def add(self, staff: Staff) -> Staff:
        return self._items.insert(staff)

    async def find_by_id(self, staff_id: str) -> Optional[Staff]:
        return self._items.get(staff_id)

    async def find_doctors(self) -> List[Staff]:
        return [s for s in self._items.values() if s.role == StaffRole.DOCTOR]

    async def find_all(self) -> List[Staff]:
        return self._items.values()


class InMemoryHospitalStore(HospitalStore):
    """Process-local hospital state shared by every request."""

    def __init__(self, feed: Optional[ChangeFeed] = None) -> None:
        self._feed = feed or ChangeFeed()
        self._patients = InMemoryPatientRepository(self._feed)
        self._appointments = InMemoryAppointmentRepository(self._feed)
        self._bills = InMemoryBillRepository(self._feed)
        self._claims = InMemoryClaimRepository(self._feed)
        self._staff = InMemoryStaffRepository(self._feed)

    @property
    def patients(self) -> PatientRepository:
        return self._patients

    @property
    def appointments(self) -> AppointmentRepository:
        return self._appointments

    @property
    def bills(self) -> BillRepository:
        return self._bills

    @property
    def claims(self) -> ClaimRepository:
        return self._claims

    @property
    def staff(self) -> StaffRepository:
        return self._staff

    @property
    def feed(self) -> ChangeFeed:
        return self._feed
