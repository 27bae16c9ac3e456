"""
Default staff roster loaded into a fresh store.
"""

import logging
from typing import List, Tuple

from ...application.ports.store import HospitalStore
from ...domain.entities.staff import Staff
from ...domain.enums.workflow import StaffRole

logger = logging.getLogger("hospitalflow")

DEFAULT_STAFF: List[Tuple[str, StaffRole, str]] = [
    ("Admin User", StaffRole.ADMIN, "Administration"),
    ("Dr. Smith", StaffRole.DOCTOR, "General Medicine"),
    ("Dr. Johnson", StaffRole.DOCTOR, "Pediatrics"),
    ("Dr. Adeyemi", StaffRole.DOCTOR, "Cardiology"),
    ("Dr. Okonkwo", StaffRole.DOCTOR, "Obstetrics & Gynecology"),
    ("Nurse Johnson", StaffRole.NURSE, "Nursing"),
    ("Cash Point User", StaffRole.CASHIER, "Finance"),
    ("Lab Technician", StaffRole.LAB_SCIENTIST, "Laboratory"),
    ("Pharmacist User", StaffRole.PHARMACIST, "Pharmacy"),
    ("HMO Desk User", StaffRole.HMO_OFFICER, "HMO"),
]


async def seed_default_staff(store: HospitalStore) -> List[Staff]:
    """Add the default roster when the store has no staff yet."""
    if await store.staff.find_all():
        return []

    created = []
    for name, role, department in DEFAULT_STAFF:
        staff = Staff(
            staff_id=await store.staff.next_id(),
            name=name,
            role=role,
            department=department,
        )
        created.append(await store.staff.add(staff))

    logger.info(f"Seeded {len(created)} staff members")
    return created
