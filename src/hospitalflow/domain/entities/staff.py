"""Staff domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..enums.workflow import StaffRole


@dataclass
class Staff:
    staff_id: str
    name: str
    role: StaffRole
    department: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_doctor(self) -> bool:
        return self.role == StaffRole.DOCTOR
