"""
Structured care-pathway location stored on every visit.
"""

from dataclasses import dataclass
from typing import Optional

from ..enums.pathway import Department


@dataclass(frozen=True)
class CareLocation:
    """Immutable (department, diagnosis text) pair."""

    department: Department
    diagnosis_text: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.department, Department):
            object.__setattr__(self, "department", Department(self.department))
        if self.diagnosis_text is None:
            object.__setattr__(self, "diagnosis_text", "")

    def moved_to(
        self, department: Department, diagnosis_text: Optional[str] = None
    ) -> "CareLocation":
        """Same diagnosis at another department, unless a new text is given."""
        text = self.diagnosis_text if diagnosis_text is None else diagnosis_text
        return CareLocation(department, text)

    def is_at(self, *departments: Department) -> bool:
        return self.department in departments

    @property
    def is_completed(self) -> bool:
        return self.department == Department.COMPLETED

    def __str__(self) -> str:
        if self.diagnosis_text:
            return f"{self.department.value}: {self.diagnosis_text}"
        return self.department.value
