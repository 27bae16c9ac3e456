from .memory import InMemoryHospitalStore
from .seed import seed_default_staff

__all__ = ["InMemoryHospitalStore", "seed_default_staff"]
