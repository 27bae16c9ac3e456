"""FastAPI dependency providers.

The store lives on ``app.state`` so that every request, worker and test
client built from the same app shares one hospital state.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..application.ports.store import HospitalStore
from ..core.config import ClaimFeedSettings, Settings, get_settings
from ..domain.value_objects.fee_schedule import FeeSchedule


def get_store(request: Request) -> HospitalStore:
    """Get the hospital store created in the app lifespan."""
    return request.app.state.store


def get_app_settings() -> Settings:
    return get_settings()


def get_fee_schedule(settings: Annotated[Settings, Depends(get_app_settings)]) -> FeeSchedule:
    """Get the fee schedule for the configured hospital fees."""
    return settings.hospital.fee_schedule()


def get_claim_settings(settings: Annotated[Settings, Depends(get_app_settings)]) -> ClaimFeedSettings:
    return settings.hmo


# Dependency annotations for FastAPI
StoreDep = Annotated[HospitalStore, Depends(get_store)]
FeeScheduleDep = Annotated[FeeSchedule, Depends(get_fee_schedule)]
ClaimSettingsDep = Annotated[ClaimFeedSettings, Depends(get_claim_settings)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
