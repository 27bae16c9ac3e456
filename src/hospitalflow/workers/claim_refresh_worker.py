"""
Background worker that periodically opens HMO claims for bills that are
waiting on the HMO desk without one.
"""

import asyncio
import logging
from typing import List

from hospitalflow.application.ports.store import HospitalStore
from hospitalflow.application.use_cases.hmo_claims import RefreshHMOClaimsUseCase
from hospitalflow.core.config import ClaimFeedSettings
from hospitalflow.core.structured_logger import get_logger
from hospitalflow.domain.entities.claim import HMOClaim
from hospitalflow.domain.value_objects.fee_schedule import FeeSchedule

logger = logging.getLogger("hospitalflow")
audit_logger = get_logger("hospitalflow.claims")


async def _refresh_once(store: HospitalStore, fee_schedule: FeeSchedule) -> List[HMOClaim]:
    """
    Perform a single pass that opens claims for HMO bills that never got one.
    """
    created = await RefreshHMOClaimsUseCase(store, fee_schedule).execute()
    for claim in created:
        audit_logger.info(
            "claim_refresh_opened",
            claim_id=claim.claim_id,
            bill_id=claim.source_id,
            patient_id=claim.patient_id,
            source=claim.source_department.value,
        )
    return created


async def run_claim_refresh_forever(
    store: HospitalStore,
    fee_schedule: FeeSchedule,
    settings: ClaimFeedSettings,
) -> None:
    """
    Run the claim refresh in a loop until cancelled.
    """
    if not settings.refresh_enabled:
        logger.info("[ClaimRefresh] Disabled via HMO_REFRESH_ENABLED")
        return

    interval = settings.refresh_interval_seconds
    logger.info("[ClaimRefresh] Starting (interval=%ss)", interval)

    while True:
        try:
            await _refresh_once(store, fee_schedule)
        except Exception as e:  # noqa: PERF203
            logger.error("[ClaimRefresh] Refresh iteration failed: %s", e, exc_info=True)
        await asyncio.sleep(interval)
