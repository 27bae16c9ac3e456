"""HMO desk endpoints: claim queue, adjudication and the change feed."""

from typing import List, Optional

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

from ...application.dto.claim_dto import (
    ProcessClaimRequest as ProcessClaimDTO,
    WatchClaimsRequest,
)
from ...application.services.lookups import require_claim
from ...application.use_cases.hmo_claims import (
    CompleteClaimUseCase,
    ListClaimsUseCase,
    ProcessHMOClaimUseCase,
    RefreshHMOClaimsUseCase,
    WatchClaimsUseCase,
)
from ...domain.enums.claims import ClaimStatus
from ..deps import ClaimSettingsDep, FeeScheduleDep, StoreDep
from ..schemas.appointments import AppointmentSchema
from ..schemas.billing import BillSchema
from ..schemas.claims import ClaimFeedSchema, ClaimSchema, ProcessClaimRequest
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.visits import VisitSchema
from ..utils.responses import ok

router = APIRouter(prefix="/hmo", tags=["hmo"])


class ProcessClaimResponse(BaseModel):
    claim: ClaimSchema
    bill: BillSchema
    visit: Optional[VisitSchema] = None
    appointment: Optional[AppointmentSchema] = None


@router.get("/claims", response_model=ApiResponse[List[ClaimSchema]])
async def list_claims(
    request: Request,
    store: StoreDep,
    status_filter: Optional[ClaimStatus] = Query(None, alias="status"),
):
    claims = await ListClaimsUseCase(store).execute(status_filter)
    return ok(request, data=[ClaimSchema.from_domain(c) for c in claims], message="OK")


@router.get(
    "/claims/changes",
    response_model=ApiResponse[ClaimFeedSchema],
    summary="Long-poll for claim changes since a revision",
)
async def watch_claims(
    request: Request,
    store: StoreDep,
    claim_settings: ClaimSettingsDep,
    since: Optional[int] = Query(None, ge=0, description="Last revision the desk rendered"),
    status_filter: Optional[ClaimStatus] = Query(None, alias="status"),
):
    """
    Returns immediately with the current claims when ``since`` is omitted.

    Otherwise waits up to the configured poll interval for the claim revision
    to move past ``since``; ``changed`` is false when nothing moved.
    """
    feed = await WatchClaimsUseCase(store).execute(
        WatchClaimsRequest(
            since=since,
            timeout=claim_settings.poll_interval_seconds,
            status=status_filter,
        )
    )
    return ok(
        request,
        data=ClaimFeedSchema(
            revision=feed.revision,
            changed=feed.changed,
            claims=[ClaimSchema.from_domain(c) for c in feed.claims],
        ),
        message="OK" if feed.changed else "No changes",
    )


@router.post("/claims/refresh", response_model=ApiResponse[List[ClaimSchema]])
async def refresh_claims(request: Request, store: StoreDep, fee_schedule: FeeScheduleDep):
    created = await RefreshHMOClaimsUseCase(store, fee_schedule).execute()
    return ok(
        request,
        data=[ClaimSchema.from_domain(c) for c in created],
        message=f"{len(created)} claim(s) created",
    )


@router.get("/claims/{claim_id}", response_model=ApiResponse[ClaimSchema])
async def get_claim(request: Request, claim_id: str, store: StoreDep):
    claim = await require_claim(store, claim_id)
    return ok(request, data=ClaimSchema.from_domain(claim), message="OK")


@router.post(
    "/claims/{claim_id}/process",
    response_model=ApiResponse[ProcessClaimResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Claim already processed"},
        422: {"model": ErrorResponse, "description": "Rejection reason missing"},
    },
)
async def process_claim(
    http_request: Request,
    claim_id: str,
    request: ProcessClaimRequest,
    store: StoreDep,
    claim_settings: ClaimSettingsDep,
):
    result = await ProcessHMOClaimUseCase(store, claim_settings.desk_name).execute(
        ProcessClaimDTO(
            claim_id=claim_id,
            decision=request.decision,
            approver=request.approver,
            approval_code=request.approval_code,
            approved_item_ids=request.approved_item_ids,
            rejection_reason=request.rejection_reason,
            notes=request.notes,
        )
    )
    return ok(
        http_request,
        data=ProcessClaimResponse(
            claim=ClaimSchema.from_domain(result.claim),
            bill=BillSchema.from_domain(result.bill),
            visit=VisitSchema.from_domain(result.visit) if result.visit else None,
            appointment=(
                AppointmentSchema.from_domain(result.appointment) if result.appointment else None
            ),
        ),
        message=f"Claim {result.claim.status.value}",
    )


@router.post("/claims/{claim_id}/complete", response_model=ApiResponse[ClaimSchema])
async def complete_claim(request: Request, claim_id: str, store: StoreDep):
    claim = await CompleteClaimUseCase(store).execute(claim_id)
    return ok(request, data=ClaimSchema.from_domain(claim), message="Completed")
