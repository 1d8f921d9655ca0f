"""
Job-related API endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from marketplace.api.dependencies import (
    ClaimJobUseCaseDep,
    ContractorMatcherDep,
    CurrentContractorDep,
    CurrentUserIdDep,
    EnrichedIssueRepositoryDep,
    IssueRepositoryDep,
    OfferDispatchEnqueuerDep,
)
from marketplace.api.schemas.appointment import AppointmentResponse
from marketplace.api.schemas.job import (
    ClaimJobResponse,
    ContractorMatchResponse,
    JobResponse,
    OfferDispatchResponse,
)
from marketplace.application.use_cases.claim_job import ClaimJobRequest
from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.authorization_error import AuthorizationError
from marketplace.domain.exceptions.claim_error import (
    ClaimRetryExceededError,
    JobAlreadyClaimedError,
)
from marketplace.domain.exceptions.not_found_error import NotFoundError

logger = get_logger(__name__)
router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/", response_model=list[JobResponse])
async def list_jobs(
    contractor: CurrentContractorDep,
    enriched_issue_repository: EnrichedIssueRepositoryDep,
    issue_repository: IssueRepositoryDep,
    claimed: bool = Query(False, description="List my claimed jobs instead of open ones"),
    limit: int = Query(100, ge=1, le=500),
):
    """List open jobs, or the jobs the caller has claimed."""
    if claimed:
        jobs = await enriched_issue_repository.list_claimed_by(contractor.id)
    else:
        jobs = await enriched_issue_repository.list_open(limit=limit)

    responses = []
    for job in jobs:
        issue = await issue_repository.get_by_id(job.issue_id)
        responses.append(JobResponse.from_entities(job, issue))
    return responses


@router.post("/{job_id}/claim", response_model=ClaimJobResponse)
async def claim_job(
    job_id: UUID,
    contractor_id: CurrentUserIdDep,
    use_case: ClaimJobUseCaseDep,
    issue_repository: IssueRepositoryDep,
):
    """Claim a job and book the caller's next free slot."""
    try:
        result = await use_case.execute(
            ClaimJobRequest(enriched_issue_id=job_id, contractor_id=contractor_id)
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except AuthorizationError as e:
        logger.warning(
            "Claim rejected", job_id=str(job_id), contractor_id=str(contractor_id)
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except JobAlreadyClaimedError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Job was already claimed by another contractor",
        )
    except ClaimRetryExceededError as e:
        logger.error("Claim kept conflicting", job_id=str(job_id), error=str(e))
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not book a slot, please retry",
        )

    issue = await issue_repository.get_by_id(result.claimed_job.issue_id)
    return ClaimJobResponse(
        success=True,
        message="Job claimed successfully"
        if result.appointment
        else "Job claimed; no open slot found, schedule manually",
        job=JobResponse.from_entities(result.claimed_job, issue),
        appointment=AppointmentResponse.from_entity(result.appointment)
        if result.appointment
        else None,
    )


@router.get("/{job_id}/matches", response_model=list[ContractorMatchResponse])
async def get_job_matches(
    job_id: UUID,
    enriched_issue_repository: EnrichedIssueRepositoryDep,
    issue_repository: IssueRepositoryDep,
    matcher: ContractorMatcherDep,
    _: CurrentUserIdDep,
    limit: Optional[int] = Query(None, ge=1, le=100),
):
    """Rank contractors for a job without calling anyone."""
    job = await enriched_issue_repository.get_by_id(job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")

    issue = await issue_repository.get_by_id(job.issue_id)
    if not issue:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Issue not found"
        )

    matches = await matcher.find_matching_contractors(
        matcher.criteria_for_job(issue, job), max_results=limit
    )
    return [ContractorMatchResponse.from_match(match) for match in matches]


@router.post(
    "/{job_id}/offers",
    response_model=OfferDispatchResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def dispatch_job_offers(
    job_id: UUID,
    enriched_issue_repository: EnrichedIssueRepositoryDep,
    enqueue_offer_dispatch: OfferDispatchEnqueuerDep,
    _: CurrentUserIdDep,
):
    """Queue a round of offer calls for an unclaimed job."""
    job = await enriched_issue_repository.get_by_id(job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")

    if job.is_claimed or not job.offer_state.can_dispatch():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Job offers cannot be dispatched in state {job.offer_state.value}",
        )

    try:
        enqueue_offer_dispatch(job.id)
    except Exception as e:
        logger.error("Failed to queue offer dispatch", job_id=str(job_id), error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to queue offer dispatch",
        )

    logger.info("Offer dispatch queued", job_id=str(job_id))
    return OfferDispatchResponse(
        success=True, message="Offer dispatch queued", enriched_issue_id=job.id
    )
