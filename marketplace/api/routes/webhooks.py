"""
Webhook endpoints for voice provider callbacks.
"""

from typing import Dict
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from marketplace.api.dependencies import ProcessOfferResponseUseCaseDep
from marketplace.api.schemas.webhook import (
    VoiceJobResponseResult,
    VoiceJobResponseWebhook,
)
from marketplace.application.use_cases.process_offer_response import (
    OfferResponseRequest,
)
from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.claim_error import ClaimRetryExceededError
from marketplace.domain.exceptions.not_found_error import NotFoundError

router = APIRouter()
logger = get_logger(__name__)


@router.post("/webhooks/voice/job-response")
async def voice_job_response_webhook(
    payload: VoiceJobResponseWebhook,
    use_case: ProcessOfferResponseUseCaseDep,
):
    """Handle the end-of-call report of a job offer call."""
    data = payload.structured_data
    if not payload.is_call_end or data is None:
        logger.info("Ignoring voice webhook", event_type=payload.type)
        return {"received": True}

    if not data.enriched_issue_id:
        logger.error("Voice webhook without job id")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing job ID"
        )

    try:
        enriched_issue_id = UUID(data.enriched_issue_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid job ID"
        )

    contractor_phone = payload.contractor_phone
    if not contractor_phone:
        logger.error("Voice webhook without contractor phone", job_id=str(enriched_issue_id))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Contractor not identified",
        )

    try:
        result = await use_case.execute(
            OfferResponseRequest(
                enriched_issue_id=enriched_issue_id,
                contractor_phone=contractor_phone,
                job_accepted=data.job_accepted,
                contractor_response=data.contractor_response,
                decline_reason=data.reason_for_decline,
            )
        )
    except NotFoundError as e:
        logger.error(
            "Voice webhook references unknown record",
            resource=e.resource,
            identifier=e.identifier,
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"{e.resource} not found"
        )
    except ClaimRetryExceededError as e:
        logger.error("Claim from voice webhook kept conflicting", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not book a slot, please retry",
        )

    return VoiceJobResponseResult(
        success=result.success,
        message=result.message,
        job_id=result.enriched_issue_id,
        contractor_id=result.contractor_id,
        appointment_id=result.appointment_id,
        contractor_response=result.contractor_response,
    )


@router.get("/webhooks/voice/job-response")
async def voice_job_response_status() -> Dict[str, str]:
    """Report that the endpoint is active."""
    return {"message": "Contractor job response webhook endpoint is active"}
