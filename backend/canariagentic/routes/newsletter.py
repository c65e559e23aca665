"""
CanarIAgentic Web - Newsletter Route Handler
============================================

What:  Handles POST /api/newsletter from the footer signup form.
Note:  Subscriptions are only written to the log; there is no subscribers
       table in Supabase yet, so `storage` is always "local_logs".
"""

from fastapi import APIRouter

from canariagentic.schemas.submissions import (
    ErrorResponse,
    NewsletterRequest,
    SubmissionResponse,
)
from canariagentic.services.submission_service import submission_service

router = APIRouter(prefix="/api", tags=["Forms"])


@router.post(
    "/newsletter",
    response_model=SubmissionResponse,
    responses={
        400: {"description": "Invalid email", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Subscribe to the newsletter",
)
async def subscribe_newsletter(payload: NewsletterRequest) -> SubmissionResponse:
    return await submission_service.subscribe_newsletter(payload)
