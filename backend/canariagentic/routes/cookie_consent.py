"""
CanarIAgentic Web - Cookie Consent Route Handler
================================================

What:  Handles POST /api/cookie-consent, sent by the cookie banner whenever a
       visitor accepts, rejects or customizes cookies.
Why:   GDPR requires proof of consent; each decision is stored in the
       `cookie_consents` table, or logged when Supabase is unavailable.

The `storage` field of the response says which of the two happened.
"""

from fastapi import APIRouter, Depends

from canariagentic.dependencies import get_client_info
from canariagentic.schemas.submissions import (
    CookieConsentRequest,
    ErrorResponse,
    SubmissionResponse,
)
from canariagentic.services.submission_service import ClientInfo, submission_service

router = APIRouter(prefix="/api", tags=["Consent"])


@router.post(
    "/cookie-consent",
    response_model=SubmissionResponse,
    responses={
        200: {"description": "Decision recorded (see `storage`)", "model": SubmissionResponse},
        400: {"description": "Missing or invalid fields", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Record a cookie consent decision",
)
async def record_cookie_consent(
    payload: CookieConsentRequest,
    client: ClientInfo = Depends(get_client_info),
) -> SubmissionResponse:
    return await submission_service.record_cookie_consent(payload, client)
