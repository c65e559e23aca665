"""
CanarIAgentic Web - Contact Route Handler
=========================================

What:  Handles POST /api/contact from the landing page's contact form.
How:   Parses the JSON body, delegates to SubmissionService, returns JSON.

Response contract:
    200 {success: true, message, storage}  once validation passes, whether or
        not Supabase accepted the record
    400 {success: false, message}          missing fields or malformed email
    500 {success: false, message}          unexpected server error
"""

from fastapi import APIRouter, Depends

from canariagentic.dependencies import get_client_info
from canariagentic.schemas.submissions import (
    ContactRequest,
    ErrorResponse,
    SubmissionResponse,
)
from canariagentic.services.submission_service import ClientInfo, submission_service

router = APIRouter(prefix="/api", tags=["Forms"])


@router.post(
    "/contact",
    response_model=SubmissionResponse,
    responses={
        200: {"description": "Submission accepted", "model": SubmissionResponse},
        400: {"description": "Missing fields or invalid email", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Submit the contact form",
)
async def submit_contact(
    payload: ContactRequest,
    client: ClientInfo = Depends(get_client_info),
) -> SubmissionResponse:
    """
    Accept a contact request from a prospective client.

    Validation errors propagate as ValidationError and are rendered by the
    global handler; Supabase failures never reach this layer.
    """
    return await submission_service.submit_contact(payload, client)
