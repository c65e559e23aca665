"""
CanarIAgentic Web - Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models for the form endpoints and the records sent to Supabase.
How:   Request models are deliberately lenient (every field optional) so that
       missing fields reach the submission service and produce the site's own
       400 messages instead of FastAPI's generic 422 payload.

Three kinds of models live here:
    - *Request: what the browser posts
    - *Record:  the normalized row forwarded to Supabase (or logged)
    - *Response: what the API returns
"""

from datetime import datetime
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

STORAGE_SUPABASE = "supabase"
STORAGE_LOCAL_LOGS = "local_logs"

StorageKind = Literal["supabase", "local_logs"]
DecisionType = Literal["accept_all", "reject_all", "custom"]

DECISION_TYPES = ("accept_all", "reject_all", "custom")

# Values offered by the <select name="service"> on the contact form
SERVICE_LABELS = {
    "formacion": "Formación en IA",
    "consultoria": "Consultoría de IA",
    "agentes": "Desarrollo de Agentes IA",
    "todo": "Todos los servicios",
}


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the browser sends
# ══════════════════════════════════════════════════════════════════════════


class ContactRequest(BaseModel):
    """
    Body of POST /api/contact, built from the contact form's FormData.

    Required (checked by the service, not here): name, email, message.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    service: Optional[str] = Field(
        default=None,
        description="Service label from the form select (formacion, consultoria, agentes, todo)",
    )

    # Phone numbers occasionally arrive as JSON numbers
    model_config = {"coerce_numbers_to_str": True}


class NewsletterRequest(BaseModel):
    """Body of POST /api/newsletter."""
    email: Optional[str] = None

    model_config = {"coerce_numbers_to_str": True}


class CookieConsentRequest(BaseModel):
    """
    Body of POST /api/cookie-consent, sent by the cookie banner script.

    `cookie_settings` maps toggle names (necessary, analytics, marketing,
    preferences) to booleans. The optional network fields let a proxy or the
    client report them; otherwise the server-observed values are used.
    """
    user_id: Optional[str] = None
    decision_type: Optional[str] = None
    cookie_settings: Optional[Dict[str, bool]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    page_url: Optional[str] = None

    # The banner's generated IDs are strings, but any JSON scalar is accepted
    model_config = {"coerce_numbers_to_str": True}


# ══════════════════════════════════════════════════════════════════════════
# Record Models: the normalized rows sent to Supabase
# ══════════════════════════════════════════════════════════════════════════


class ContactRecord(BaseModel):
    """One row of the `contactos` table."""
    name: str
    email: str
    company: Optional[str] = None
    phone: Optional[str] = None
    message: str
    service: Optional[str] = None
    created_at: datetime
    ip_address: str
    user_agent: str


class CookieConsentRecord(BaseModel):
    """One row of the `cookie_consents` table (id and created_at are DB defaults)."""
    user_id: str
    decision_type: DecisionType
    cookie_settings: Dict[str, bool]
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    page_url: Optional[str] = None
    timestamp: datetime
    consent_version: str


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SubmissionResponse(BaseModel):
    """
    Success body shared by the three form endpoints.

    `storage` tells the caller whether the record reached Supabase or was
    only written to the server log.
    """
    success: bool = True
    message: str
    storage: StorageKind


class ErrorResponse(BaseModel):
    """Failure body: `success` is always false; `error` is a machine-readable code."""
    success: bool = False
    message: str
    error: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'ok' while the process is serving")
    timestamp: datetime
    service: str
    version: str
    store_configured: bool = Field(description="Whether Supabase credentials are set")
