"""
CanarIAgentic Web - Submission Service (Form Business Logic)
============================================================

What:  Validates form submissions, normalizes them into records, and forwards
       them to Supabase with a log fallback.
Who:   Called by the contact, newsletter and cookie-consent route handlers.

Flow (contact and cookie consent):
    ┌───────────┐    ┌─────────────┐    ┌──────────────┐
    │ Validate  │───▶│  Normalize  │───▶│  Supabase    │──▶ storage="supabase"
    │ (400 on   │    │  (trim,     │    │  insert      │
    │  failure) │    │  lowercase) │    └──────┬───────┘
    └───────────┘    └─────────────┘           │ StoreError
                                               ▼
                                        ┌──────────────┐
                                        │ Fallback log │──▶ storage="local_logs"
                                        └──────────────┘

Once validation passes the visitor always gets a success response. The
`storage` field of the response is the only place where the two outcomes
differ.

The newsletter route only logs: there is no subscribers table.
"""

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from canariagentic.config import settings
from canariagentic.exceptions import StoreError, StoreNotConfiguredError, ValidationError
from canariagentic.schemas.submissions import (
    DECISION_TYPES,
    SERVICE_LABELS,
    STORAGE_LOCAL_LOGS,
    STORAGE_SUPABASE,
    ContactRecord,
    ContactRequest,
    CookieConsentRecord,
    CookieConsentRequest,
    NewsletterRequest,
    SubmissionResponse,
)
from canariagentic.services.store import supabase_store

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MISSING_FIELDS_MESSAGE = "Faltan campos requeridos"
INVALID_EMAIL_MESSAGE = "Email inválido"

CONTACT_SAVED_MESSAGE = "Mensaje enviado correctamente. Te contactaremos pronto."
CONTACT_RECEIVED_MESSAGE = "Mensaje recibido correctamente. Te contactaremos pronto."
NEWSLETTER_MESSAGE = "Te has suscrito correctamente al newsletter"
CONSENT_SAVED_MESSAGE = "Consentimiento registrado correctamente"
CONSENT_LOGGED_MESSAGE = "Consentimiento registrado en logs locales"


@dataclass(frozen=True)
class ClientInfo:
    """Network metadata observed by the server for the current request."""
    ip_address: str = "unknown"
    user_agent: str = "unknown"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def _clean(value: Optional[str]) -> Optional[str]:
    """Trim a string; blank or missing becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionService:
    """
    Business logic for the three form endpoints.

    Stateless: every method works only with its arguments and the settings,
    so a single module-level instance is shared by all requests.
    """

    async def submit_contact(
        self, payload: ContactRequest, client: ClientInfo
    ) -> SubmissionResponse:
        """
        Validate a contact form submission and forward it to Supabase.

        Raises:
            ValidationError: name, email or message missing, or malformed email
        """
        name = _clean(payload.name)
        message = _clean(payload.message)
        if not name or not payload.email or not message:
            raise ValidationError(
                message=MISSING_FIELDS_MESSAGE,
                context={
                    "missing": [
                        field
                        for field, value in (
                            ("name", name),
                            ("email", payload.email),
                            ("message", message),
                        )
                        if not value
                    ]
                },
            )
        if not is_valid_email(payload.email):
            raise ValidationError(message=INVALID_EMAIL_MESSAGE, field="email")

        record = ContactRecord(
            name=name,
            email=payload.email.strip().lower(),
            company=_clean(payload.company),
            phone=_clean(payload.phone),
            message=message,
            service=_clean(payload.service),
            created_at=_utcnow(),
            ip_address=client.ip_address,
            user_agent=client.user_agent,
        )
        if record.service and record.service not in SERVICE_LABELS:
            logger.info("Contact form with unrecognized service label: %s", record.service)
        data = record.model_dump(mode="json")

        storage = await self._forward(settings.contact_table, data, "Contact form submission")
        if storage == STORAGE_SUPABASE:
            logger.info(
                "Contact successfully saved to Supabase: name=%s email=%s timestamp=%s",
                record.name,
                record.email,
                data["created_at"],
            )
            return SubmissionResponse(message=CONTACT_SAVED_MESSAGE, storage=storage)
        return SubmissionResponse(message=CONTACT_RECEIVED_MESSAGE, storage=storage)

    async def subscribe_newsletter(self, payload: NewsletterRequest) -> SubmissionResponse:
        """
        Validate a newsletter signup and log it.

        Raises:
            ValidationError: email missing or malformed
        """
        if not payload.email or not is_valid_email(payload.email):
            raise ValidationError(message=INVALID_EMAIL_MESSAGE, field="email")

        data = {"email": payload.email, "timestamp": _utcnow().isoformat()}
        self._log_record("Newsletter subscription", data)
        return SubmissionResponse(message=NEWSLETTER_MESSAGE, storage=STORAGE_LOCAL_LOGS)

    async def record_cookie_consent(
        self, payload: CookieConsentRequest, client: ClientInfo
    ) -> SubmissionResponse:
        """
        Record a cookie banner decision for GDPR audit purposes.

        Raises:
            ValidationError: user_id, decision_type or cookie_settings missing,
                             or decision_type outside accept_all/reject_all/custom
        """
        user_id = _clean(payload.user_id)
        decision_type = _clean(payload.decision_type)
        if not user_id or not decision_type or payload.cookie_settings is None:
            raise ValidationError(message=MISSING_FIELDS_MESSAGE)
        if decision_type not in DECISION_TYPES:
            raise ValidationError(
                message=f"Tipo de decisión inválido: {decision_type}",
                field="decision_type",
                context={"allowed": list(DECISION_TYPES)},
            )

        record = CookieConsentRecord(
            user_id=user_id,
            decision_type=decision_type,
            cookie_settings=payload.cookie_settings,
            ip_address=_clean(payload.ip_address) or client.ip_address,
            user_agent=_clean(payload.user_agent) or client.user_agent,
            page_url=_clean(payload.page_url),
            timestamp=_utcnow(),
            consent_version=settings.consent_version,
        )
        data = record.model_dump(mode="json")

        storage = await self._forward(settings.cookie_consent_table, data, "Cookie consent")
        if storage == STORAGE_SUPABASE:
            return SubmissionResponse(message=CONSENT_SAVED_MESSAGE, storage=storage)
        return SubmissionResponse(message=CONSENT_LOGGED_MESSAGE, storage=storage)

    async def _forward(self, table: str, data: Dict[str, Any], label: str) -> str:
        """
        Try Supabase once; on any StoreError log the record instead.

        Returns the storage kind that received the record.
        """
        try:
            await supabase_store.insert(table, data)
            return STORAGE_SUPABASE
        except StoreError as e:
            if isinstance(e, StoreNotConfiguredError):
                logger.warning("%s: Supabase credentials not configured", label)
            self._log_record(f"{label} (fallback)", data)
            return STORAGE_LOCAL_LOGS

    @staticmethod
    def _log_record(label: str, data: Dict[str, Any]) -> None:
        logger.info(
            "%s: %s",
            label,
            json.dumps(data, ensure_ascii=False, sort_keys=True),
            extra={"record": data},
        )


submission_service = SubmissionService()
