"""
CanarIAgentic Web - Submission Service Unit Tests
=================================================

What:  Tests for SubmissionService validation, normalization and fallback.
How:   The Supabase client is patched with AsyncMock (no HTTP involved).

What we test:
    ✅ Required fields and email format for each form
    ✅ Normalized contact record (trimmed, lower-cased email, nulls)
    ✅ Store failures and missing credentials fall back to the log
    ✅ Newsletter never calls the store
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from canariagentic.exceptions import StoreError, StoreNotConfiguredError, ValidationError
from canariagentic.schemas.submissions import (
    ContactRequest,
    CookieConsentRequest,
    NewsletterRequest,
)
from canariagentic.services.submission_service import (
    SubmissionService,
    is_valid_email,
)


class TestEmailPattern:

    @pytest.mark.parametrize("email", ["a@b.co", "ana.perez@example.com", "x+tag@sub.domain.es"])
    def test_accepts_basic_shape(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize(
        "email",
        ["", "plainaddress", "a@b", "@example.com", "ana @example.com", "a@@b.com", "a@b.c om"],
    )
    def test_rejects_malformed(self, email):
        assert not is_valid_email(email)


class TestSubmitContact:
    """Tests for the contact form workflow."""

    def setup_method(self):
        self.service = SubmissionService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["name", "email", "message"])
    async def test_missing_required_field(self, missing, contact_payload, client_info):
        contact_payload.pop(missing)
        with patch("canariagentic.services.submission_service.supabase_store") as mock_store:
            mock_store.insert = AsyncMock()
            with pytest.raises(ValidationError, match="Faltan campos requeridos"):
                await self.service.submit_contact(ContactRequest(**contact_payload), client_info)
            mock_store.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_name_counts_as_missing(self, contact_payload, client_info):
        contact_payload["name"] = "   "
        with pytest.raises(ValidationError, match="Faltan campos requeridos"):
            await self.service.submit_contact(ContactRequest(**contact_payload), client_info)

    @pytest.mark.asyncio
    async def test_invalid_email(self, contact_payload, client_info):
        contact_payload["email"] = "not-an-email"
        with pytest.raises(ValidationError, match="Email inválido") as exc_info:
            await self.service.submit_contact(ContactRequest(**contact_payload), client_info)
        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_forwards_normalized_record(self, contact_payload, client_info):
        with patch("canariagentic.services.submission_service.supabase_store") as mock_store:
            mock_store.insert = AsyncMock()

            result = await self.service.submit_contact(ContactRequest(**contact_payload), client_info)

            assert result.success is True
            assert result.storage == "supabase"
            assert result.message.startswith("Mensaje enviado correctamente")

            mock_store.insert.assert_awaited_once()
            table, record = mock_store.insert.await_args.args
            assert table == "contactos"
            assert record["name"] == "Ana Pérez"
            assert record["email"] == "ana.perez@example.com"
            assert record["company"] == "Hotel Atlántico"
            assert record["phone"] is None
            assert record["message"] == "Queremos formar a nuestro equipo en IA."
            assert record["service"] == "formacion"
            assert record["ip_address"] == "203.0.113.7"
            assert record["user_agent"] == "pytest-agent/1.0"
            assert record["created_at"]

    @pytest.mark.asyncio
    async def test_store_error_falls_back_to_log(self, contact_payload, client_info, caplog):
        caplog.set_level(logging.INFO, logger="canariagentic")
        with patch("canariagentic.services.submission_service.supabase_store") as mock_store:
            mock_store.insert = AsyncMock(side_effect=StoreError(status_code=500))

            result = await self.service.submit_contact(ContactRequest(**contact_payload), client_info)

        assert result.success is True
        assert result.storage == "local_logs"
        assert result.message.startswith("Mensaje recibido correctamente")
        assert "Contact form submission (fallback)" in caplog.text
        assert "ana.perez@example.com" in caplog.text

    @pytest.mark.asyncio
    async def test_unconfigured_store_falls_back_to_log(self, contact_payload, client_info, caplog):
        caplog.set_level(logging.INFO, logger="canariagentic")
        with patch("canariagentic.services.submission_service.supabase_store") as mock_store:
            mock_store.insert = AsyncMock(side_effect=StoreNotConfiguredError())

            result = await self.service.submit_contact(ContactRequest(**contact_payload), client_info)

        assert result.storage == "local_logs"
        assert "credentials not configured" in caplog.text


class TestSubscribeNewsletter:

    def setup_method(self):
        self.service = SubmissionService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", [None, "", "nope"])
    async def test_invalid_email(self, email):
        with pytest.raises(ValidationError, match="Email inválido"):
            await self.service.subscribe_newsletter(NewsletterRequest(email=email))

    @pytest.mark.asyncio
    async def test_logs_without_store_call(self, caplog):
        caplog.set_level(logging.INFO, logger="canariagentic")
        with patch("canariagentic.services.submission_service.supabase_store") as mock_store:
            mock_store.insert = AsyncMock()

            result = await self.service.subscribe_newsletter(
                NewsletterRequest(email="lector@example.com")
            )

            mock_store.insert.assert_not_awaited()
        assert result.success is True
        assert result.storage == "local_logs"
        assert "Newsletter subscription" in caplog.text
        assert "lector@example.com" in caplog.text


class TestRecordCookieConsent:

    def setup_method(self):
        self.service = SubmissionService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["user_id", "decision_type", "cookie_settings"])
    async def test_missing_required_field(self, missing, consent_payload, client_info):
        consent_payload.pop(missing)
        with pytest.raises(ValidationError):
            await self.service.record_cookie_consent(
                CookieConsentRequest(**consent_payload), client_info
            )

    @pytest.mark.asyncio
    async def test_unknown_decision_type(self, consent_payload, client_info):
        consent_payload["decision_type"] = "accept_some"
        with pytest.raises(ValidationError) as exc_info:
            await self.service.record_cookie_consent(
                CookieConsentRequest(**consent_payload), client_info
            )
        assert exc_info.value.field == "decision_type"

    @pytest.mark.asyncio
    async def test_empty_settings_map_is_accepted(self, consent_payload, client_info):
        consent_payload["cookie_settings"] = {}
        with patch("canariagentic.services.submission_service.supabase_store") as mock_store:
            mock_store.insert = AsyncMock()
            result = await self.service.record_cookie_consent(
                CookieConsentRequest(**consent_payload), client_info
            )
        assert result.storage == "supabase"

    @pytest.mark.asyncio
    async def test_stored_in_supabase(self, consent_payload, client_info):
        with patch("canariagentic.services.submission_service.supabase_store") as mock_store:
            mock_store.insert = AsyncMock()

            result = await self.service.record_cookie_consent(
                CookieConsentRequest(**consent_payload), client_info
            )

            table, record = mock_store.insert.await_args.args
        assert result.storage == "supabase"
        assert table == "cookie_consents"
        assert record["decision_type"] == "custom"
        assert record["cookie_settings"]["analytics"] is True
        assert record["consent_version"] == "1.0"
        # Server-observed values fill in what the body omitted
        assert record["ip_address"] == "203.0.113.7"
        assert record["user_agent"] == "pytest-agent/1.0"

    @pytest.mark.asyncio
    async def test_body_network_fields_take_precedence(self, consent_payload, client_info):
        consent_payload["ip_address"] = "198.51.100.1"
        consent_payload["user_agent"] = "Mozilla/5.0"
        with patch("canariagentic.services.submission_service.supabase_store") as mock_store:
            mock_store.insert = AsyncMock()
            await self.service.record_cookie_consent(
                CookieConsentRequest(**consent_payload), client_info
            )
            _, record = mock_store.insert.await_args.args
        assert record["ip_address"] == "198.51.100.1"
        assert record["user_agent"] == "Mozilla/5.0"

    @pytest.mark.asyncio
    async def test_store_failure_reports_local_logs(self, consent_payload, client_info, caplog):
        caplog.set_level(logging.INFO, logger="canariagentic")
        with patch("canariagentic.services.submission_service.supabase_store") as mock_store:
            mock_store.insert = AsyncMock(side_effect=StoreError(message="Could not reach Supabase"))

            result = await self.service.record_cookie_consent(
                CookieConsentRequest(**consent_payload), client_info
            )

        assert result.success is True
        assert result.storage == "local_logs"
        assert "Cookie consent (fallback)" in caplog.text
