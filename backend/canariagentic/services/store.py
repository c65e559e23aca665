"""
CanarIAgentic Web - Supabase REST Store Client
==============================================

What:  Inserts one row into a Supabase table through its PostgREST endpoint.
Why:   Supabase is the only persistence the site has; it is reached over plain
       HTTPS with the anon key, no SDK required.
How:   POST {SUPABASE_URL}/rest/v1/{table} with `Prefer: return=minimal`.
Who:   Called by SubmissionService for contact and cookie-consent records.

Failure contract:
    insert() either returns (2xx) or raises a StoreError subclass:
    - StoreNotConfiguredError: credentials missing, no I/O attempted
    - StoreError: non-2xx status, an unusable SUPABASE_URL, or transport
      failure after the configured number of attempts
    The caller decides what to do with the record; this module never logs
    record contents.

Resource model:
    A fresh httpx.AsyncClient is opened per insert and closed on return.
    No connection pool outlives a request.
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential_jitter,
    retry_if_exception_type,
    before_sleep_log,
)

from canariagentic.config import settings
from canariagentic.exceptions import StoreError, StoreNotConfiguredError

logger = logging.getLogger(__name__)


class SupabaseStore:
    """
    Thin client for Supabase's REST insert endpoint.

    Args:
        transport: Optional httpx transport. Tests pass an httpx.MockTransport
                   to observe outbound requests without a network.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    @staticmethod
    def build_headers(api_key: str) -> Dict[str, str]:
        return {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

    @staticmethod
    def table_url(base_url: str, table: str) -> str:
        return f"{base_url}/rest/v1/{table}"

    async def insert(self, table: str, record: Dict[str, Any]) -> None:
        """
        Insert a single JSON record into `table`.

        Args:
            table:  Supabase table name (e.g. "contactos")
            record: JSON-serializable row

        Raises:
            StoreNotConfiguredError: SUPABASE_URL or SUPABASE_ANON_KEY missing
            StoreError: Supabase answered non-2xx or could not be reached
        """
        if not settings.store_configured:
            raise StoreNotConfiguredError(context={"table": table})

        url = self.table_url(settings.supabase_url, table)
        headers = self.build_headers(settings.supabase_anon_key)
        start_time = time.perf_counter()

        try:
            response = await self._post_with_retry(url, headers, record)
        # InvalidURL is not an HTTPError subclass; SUPABASE_URL is operator input
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "Supabase request to %s failed after %.0fms: %s",
                table,
                duration_ms,
                str(e) or type(e).__name__,
            )
            raise StoreError(
                message="Could not reach Supabase",
                context={"table": table, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not response.is_success:
            logger.error(
                "Supabase error: status=%d reason=%s table=%s body=%s",
                response.status_code,
                response.reason_phrase,
                table,
                response.text,
            )
            raise StoreError(
                message="Supabase rejected the record",
                status_code=response.status_code,
                context={"table": table, "body": response.text},
            )

        logger.debug("Supabase insert into %s completed in %.0fms", table, duration_ms)

    @retry(
        # Only transport errors are retried; an HTTP error status is an answer
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(settings.store_retry_attempts),
        wait=wait_exponential_jitter(
            initial=settings.store_retry_min_wait,
            max=settings.store_retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _post_with_retry(
        self, url: str, headers: Dict[str, str], record: Dict[str, Any]
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=settings.store_timeout_seconds,
        ) as client:
            return await client.post(url, headers=headers, json=record)


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless apart from the optional test transport; settings are read per call.
supabase_store = SupabaseStore()
