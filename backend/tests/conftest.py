"""
CanarIAgentic Web - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── store_configured: Supabase credentials patched into settings
    ├── supabase_mock: httpx.MockTransport capturing outbound store requests
    ├── client_info: Fixed request metadata for service-level tests
    ├── contact_payload / consent_payload: Valid request bodies
    └── test_client: HTTPX AsyncClient talking to the ASGI app in-process
"""

import json
import os
from typing import List, Optional

# Override settings for testing BEFORE any application imports, so a developer's
# .env with real credentials is never used by the suite
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from canariagentic.config import settings
from canariagentic.services.store import supabase_store
from canariagentic.services.submission_service import ClientInfo

TEST_SUPABASE_URL = "https://example.supabase.co"
TEST_SUPABASE_KEY = "test-anon-key"


class SupabaseMock:
    """
    Records every request sent to the fake Supabase and answers with
    `status_code`, or raises `error` to simulate a transport failure.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 201
        self.error: Optional[Exception] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text="" if self.status_code < 400 else '{"message":"denied"}')

    def json_bodies(self) -> list:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def store_configured(monkeypatch):
    """Patches Supabase credentials into the settings singleton."""
    monkeypatch.setattr(settings, "supabase_url", TEST_SUPABASE_URL)
    monkeypatch.setattr(settings, "supabase_anon_key", TEST_SUPABASE_KEY)
    return settings


@pytest.fixture
def supabase_mock(monkeypatch):
    """
    Routes the store client's HTTP traffic to an in-memory handler.

    Usage:
        async def test_x(store_configured, supabase_mock):
            supabase_mock.status_code = 500
            ...
            assert len(supabase_mock.requests) == 1
    """
    mock = SupabaseMock()
    monkeypatch.setattr(supabase_store, "_transport", httpx.MockTransport(mock.handler))
    return mock


@pytest.fixture
def client_info():
    return ClientInfo(ip_address="203.0.113.7", user_agent="pytest-agent/1.0")


@pytest.fixture
def contact_payload():
    return {
        "name": "  Ana Pérez  ",
        "email": "Ana.Perez@Example.COM",
        "company": " Hotel Atlántico ",
        "phone": "",
        "message": " Queremos formar a nuestro equipo en IA. ",
        "service": "formacion",
    }


@pytest.fixture
def consent_payload():
    return {
        "user_id": "user_1700000000000_abc123xyz",
        "decision_type": "custom",
        "cookie_settings": {
            "necessary": True,
            "analytics": True,
            "marketing": False,
            "preferences": False,
        },
        "page_url": "https://canariagentic.pages.dev/#contact",
    }


@pytest_asyncio.fixture
async def test_client():
    """
    Provides an async HTTP test client for endpoint testing.

    raise_app_exceptions=False lets tests observe the 500 response produced
    by the catch-all handler instead of the re-raised exception.
    """
    from canariagentic.main import app
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
