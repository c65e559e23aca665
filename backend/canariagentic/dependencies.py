"""
Dependency wiring for the FastAPI routes.
"""

from fastapi import Request
from starlette.requests import HTTPConnection

from canariagentic.services.submission_service import ClientInfo


def resolve_client_ip(conn: HTTPConnection) -> str:
    """
    Visitor IP for the current request.

    Cloudflare sets CF-Connecting-IP; other proxies set X-Forwarded-For, whose
    first entry is the original client. The socket peer is the last resort.
    Shared by the form routes and the access log so both report the same IP.
    """
    ip_address = conn.headers.get("CF-Connecting-IP")
    if not ip_address:
        forwarded = conn.headers.get("X-Forwarded-For", "")
        ip_address = forwarded.split(",")[0].strip()
    if not ip_address and conn.client:
        ip_address = conn.client.host
    return ip_address or "unknown"


def get_client_info(request: Request) -> ClientInfo:
    """Network metadata for the current request."""
    return ClientInfo(
        ip_address=resolve_client_ip(request),
        user_agent=request.headers.get("User-Agent") or "unknown",
    )
