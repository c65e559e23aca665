"""
CanarIAgentic Web - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the form endpoints.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) turn client-facing
       ones into `{success: false, message}` JSON responses.

Exception Hierarchy:
    CanarIAgenticError (base)
    ├── ValidationError            → 400 Bad Request (client can fix)
    └── StoreError                 → never surfaced, recovered by fallback logging
        └── StoreNotConfiguredError

Store errors are raised by the Supabase client and caught by the submission
service, which logs the record and still reports success to the visitor.
"""

from typing import Any, Dict, Optional


class CanarIAgenticError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CanarIAgenticError):
    """
    Raised when a submitted form fails validation.

    When:    Missing required fields, malformed email, unknown consent decision.
    HTTP:    400 Bad Request

    Example response:
        {
            "success": false,
            "message": "Email inválido",
            "error": "validation_error",
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        message: str = "Datos inválidos",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class StoreError(CanarIAgenticError):
    """
    Raised when Supabase rejects or cannot receive a record.

    What:    Non-2xx response or a transport failure (DNS, refused, timeout).
    Context: status code and response body when one was received.
    """

    def __init__(
        self,
        message: str = "Supabase request failed",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class StoreNotConfiguredError(StoreError):
    """Raised before any network I/O when Supabase credentials are missing."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Supabase credentials not configured", context=context)
