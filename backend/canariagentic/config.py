"""
CanarIAgentic Web - Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Store credentials:
    SUPABASE_URL and SUPABASE_ANON_KEY are optional. When either is missing,
    every route that would write to Supabase logs the record instead. The
    server still starts; a warning is emitted from the lifespan hook.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development. Production
    deployments set the Supabase credentials and restrict CORS_ORIGINS.
    """

    # ── Supabase (external store) ─────────────────────────────────────────
    # What: Base URL of the hosted project, e.g. https://xyz.supabase.co
    supabase_url: str = Field(default="", description="Supabase project base URL")

    # What: Anonymous API key, sent both as `apikey` and as the bearer token
    supabase_anon_key: str = Field(default="", description="Supabase anon API key")

    contact_table: str = Field(default="contactos")
    cookie_consent_table: str = Field(default="cookie_consents")

    # What: Version of the cookie policy the visitor consented to
    # Matches the column default of the cookie_consents table
    consent_version: str = Field(default="1.0")

    # ── Outbound call behaviour ───────────────────────────────────────────
    # A timeout counts as a store failure and takes the fallback path.
    store_timeout_seconds: float = Field(default=10.0, gt=0, le=60)

    # 1 = a single attempt, no retries. Raising it retries transport errors
    # (connection refused, timeouts); HTTP error statuses are never retried.
    store_retry_attempts: int = Field(default=1, ge=1, le=5)
    store_retry_min_wait: int = Field(default=1, ge=1, le=10)
    store_retry_max_wait: int = Field(default=4, ge=1, le=30)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    service_name: str = Field(default="canariagentic-web")
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """`{url}/rest/v1/...` must not end up with a double slash."""
        return v.strip().rstrip("/")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def store_configured(self) -> bool:
        """True when both Supabase credentials are present."""
        return bool(self.supabase_url and self.supabase_anon_key)

    def validate_store_credentials(self) -> None:
        """
        What:  Reports missing Supabase credentials.
        When:  Called during app startup (lifespan).
        Why:   Missing credentials are not fatal (submissions fall back to
               the log) but an operator should see why nothing reaches the DB.
        """
        errors = []
        if not self.supabase_url:
            errors.append("SUPABASE_URL is not set.")
        if not self.supabase_anon_key:
            errors.append("SUPABASE_ANON_KEY is not set.")
        if errors:
            raise ValueError(
                "Supabase is not configured, submissions will only be logged:\n"
                + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
