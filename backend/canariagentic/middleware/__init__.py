# Middleware package init
"""
CanarIAgentic Web - Middleware Package
======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line can carry the ID.
"""
