"""
CanarIAgentic Web - Application Package Initializer
===================================================

What: Marks the `canariagentic` directory as a Python package.
Who:  Used by uvicorn (canariagentic.main:app), pytest, and the packaging metadata.

Architecture Note:
    The site backend follows the same layered layout as a larger API:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Submission Logic)     │  ← Validation, normalization, fallback
    ├─────────────────────────────────────┤
    │          Schemas (Contracts)        │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │     Store Client (Supabase REST)    │  ← One outbound POST per submission
    └─────────────────────────────────────┘

    Nothing is persisted in-process. Submissions are forwarded to Supabase
    when it is configured and reachable, and written to the log otherwise.
"""

__version__ = "1.0.0"
