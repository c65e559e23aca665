# Routes package init
"""
CanarIAgentic Web - Routes Package
==================================

Route Inventory:
    - contact.py:         POST /api/contact
    - newsletter.py:      POST /api/newsletter
    - cookie_consent.py:  POST /api/cookie-consent
    - health.py:          GET  /api/health
    - pages.py:           GET  /

Routes stay thin: they parse the body, collect request metadata, and call
SubmissionService. Error formatting is done by the handlers in main.py.
"""
