# Services package init
"""
CanarIAgentic Web - Services Layer
==================================

Service Inventory:
    - SupabaseStore: REST insert into a Supabase table (httpx + tenacity)
    - SubmissionService: validation, normalization and forward-or-log policy
      for the contact, newsletter and cookie-consent forms
"""
