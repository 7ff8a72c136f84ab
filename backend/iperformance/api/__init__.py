"""API Layer — FastAPI routes, request dependencies, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Tenant identity is resolved once per request by get_tenant_context

Design Decisions:
    - Thin routes delegate to services; filter parsing lives in core
"""
