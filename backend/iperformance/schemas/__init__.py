"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, response records)
    - JSON field names are camelCase; Python attributes are snake_case
    - No request schema accepts company_domain or code (tenant and codes are server-owned)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
