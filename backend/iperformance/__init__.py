"""iPerformance Application Package — goals, objectives, tasks, risks and periods per tenant.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
