"""Services Layer — the imperative shell around the pure core.

Invariants:
    - Every query built here is tenant-scoped (compile_predicate or explicit company_domain)
    - Services commit through infrastructure.database.commit (uniform error mapping)
    - Services raise IPerformanceError subclasses; routes never catch them

Design Decisions:
    - One service module per record kind, plus shared listing/aggregation/counter modules
"""
