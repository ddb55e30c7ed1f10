"""Service Layer: IO-bound orchestration around the pure core.

Invariants:
    - Services fetch through RecordStore/TenantPlanProvider and decide through core/
    - No retries, no background work: every call is synchronous to its caller
"""
