"""Core Layer: pure quota and eviction logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: services fetch counts and
      candidates, core decides what they mean
"""
