"""Quota Engine: per-tenant record caps, admission control and oldest-first eviction.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
