"""Pydantic Schemas: request/response validation for the quota API.

Invariants:
    - Schemas validate at the HTTP boundary only; core/ never imports them
    - Wire names are camelCase (aliases); Python attributes stay snake_case
"""
