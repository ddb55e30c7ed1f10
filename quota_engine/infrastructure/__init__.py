"""Infrastructure Layer: database session management and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ domain logic (errors excepted)
    - All driver exceptions are mapped to StorageError before leaving this layer
"""
