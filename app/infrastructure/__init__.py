"""Infrastructure Layer — database, security primitives and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - External failures mapped to core/errors.py types before leaving this layer
"""
