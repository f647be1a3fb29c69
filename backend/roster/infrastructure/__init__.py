"""Infrastructure Layer: database engine, logging, and other cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/ or services/
    - Backend exceptions are translated to core/errors.py types before leaving this layer
"""
