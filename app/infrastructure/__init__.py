"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/
    - All external failures mapped to XPostsError subclasses (core/errors.py)
"""
