"""XPosts API Package — posts CRUD over a hosted database service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
