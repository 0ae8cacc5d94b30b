"""Schemas — Pydantic models at the HTTP boundary.

Invariants:
    - Response envelopes are the only shapes serialized to clients
"""
