"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at the HTTP boundary only; the store receives plain values
"""
