"""Pydantic Schemas: request validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary (user input)
    - Domain enums from core/ used for constrained fields

Design Decisions:
    - Separate from core records: schemas are API contracts, records are values
"""
