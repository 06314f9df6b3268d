"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input)
    - Core dataclasses never depend on schemas

Design Decisions:
    - Separate from core records: schemas are API contracts, records are domain data
"""
