"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - camelCase aliases on the wire, snake_case attributes in Python

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
