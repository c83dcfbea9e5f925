"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, serialized rows)
    - JSON keys are camelCase on the wire, snake_case in Python

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
