"""Pydantic Schemas — request/response contracts for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Wire format is camelCase (frontend contract); Python attributes stay snake_case

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - Services return these DTOs, so routes never touch ORM rows
"""
