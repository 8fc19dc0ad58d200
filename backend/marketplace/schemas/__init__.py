"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate business rules at the system boundary
    - Wire format is camelCase (askingPrice, imageUrls...); Python attributes are snake_case

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
